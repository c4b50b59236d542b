"""Information-theoretic primitives."""

from .entropy import Entropy

__all__ = ["Entropy"]
