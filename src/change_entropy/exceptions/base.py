"""Root of the change-entropy error hierarchy."""

from typing import Dict, Mapping, Optional


class ChangeEntropyError(Exception):
    """Any failure the command line reports instead of a traceback.

    ``details`` locates the failure (period, commit, command, ...) and is
    rendered after the message in the order the fields were added. Fields
    whose value is None are left out.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, object]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = {}
        self.add_context(**(details or {}))

    def add_context(self, **context: object) -> "ChangeEntropyError":
        """Record where the error was seen while it propagates; returns self."""
        for key, value in context.items():
            if value is not None:
                self.details[key] = str(value)
        return self

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
