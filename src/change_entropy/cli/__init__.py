"""CLI entry point: registers the analysis command."""

import typer

app = typer.Typer(
    name="change-entropy",
    help="Change entropy and refactoring analysis over the history of a git repository",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import commands to register them
from .analyze import main as _main  # noqa: F401, E402
