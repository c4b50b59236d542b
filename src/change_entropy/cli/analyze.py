"""Main analysis command."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..analysis import AnalysisDriver
from ..config import load_config
from ..exceptions import ChangeEntropyError, ConfigurationError
from ..logging_config import setup_logging
from . import app
from ._common import console


@app.command()
def main(
    repository_path: Optional[Path] = typer.Option(
        None,
        "-r",
        "--repository-path",
        help="Git repository to analyse",
    ),
    period_length: Optional[int] = typer.Option(
        None,
        "-p",
        "--period-length",
        help="Number of non-merge commits in one period",
    ),
    mode: Optional[int] = typer.Option(
        None,
        "-m",
        "--mode",
        help=(
            "Required. 1 period entropy | 2 file entropy | 3 file entropy, refactorings marked | "
            "4 file entropy, changed periods only | 5 as 4, refactorings marked | "
            "6 percentage change between periods | 7 percentage change around refactorings"
        ),
    ),
    filters: Optional[Path] = typer.Option(
        None,
        "-f",
        "--filters",
        help="YAML file listing file types, excluded path patterns and refactoring types",
    ),
    output: Optional[str] = typer.Option(
        None,
        "-o",
        "--output",
        help="Results CSV file (default: results.csv)",
    ),
    normalise: bool = typer.Option(
        False,
        "--normalise",
        help="Normalise period entropy by the lines of code in the system",
    ),
    refminer: Optional[str] = typer.Option(
        None,
        "--refminer",
        help="RefactoringMiner jar or launcher (default: auto-detect)",
    ),
    refminer_timeout: Optional[int] = typer.Option(
        None,
        "--refminer-timeout",
        help="Seconds allowed per RefactoringMiner call (default: no limit)",
        hidden=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every commit, file and refactoring",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    log_file: Optional[str] = typer.Option(
        None,
        "--log-file",
        help="Also append logs to this file",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Measure how scattered changes are across periods of commits and relate it
    to refactorings.

    [bold cyan]Examples:[/bold cyan]

      change-entropy -r ../project -p 50 -m 1

      change-entropy -r ../project -p 50 -m 6 -f filters.yaml -o changes.csv
    """
    from .. import __version__

    if version:
        console.print(
            f"[bold cyan]change-entropy[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit(0)

    logger = setup_logging(
        verbose=verbose,
        quiet=quiet,
        log_file=log_file,
        repository=str(repository_path) if repository_path else None,
    )

    try:
        config = load_config(
            filters_file=filters,
            repository_path=str(repository_path) if repository_path else None,
            period_length=period_length,
            mode=mode,
            results_path=output,
            normalise=True if normalise else None,
            refminer_path=refminer,
            refminer_timeout=refminer_timeout,
        )
        driver = AnalysisDriver(config)
        results = driver.run()
        console.print(f"[green]Results written to[/green] {escape(str(results))}")

    except ConfigurationError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except ChangeEntropyError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
