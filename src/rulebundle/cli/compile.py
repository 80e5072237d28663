"""
CLI: ``rulebundle-compile`` — build one rule bundle.

::

    rulebundle-compile <rules-folder> <output-archive> [--engine REF] [--log-level LEVEL]

Prints ``Bundle written to: <output-archive>`` on success. Missing
arguments print a one-line usage message. Every failure exits with
status 1.
"""

from __future__ import annotations

from pathlib import Path

import typer

from rulebundle.cli.utils import err_console, run_build, setup_logging

USAGE = "Usage: rulebundle-compile <rules-folder> <output-archive>"

app = typer.Typer(add_completion=False)


@app.command()
def main(
    rules_folder: Path | None = typer.Argument(None, help="Folder to scan for .drl/.dsl/.dslr files"),
    output: Path | None = typer.Argument(None, help="Archive file to write"),
    engine: str | None = typer.Option(
        None, "--engine", "-e", help="Rule engine ('module:attr' or entry-point name)"
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level (default: RULEBUNDLE_LOG_LEVEL)"),
) -> None:
    """Compile every rule file under RULES_FOLDER into OUTPUT."""
    if rules_folder is None or output is None:
        err_console.print(USAGE, markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(code=1)

    setup_logging(log_level)
    run_build(rules_folder, output, engine)
    typer.echo(f"Bundle written to: {output}")
