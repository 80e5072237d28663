"""
Root Typer application for the rulebundle CLI.
"""

from __future__ import annotations

from pathlib import Path

import typer
from typer import Typer

from rulebundle.bundle.descriptor import module_descriptor, parse_descriptor
from rulebundle.bundle.sources import discover_sources
from rulebundle.cli.utils import console, fail, output_rows, run_build, setup_logging
from rulebundle.core.result import Err, Ok

app = Typer(
    name="rulebundle",
    help="rulebundle — compile rule sources into deployable bundles.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from rulebundle import __version__

        try:
            v = pkg_version("rulebundle")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"rulebundle {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level (default: RULEBUNDLE_LOG_LEVEL)"),
) -> None:
    """rulebundle CLI — build bundles and inspect rule sources."""
    setup_logging(log_level)


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("build")
def build(
    rules_folder: Path = typer.Argument(..., help="Folder to scan for .drl/.dsl/.dslr files"),
    output: Path = typer.Argument(..., help="Archive file to write"),
    engine: str | None = typer.Option(
        None, "--engine", "-e", help="Rule engine ('module:attr' or entry-point name)"
    ),
    json_out: bool = typer.Option(False, "--json", help="Print the build report as JSON"),
) -> None:
    """Compile RULES_FOLDER into an archive at OUTPUT."""
    report = run_build(rules_folder, output, engine)
    if json_out:
        output_rows([report], as_json=True)
        return
    typer.echo(f"Bundle written to: {output}")
    for warning in report.warnings:
        console.print(f"  {warning}", style="yellow", markup=False, highlight=False)


@app.command("discover")
def discover(
    rules_folder: Path = typer.Argument(..., help="Folder to scan"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the rule files a build would pick up."""
    match discover_sources(rules_folder):
        case Err(error):
            fail(error)
        case Ok(manifest):
            rows = [
                {
                    "path": source.relative_path,
                    "kind": source.kind.name,
                    "compilable": source.kind.compilable,
                }
                for source in manifest
            ]
            output_rows(rows, as_json=json_out, title=f"Rule sources: {manifest.root}")


@app.command("descriptor")
def descriptor(
    parsed: bool = typer.Option(False, "--parsed", help="Show kbase/ksession structure instead of XML"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Print the module descriptor written into every bundle."""
    if not parsed:
        typer.echo(module_descriptor(), nl=False)
        return
    rows = [
        {"kbase": kbase, "ksession": session.name, "type": session.type}
        for kbase, sessions in parse_descriptor(module_descriptor()).kbases.items()
        for session in sessions
    ]
    output_rows(rows, as_json=json_out, title="Module descriptor")
