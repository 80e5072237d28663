"""
CLI utility helpers — logging setup, build runner, output formatting.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rulebundle.bundle.pipeline import BuildReport, compile_bundle
from rulebundle.core.errors import RuleBundleError
from rulebundle.core.logging import configure_logging
from rulebundle.core.settings import get_settings

console = Console()
err_console = Console(stderr=True)


# ── Setup helpers ────────────────────────────────────────────────────────


def setup_logging(level: str | None = None) -> None:
    """Configure structlog from settings, with ``level`` overriding ``RULEBUNDLE_LOG_LEVEL``."""
    settings = get_settings()
    try:
        configure_logging(
            level=level or settings.log_level,
            json_format=settings.log_format == "json",
        )
    except ValueError as e:
        err_console.print(f"[bold red]Error[/bold red] (CONFIG): {escape(str(e))}")
        raise typer.Exit(code=1) from e


def run_build(rules_folder: Path, output: Path, engine_ref: str | None) -> BuildReport:
    """Build one bundle, exiting 1 on any failure.

    The engine is resolved only after the sources staged, so input errors win.
    """
    try:
        return compile_bundle(rules_folder, output, engine_ref=engine_ref)
    except RuleBundleError as e:
        fail(e)


# ── Output helpers ───────────────────────────────────────────────────────


def fail(error: RuleBundleError) -> NoReturn:
    """Print ``error`` as ``Error (<CATEGORY>): <message>`` on stderr and exit 1."""
    err_console.print(
        f"[bold red]Error[/bold red] ({error.category.value}): {escape(error.message.rstrip())}",
        soft_wrap=True,
    )
    raise typer.Exit(code=1)


def _to_dict(obj: Any) -> dict[str, Any]:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    return value


def output_rows(
    rows: list[dict[str, Any]],
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render a list of dicts as a Rich table, or as JSON with ``as_json``."""
    rows = [{k: _plain(v) for k, v in _to_dict(row).items()} for row in rows]

    if as_json:
        console.print_json(json.dumps(rows, default=str))
        return

    if not rows:
        console.print("[dim]No items.[/dim]")
        return

    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(escape(str(v)) for v in row.values()))
    console.print(table)
