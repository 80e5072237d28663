"""Compile & diagnose — run the rule compiler over a staged filesystem.

The compiler is the injected :class:`~rulebundle.engine.protocol.RuleEngine`.
Its diagnostics are filtered to ``ERROR`` severity; a single error anywhere
fails the whole bundle with :class:`CompilationFailedError`, whose
``messages`` keep the compiler's own ordering. Warnings and infos are
logged and carried on the :class:`CompiledModule`.

Partial, per-rule success is not supported.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from rulebundle.bundle.staging import StagedFilesystem
from rulebundle.core.errors import CompilationFailedError, EngineFailureError
from rulebundle.core.logging import get_logger
from rulebundle.core.result import Err, Ok, Result, try_result_with
from rulebundle.core.security import harden_xml_parsers
from rulebundle.core.settings import get_settings
from rulebundle.engine.protocol import BuildSession, RuleEngine

logger = get_logger(__name__)


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class Diagnostic:
    """A compiler message. ``path`` and ``line`` are set when the engine knows them."""

    severity: Severity
    message: str
    path: str | None = None
    line: int | None = None

    @property
    def is_error(self) -> bool:
        return Severity(self.severity) is Severity.ERROR

    def __str__(self) -> str:
        where = ""
        if self.path:
            where = f" {self.path}" + (f":{self.line}" if self.line is not None else "")
        return f"[{Severity(self.severity).value}]{where} {self.message}"


@dataclass(frozen=True)
class CompiledModule:
    """Handle to a successful build; serialized lazily by the extractor."""

    session: BuildSession
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    def to_bytes(self) -> bytes:
        return self.session.compiled_bytes()


def _build(engine: RuleEngine, staged: StagedFilesystem) -> tuple[BuildSession, list[Diagnostic]]:
    session = engine.new_build_session()
    for path, content in staged:
        session.stage(path, content)
    # engines may report plain strings; an unknown severity is an engine failure
    diagnostics = [replace(d, severity=Severity(d.severity)) for d in session.build()]
    return session, diagnostics


def compile_staged(engine: RuleEngine, staged: StagedFilesystem) -> Result[CompiledModule]:
    """Compile ``staged`` with ``engine``.

    Returns:
        ``Ok(CompiledModule)`` when the compiler reported no errors,
        ``Err(CompilationFailedError)`` listing every error message in
        compiler order, or ``Err(EngineFailureError)`` if the engine raised.
    """
    if get_settings().harden_xml:
        harden_xml_parsers()

    return try_result_with(lambda: _build(engine, staged), EngineFailureError.wrap).flat_map(
        lambda built: _diagnose(*built, rule_count=len(staged.rule_paths))
    )


def _diagnose(
    session: BuildSession, diagnostics: list[Diagnostic], *, rule_count: int
) -> Result[CompiledModule]:
    errors = [d for d in diagnostics if d.is_error]
    others = tuple(d for d in diagnostics if not d.is_error)
    for diagnostic in others:
        log = logger.info if diagnostic.severity is Severity.INFO else logger.warning
        log(
            "compile.diagnostic",
            severity=diagnostic.severity.value,
            message=diagnostic.message,
            path=diagnostic.path,
            line=diagnostic.line,
        )

    if errors:
        return Err(CompilationFailedError([d.message for d in errors]))

    logger.debug("bundle.compiled", rules=rule_count, warnings=len(others))
    return Ok(CompiledModule(session=session, diagnostics=others))


__all__ = [
    "Severity",
    "Diagnostic",
    "CompiledModule",
    "compile_staged",
]
