"""
Bundle build pipeline — discover, stage, compile, persist.

``BundleCompiler.build`` chains the four stages with ``flat_map``: each
stage runs only if the previous one returned ``Ok``, and the first ``Err``
is returned as-is. Progress is tracked as an explicit, strictly linear
state machine:

::

    INIT ──► DISCOVERED ──► STAGED ──► COMPILED ──► PERSISTED

There are no retries and no back-transitions. A failed build leaves the
stage at the last one reached and writes nothing to the output path
unless the failure happened during the write itself.

Usage::

    from rulebundle.bundle.pipeline import BundleCompiler, compile_bundle

    # Result-returning API
    result = BundleCompiler(engine).build("rules/", "dist/rules.jar")
    match result:
        case Ok(report):
            print(report.archive_size)
        case Err(error):
            print(error.to_dict())

    # Raising API
    report = compile_bundle("rules/", "dist/rules.jar", engine=engine)

Tags:
    pipeline, state-machine, result-pattern, rulebundle
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rulebundle.bundle.compiler import CompiledModule, Diagnostic, compile_staged
from rulebundle.bundle.extractor import write_archive
from rulebundle.bundle.sources import SourceManifest, discover_sources
from rulebundle.bundle.staging import RULES_STAGING_ROOT, stage_sources
from rulebundle.core.errors import RuleBundleError
from rulebundle.core.logging import LogContext, get_logger
from rulebundle.core.result import Result, try_result
from rulebundle.engine.protocol import RuleEngine
from rulebundle.engine.resolver import resolve_engine

logger = get_logger(__name__)


class BuildStage(str, Enum):
    INIT = "INIT"
    DISCOVERED = "DISCOVERED"
    STAGED = "STAGED"
    COMPILED = "COMPILED"
    PERSISTED = "PERSISTED"


_BUILD_ORDER = list(BuildStage)


@dataclass(frozen=True)
class BuildReport:
    """Summary of a successful build."""

    source_root: Path
    output: Path
    file_count: int
    compilable_count: int
    archive_size: int
    warnings: tuple[Diagnostic, ...] = ()
    stage: BuildStage = BuildStage.PERSISTED


@dataclass
class _BuildRun:
    """Mutable progress of one build call; never shared between calls."""

    source_root: Path
    output: Path
    stage: BuildStage = BuildStage.INIT
    manifest: SourceManifest | None = None
    warnings: tuple[Diagnostic, ...] = field(default_factory=tuple)

    def advance(self, to: BuildStage) -> None:
        expected = _BUILD_ORDER[_BUILD_ORDER.index(self.stage) + 1]
        if to is not expected:
            raise RuntimeError(f"Illegal build transition {self.stage.value} -> {to.value}")
        self.stage = to
        logger.debug("bundle.stage", stage=to.value)

    def discovered(self, manifest: SourceManifest) -> None:
        self.manifest = manifest
        self.advance(BuildStage.DISCOVERED)

    def compiled(self, module: CompiledModule) -> None:
        self.warnings = module.diagnostics
        self.advance(BuildStage.COMPILED)

    def failed(self, error: Exception) -> None:
        if isinstance(error, RuleBundleError):
            error.with_context(
                stage=self.stage.value,
                source_root=str(self.source_root),
                output_path=str(self.output),
            )
            logger.error("bundle.build_failed", **error.to_dict())
        else:
            logger.error("bundle.build_failed", stage=self.stage.value, error=str(error))

    def report(self, path: Path) -> BuildReport:
        assert self.manifest is not None
        return BuildReport(
            source_root=self.manifest.root,
            output=path,
            file_count=len(self.manifest),
            compilable_count=self.manifest.compilable,
            archive_size=path.stat().st_size,
            warnings=self.warnings,
            stage=self.stage,
        )


class BundleCompiler:
    """Builds rule bundles with an injected rule engine.

    Parameters
    ----------
    engine:
        The rule compiler. ``None`` resolves it on first use, after the
        sources were discovered and staged.
    engine_ref:
        ``"module:attr"`` or entry-point name used when ``engine`` is None.
        Falls back to the configured engine.
    staging_root:
        In-archive prefix for rule sources.
    """

    def __init__(
        self,
        engine: RuleEngine | None = None,
        *,
        engine_ref: str | None = None,
        staging_root: str = RULES_STAGING_ROOT,
    ) -> None:
        self._engine = engine
        self._engine_ref = engine_ref
        self._staging_root = staging_root

    @property
    def engine(self) -> RuleEngine:
        if self._engine is None:
            self._engine = resolve_engine(self._engine_ref)
        return self._engine

    def build(self, source_root: str | Path, output: str | Path) -> Result[BuildReport]:
        """Run the whole pipeline for one source folder and one output archive."""
        run = _BuildRun(source_root=Path(source_root), output=Path(output))

        with LogContext(source_root=str(source_root), output=str(output)):
            result = (
                discover_sources(run.source_root)
                .inspect(run.discovered)
                .flat_map(lambda manifest: stage_sources(manifest, self._staging_root))
                .inspect(lambda _: run.advance(BuildStage.STAGED))
                .flat_map(
                    lambda staged: try_result(lambda: self.engine).flat_map(
                        lambda engine: compile_staged(engine, staged)
                    )
                )
                .inspect(run.compiled)
                .flat_map(lambda module: write_archive(module, run.output))
                .inspect(lambda _: run.advance(BuildStage.PERSISTED))
                .map(run.report)
                .inspect_err(run.failed)
            )
            result.inspect(
                lambda report: logger.info(
                    "bundle.built",
                    files=report.file_count,
                    size_bytes=report.archive_size,
                    warnings=len(report.warnings),
                )
            )
        return result


def compile_bundle(
    source_root: str | Path,
    output: str | Path,
    *,
    engine: RuleEngine | None = None,
    engine_ref: str | None = None,
) -> BuildReport:
    """Build a bundle and return its report, raising the typed error on failure.

    Raises:
        InvalidInputError: Bad source folder or no compilable rule files.
        BundleIOError: A rule file could not be read or the archive not written.
        CompilationFailedError: The compiler reported errors.
        EngineFailureError: The engine raised.
        ConfigError: ``engine`` is None and ``engine_ref`` or the configured
            engine cannot be resolved. Raised only once the sources staged.
    """
    return BundleCompiler(engine, engine_ref=engine_ref).build(source_root, output).unwrap()


__all__ = [
    "BuildStage",
    "BuildReport",
    "BundleCompiler",
    "compile_bundle",
]
