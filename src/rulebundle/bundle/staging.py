"""Build staging — lay out the descriptor and rule sources for the compiler.

The staged filesystem maps in-archive paths to bytes:

::

    src/main/resources/META-INF/kmodule.xml      ← module descriptor
    src/main/resources/rules/<relative path>     ← one entry per rule file

It is built fresh for each compile and thrown away afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from rulebundle.bundle.descriptor import module_descriptor
from rulebundle.bundle.sources import RuleSourceFile, SourceManifest
from rulebundle.core.errors import BundleIOError, InvalidInputError
from rulebundle.core.logging import get_logger
from rulebundle.core.result import Result, collect_results, from_bool, try_result_with

logger = get_logger(__name__)

DESCRIPTOR_PATH = "src/main/resources/META-INF/kmodule.xml"
RULES_STAGING_ROOT = "src/main/resources/rules"


@dataclass(frozen=True)
class StagedFilesystem:
    """In-archive path → content, in staging order (descriptor first)."""

    entries: dict[str, bytes] = field(default_factory=dict)

    def __iter__(self) -> Iterator[tuple[str, bytes]]:
        return iter(self.entries.items())

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, path: object) -> bool:
        return path in self.entries

    def __getitem__(self, path: str) -> bytes:
        return self.entries[path]

    @property
    def descriptor(self) -> bytes:
        return self.entries[DESCRIPTOR_PATH]

    @property
    def rule_paths(self) -> list[str]:
        return [path for path in self.entries if path != DESCRIPTOR_PATH]


def staged_path(source: RuleSourceFile, prefix: str = RULES_STAGING_ROOT) -> str:
    """Canonical in-archive path of a rule file."""
    return f"{prefix.rstrip('/')}/{source.relative_path}"


def _read(source: RuleSourceFile) -> Result[bytes]:
    return try_result_with(
        source.read_bytes,
        lambda e: BundleIOError(
            f"Cannot read rule file {source.path}: {e}", cause=e
        ).with_context(path=str(source.path)),
    )


def stage_sources(
    manifest: SourceManifest,
    prefix: str = RULES_STAGING_ROOT,
) -> Result[StagedFilesystem]:
    """Assemble the staged filesystem for ``manifest``.

    Returns:
        ``Err(InvalidInputError)`` when the manifest has no ``.drl`` or
        ``.dslr`` file; ``Err(BundleIOError)`` for the first rule file that
        cannot be read; otherwise ``Ok(StagedFilesystem)``.
    """
    no_rules = InvalidInputError("no compilable rule files").with_context(
        source_root=str(manifest.root),
        dialect_definitions=len(manifest) - manifest.compilable,
    )

    def read_all(m: SourceManifest) -> Result[StagedFilesystem]:
        # generator keeps collect_results fail-fast: nothing is read after a failure
        contents = collect_results(_read(source) for source in m)
        return contents.map(
            lambda blobs: StagedFilesystem(
                entries={
                    DESCRIPTOR_PATH: module_descriptor().encode("utf-8"),
                    **{staged_path(s, prefix): blob for s, blob in zip(m, blobs)},
                }
            )
        )

    return (
        from_bool(manifest.compilable > 0, manifest, no_rules)
        .flat_map(read_all)
        .inspect(lambda staged: logger.debug("bundle.staged", entries=len(staged), prefix=prefix))
    )


__all__ = [
    "DESCRIPTOR_PATH",
    "RULES_STAGING_ROOT",
    "StagedFilesystem",
    "staged_path",
    "stage_sources",
]
