"""Source discovery — walk a rules folder and classify rule files.

Every file below the root whose name ends in a recognized suffix becomes a
``RuleSourceFile``; everything else is skipped. Content is not read here:
the manifest records paths only, and staging reads the bytes later.

Recognized suffixes:

============  =========================  ===========
Suffix        Kind                       Compilable
============  =========================  ===========
``.drl``      ``COMPILED_RULE``          yes
``.dsl``      ``DIALECT_DEFINITION``     no
``.dslr``     ``EXPANDED_DIALECT_RULE``  yes
============  =========================  ===========

Limitations:
- Directories are followed through symlinks and cycles are not detected.
- A directory whose listing fails is treated as empty (logged as
  ``discovery.listing_failed``) so a transient race does not abort a build.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator

from rulebundle.core.errors import InvalidInputError
from rulebundle.core.logging import get_logger
from rulebundle.core.result import Err, Ok, Result

logger = get_logger(__name__)


class RuleKind(str, Enum):
    """Kind of a rule source file, keyed by its suffix."""

    COMPILED_RULE = ".drl"
    DIALECT_DEFINITION = ".dsl"
    EXPANDED_DIALECT_RULE = ".dslr"

    @property
    def suffix(self) -> str:
        return self.value

    @property
    def compilable(self) -> bool:
        """Whether files of this kind can make up a bundle on their own."""
        return self is not RuleKind.DIALECT_DEFINITION

    @classmethod
    def for_name(cls, name: str) -> RuleKind | None:
        """Classify a file name, or return None for unrecognized suffixes."""
        for kind in cls:
            if name.endswith(kind.value):
                return kind
        return None


@dataclass(frozen=True)
class RuleSourceFile:
    """A discovered rule file.

    ``relative_path`` always uses forward slashes so it can be appended to
    an in-archive staging prefix unchanged on every platform.
    """

    path: Path
    relative_path: str
    kind: RuleKind

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True)
class SourceManifest:
    """Ordered rule files discovered under one root."""

    root: Path
    files: tuple[RuleSourceFile, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[RuleSourceFile]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def of_kind(self, kind: RuleKind) -> list[RuleSourceFile]:
        return [f for f in self.files if f.kind is kind]

    @property
    def compilable(self) -> int:
        """Number of ``.drl`` and ``.dslr`` entries."""
        return sum(1 for f in self.files if f.kind.compilable)

    @property
    def relative_paths(self) -> list[str]:
        return [f.relative_path for f in self.files]


# ---------------------------------------------------------------------------
# Directory walk
# ---------------------------------------------------------------------------


def _list_directory(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as e:
        # Policy: an unreadable subdirectory contributes no entries.
        logger.warning("discovery.listing_failed", directory=str(directory), error=str(e))
        return []
    entries.sort(key=lambda entry: entry.name)
    return entries


def _walk(directory: Path) -> Iterator[Path]:
    for entry in _list_directory(directory):
        path = Path(entry.path)
        if entry.is_dir():
            yield from _walk(path)
        elif RuleKind.for_name(entry.name) is not None:
            yield path


def collect_rule_files(directory: str | Path) -> list[Path]:
    """Recursively collect every recognized rule file under ``directory``.

    Entries within each directory are visited in name order, so the result
    is deterministic for a given filesystem snapshot. Never returns None;
    an empty or unreadable directory yields an empty list.
    """
    return list(_walk(Path(directory)))


def discover_sources(root: str | Path) -> Result[SourceManifest]:
    """Build the source manifest for ``root``.

    Returns:
        ``Ok(SourceManifest)``, possibly empty, or ``Err(InvalidInputError)``
        when ``root`` does not exist or is not a directory.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        return Err(
            InvalidInputError(
                f"Rules folder does not exist or is not a directory: {root}"
            ).with_context(source_root=str(root))
        )

    root_path = root_path.absolute()
    files = tuple(
        RuleSourceFile(
            path=path,
            relative_path=path.relative_to(root_path).as_posix(),
            kind=RuleKind.for_name(path.name),
        )
        for path in collect_rule_files(root_path)
    )
    manifest = SourceManifest(root=root_path, files=files)

    logger.debug(
        "bundle.discovered",
        source_root=str(root_path),
        files=len(manifest),
        compilable=manifest.compilable,
    )
    return Ok(manifest)


__all__ = [
    "RuleKind",
    "RuleSourceFile",
    "SourceManifest",
    "collect_rule_files",
    "discover_sources",
]
