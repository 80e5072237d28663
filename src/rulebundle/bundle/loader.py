"""
Bundle loading — register an archive with the engine and open sessions.

A :class:`BundleLoader` goes through two steps when it is constructed:

::

    INIT ──► REGISTERED ──► CONTAINED

``REGISTERED`` means the archive bytes were handed to the engine's module
registry; ``CONTAINED`` means a container was built over that module.
Construction either reaches ``CONTAINED`` or raises. Unlike the build
pipeline, the loader is a raising API: callers hold on to the loader and
ask it for sessions, so there is no ``Result`` to thread through.

Each call to :meth:`BundleLoader.new_stateless_session` returns a fresh
session named ``defaultKSession``. Sessions share nothing.

Usage::

    loader = BundleLoader("dist/rules.jar", engine=engine)
    loader.new_stateless_session().execute([person])
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from rulebundle.bundle.descriptor import DEFAULT_KSESSION
from rulebundle.core.errors import BundleIOError, EngineFailureError, InvalidInputError
from rulebundle.core.logging import get_logger
from rulebundle.core.security import harden_xml_parsers
from rulebundle.core.settings import get_settings
from rulebundle.engine.protocol import Container, ModuleId, RuleEngine, StatelessSession
from rulebundle.engine.resolver import resolve_engine

logger = get_logger(__name__)


class LoadStage(str, Enum):
    INIT = "INIT"
    REGISTERED = "REGISTERED"
    CONTAINED = "CONTAINED"


class BundleLoader:
    """Loads a compiled bundle and hands out stateless sessions.

    Raises:
        InvalidInputError: ``archive_path`` does not exist or is not a file.
        BundleIOError: The archive exists but cannot be read.
        EngineFailureError: The engine rejected the archive or could not
            build a container over it.
        ConfigError: ``engine`` is None and none is configured.
    """

    def __init__(self, archive_path: str | Path, *, engine: RuleEngine | None = None):
        self._archive_path = Path(archive_path)
        self._stage = LoadStage.INIT

        if not self._archive_path.is_file():
            raise InvalidInputError(
                f"Bundle archive not found: {self._archive_path}"
            ).with_context(archive_path=str(self._archive_path))

        try:
            data = self._archive_path.read_bytes()
        except OSError as e:
            raise BundleIOError(
                f"Cannot read bundle archive {self._archive_path}: {e}", cause=e
            ).with_context(archive_path=str(self._archive_path)) from e

        self._engine = engine if engine is not None else resolve_engine()
        if get_settings().harden_xml:
            harden_xml_parsers()

        self._module_id = self._call_engine(self._engine.register_module, data)
        self._stage = LoadStage.REGISTERED

        self._container: Container = self._call_engine(self._engine.new_container, self._module_id)
        self._stage = LoadStage.CONTAINED

        logger.info(
            "bundle.loaded",
            archive_path=str(self._archive_path),
            module_id=str(self._module_id),
            size_bytes=len(data),
        )

    def _call_engine(self, fn: Any, *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception as e:
            error = EngineFailureError.wrap(e).with_context(
                archive_path=str(self._archive_path),
                stage=self._stage.value,
            )
            logger.error("bundle.load_failed", **error.to_dict())
            raise error from e

    @property
    def archive_path(self) -> Path:
        return self._archive_path

    @property
    def stage(self) -> LoadStage:
        return self._stage

    @property
    def module_id(self) -> ModuleId:
        return self._module_id

    @property
    def container(self) -> Container:
        return self._container

    def new_stateless_session(self) -> StatelessSession:
        """Open a new ``defaultKSession`` stateless session."""
        return self._call_engine(self._container.new_stateless_session, DEFAULT_KSESSION)

    def execute(self, facts: Iterable[Any]) -> None:
        """Run ``facts`` through a fresh stateless session."""
        session = self.new_stateless_session()
        self._call_engine(session.execute, list(facts))

    def __repr__(self) -> str:
        return f"BundleLoader({str(self._archive_path)!r}, stage={self._stage.value})"


__all__ = ["LoadStage", "BundleLoader"]
