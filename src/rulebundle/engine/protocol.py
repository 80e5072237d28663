"""
Structural protocols for the external rule engine.

The engine compiles staged rule sources, serializes the compiled module,
registers archives, and hands out execution sessions. rulebundle never
implements rule semantics; it depends only on the shape defined here, so
any object matching these protocols can be injected into the pipeline
and the loader (including test doubles).

Architecture:
    ::

        RuleEngine
        ├── new_build_session()      → BuildSession
        │       ├── stage(path, bytes)
        │       ├── build()          → Sequence[Diagnostic]
        │       └── compiled_bytes() → bytes
        ├── register_module(bytes)   → module id
        └── new_container(module id) → Container
                └── new_stateless_session(name) → StatelessSession
                        └── execute(facts)

Tags:
    protocol, rule-engine, dependency-injection, rulebundle
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Hashable, Iterable, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from rulebundle.bundle.compiler import Diagnostic


ModuleId = Hashable


@runtime_checkable
class StatelessSession(Protocol):
    """Evaluates a fact set against compiled rules without retaining state."""

    def execute(self, facts: Iterable[Any]) -> None:
        """Insert ``facts``, fire all matching rules, and discard the session state."""
        ...


@runtime_checkable
class Container(Protocol):
    """Runtime view of one registered module."""

    def new_stateless_session(self, name: str) -> StatelessSession:
        """Create a session for the execution unit declared as ``name``."""
        ...


@runtime_checkable
class BuildSession(Protocol):
    """One compilation of one staged filesystem."""

    def stage(self, path: str, content: bytes) -> None:
        """Write ``content`` at in-archive ``path``."""
        ...

    def build(self) -> Sequence[Diagnostic]:
        """Compile everything staged so far and report diagnostics in compiler order."""
        ...

    def compiled_bytes(self) -> bytes:
        """Serialized archive of a successful build."""
        ...


@runtime_checkable
class RuleEngine(Protocol):
    """Factory for build sessions plus the module registry."""

    def new_build_session(self) -> BuildSession:
        ...

    def register_module(self, data: bytes) -> ModuleId:
        """Register archive bytes and return the identity used to open containers."""
        ...

    def new_container(self, module_id: ModuleId) -> Container:
        ...


__all__ = [
    "ModuleId",
    "StatelessSession",
    "Container",
    "BuildSession",
    "RuleEngine",
]
