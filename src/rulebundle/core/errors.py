"""
Structured error types for rule bundle builds and loads.

Every failure the build pipeline or the loader can produce is a subclass of
``RuleBundleError``. Errors carry a category for routing, a structured
context (source root, output path, archive path, stage, offending file)
and an optional chained cause, so library callers can inspect a failure
programmatically and the CLI can print a single readable line.

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────┐
        │                     RuleBundleError                        │
        │             (category, context, cause)                     │
        ├───────────────────────────────────────────────────────────┤
        │  InvalidInputError      BundleIOError     ConfigError      │
        │  (INPUT)                (IO)              (CONFIG)         │
        │                                                            │
        │  CompilationFailedError EngineFailureError                 │
        │  (COMPILATION)          (ENGINE)                           │
        └───────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Retry any of these. Bad input and compiler rejections are
       deterministic.
    ✅ DO: Fail fast and hand the typed error to the caller

    ❌ DON'T: Swallow the engine's original exception
    ✅ DO: Pass it as cause= so the traceback keeps the root cause

Examples:
    >>> error = InvalidInputError("no compilable rule files")
    >>> error.category
    <ErrorCategory.INPUT: 'INPUT'>
    >>> error.with_context(source_root="/srv/rules").context.source_root
    '/srv/rules'

    >>> failed = CompilationFailedError(["Rule Compilation error x", "Unable to resolve y"])
    >>> failed.payload
    'Rule Compilation error x\\nUnable to resolve y'

Tags:
    error-handling, exception-hierarchy, error-context, rulebundle
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Attributes:
        INPUT: Bad source path, nothing compilable, missing archive
        IO: Read/write failures against the filesystem
        COMPILATION: Aggregated error diagnostics from the rule compiler
        ENGINE: Opaque failures raised by the rule engine
        CONFIG: Missing or unresolvable configuration
        INTERNAL: Bugs, unexpected state
    """

    INPUT = "INPUT"
    IO = "IO"
    COMPILATION = "COMPILATION"
    ENGINE = "ENGINE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only the fields relevant to a failure are set; ``to_dict()`` drops the
    rest so log lines stay short.

    Attributes:
        source_root: Rules folder being built
        output_path: Archive destination of a build
        archive_path: Archive being loaded
        stage: Pipeline stage that was running when the error occurred
        path: Individual file involved (unreadable rule, failed write)
        metadata: Additional key-value pairs
    """

    source_root: str | None = None
    output_path: str | None = None
    archive_path: str | None = None
    stage: str | None = None
    path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["source_root", "output_path", "archive_path", "stage", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class RuleBundleError(Exception):
    """
    Base exception for all rulebundle errors.

    Subclasses set ``default_category``; instances may override it. The
    ``cause`` is chained onto ``__cause__`` so tracebacks show the original
    failure.

    Examples:
        >>> error = RuleBundleError("unexpected state")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'RuleBundleError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RuleBundleError:
        """
        Add context to this error (fluent API).

        Usage:
            return Err(BundleIOError("write failed").with_context(
                output_path=str(output),
            ))
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class InvalidInputError(RuleBundleError):
    """Caller supplied a bad source folder, nothing compilable, or a missing archive."""

    default_category = ErrorCategory.INPUT


class BundleIOError(RuleBundleError):
    """Reading a rule file or writing/reading an archive failed."""

    default_category = ErrorCategory.IO


class CompilationFailedError(RuleBundleError):
    """
    The rule compiler reported one or more ERROR diagnostics.

    ``messages`` keeps the compiler's own ordering and ``payload`` is those
    messages joined by newlines. ``str(error)`` renders a header followed
    by one ``[ERROR]`` line per message.
    """

    default_category = ErrorCategory.COMPILATION

    def __init__(self, messages: Sequence[str], **kwargs: Any):
        self.messages = tuple(messages)
        self.payload = "\n".join(self.messages)
        lines = "".join(f"  [ERROR] {msg}\n" for msg in self.messages)
        super().__init__(f"Rule compilation errors:\n{lines}", **kwargs)

    @property
    def error_count(self) -> int:
        return len(self.messages)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["errors"] = list(self.messages)
        return result


class EngineFailureError(RuleBundleError):
    """
    The rule engine raised while building, registering, or opening a session.

    Built with ``EngineFailureError.wrap(exc)``, which keeps the engine's
    message unchanged and chains the original exception.
    """

    default_category = ErrorCategory.ENGINE

    @classmethod
    def wrap(cls, exc: Exception) -> EngineFailureError:
        return cls(str(exc) or type(exc).__name__, cause=exc)


class ConfigError(RuleBundleError):
    """No rule engine is configured, or the configured reference cannot be resolved."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "RuleBundleError",
    "InvalidInputError",
    "BundleIOError",
    "CompilationFailedError",
    "EngineFailureError",
    "ConfigError",
]
