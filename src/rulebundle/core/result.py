"""
Result envelope for the bundle pipeline.

Each pipeline stage returns ``Ok[T]`` on success or ``Err[T]`` carrying a
``RuleBundleError``. Stages are chained with ``flat_map`` so a later stage
only runs when the previous one succeeded, and the first failure flows to
the end of the chain unchanged. No exception-based short-circuiting is
needed inside the pipeline.

Architecture:
    ::

        discover ──Ok──► stage ──Ok──► compile ──Ok──► write ──Ok──► report
           │               │              │               │
           └──Err──────────┴──────Err─────┴───────Err─────┴──► Err(first error)

Examples:
    >>> from rulebundle.core.result import Ok, Err, Result
    >>> def half(n: int) -> Result[int]:
    ...     if n % 2:
    ...         return Err(ValueError("odd"))
    ...     return Ok(n // 2)
    >>> Ok(8).flat_map(half).flat_map(half).unwrap()
    2
    >>> Ok(6).flat_map(half).flat_map(half).is_err()
    True

    Pattern matching works on both variants:

    >>> match half(4):
    ...     case Ok(value):
    ...         print(value)
    ...     case Err(error):
    ...         print(error)
    2

Guardrails:
    ❌ DON'T: Call unwrap() on a result you have not checked
    ✅ DO: Use pattern matching, unwrap_or(), or let the caller unwrap

    ❌ DON'T: Raise inside map/flat_map callbacks
    ✅ DO: Return Err from flat_map when the step can fail

Tags:
    result-pattern, error-handling, pipeline, rulebundle
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Iterable

from rulebundle.core.errors import RuleBundleError


T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    ``map`` and ``flat_map`` apply to the value; ``map_err`` and
    ``or_else`` are no-ops.
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform error if Err (no-op for Ok)."""
        return self

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Return self if Ok, otherwise call f with error."""
        return self

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """Call f with value for side effects, return self."""
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects (no-op for Ok)."""
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``map`` and ``flat_map`` pass the error through untouched, which is
    what lets the first failure of a pipeline surface at the end of it.
    ``unwrap()`` raises the wrapped error.
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Get default since this is Err."""
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Call f with error to try recovery."""
        return f(self.error)

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """No-op for Err."""
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, RuleBundleError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


# =============================================================================
# RESULT CONSTRUCTORS AND UTILITIES
# =============================================================================


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Execute a function and wrap result in Result.

    Bridges exception-raising code (the filesystem, the rule engine) into
    the pipeline. Any ``Exception`` becomes ``Err``.

    Examples:
        >>> try_result(lambda: int("42")).unwrap()
        42
        >>> try_result(lambda: int("x")).is_err()
        True
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)


def try_result_with(
    f: Callable[[], T],
    error_mapper: Callable[[Exception], Exception] | None = None,
) -> Result[T]:
    """
    Execute function and map exceptions to custom error types.

    Like try_result(), but lets the caller turn a raw ``OSError`` or an
    engine exception into the matching ``RuleBundleError`` subclass.

    Examples:
        >>> from rulebundle.core.errors import BundleIOError
        >>> result = try_result_with(
        ...     lambda: open("/no/such/file.drl", "rb"),
        ...     lambda e: BundleIOError(f"cannot read: {e}", cause=e),
        ... )
        >>> result.error.category.value
        'IO'
    """
    try:
        return Ok(f())
    except Exception as e:
        if error_mapper:
            return Err(error_mapper(e))
        return Err(e)


def collect_results(results: Iterable[Result[T]]) -> Result[list[T]]:
    """
    Collect Results into a Result of list (fail-fast).

    Consumes ``results`` lazily and stops at the first ``Err``, so when a
    generator is passed no work is done past the first failure.

    Examples:
        >>> collect_results([Ok(1), Ok(2)]).unwrap()
        [1, 2]
        >>> str(collect_results([Ok(1), Err(ValueError("a")), Err(ValueError("b"))]).error)
        'a'
    """
    values = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                return Err(error)
    return Ok(values)


def from_bool(
    condition: bool,
    ok_value: T,
    error: Exception,
) -> Result[T]:
    """
    Create Result from boolean condition.

    Examples:
        >>> from rulebundle.core.errors import InvalidInputError
        >>> from_bool(False, 0, InvalidInputError("no compilable rule files")).is_err()
        True
    """
    if condition:
        return Ok(ok_value)
    return Err(error)


__all__ = [
    "Result",
    "Ok",
    "Err",
    "try_result",
    "try_result_with",
    "from_bool",
    "collect_results",
]
