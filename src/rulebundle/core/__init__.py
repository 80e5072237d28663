"""rulebundle.core -- ambient primitives shared by every layer.

Architecture::

    errors.py      Structured error hierarchy (RuleBundleError and friends)
    result.py      Result[T] envelope (Ok / Err / try_result)
    logging.py     structlog configuration and context helpers
    settings.py    RULEBUNDLE_* environment settings (pydantic-settings)
    security.py    One-time XML-parser hardening (defusedxml)
"""

from rulebundle.core.errors import (
    BundleIOError,
    CompilationFailedError,
    ConfigError,
    EngineFailureError,
    ErrorCategory,
    ErrorContext,
    InvalidInputError,
    RuleBundleError,
)
from rulebundle.core.result import (
    Err,
    Ok,
    Result,
    collect_results,
    from_bool,
    try_result,
    try_result_with,
)

__all__ = [
    "BundleIOError",
    "CompilationFailedError",
    "ConfigError",
    "EngineFailureError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidInputError",
    "RuleBundleError",
    "Err",
    "Ok",
    "Result",
    "collect_results",
    "from_bool",
    "try_result",
    "try_result_with",
]
