"""
rulebundle - Compile rule sources into deployable bundles and load them back.

The rule compiler itself is pluggable (see ``rulebundle.engine``); this
package discovers sources, stages them with a fixed module descriptor,
drives the compiler, and writes and loads the resulting archive.
"""

__version__ = "0.1.0"

from rulebundle.bundle import (
    BuildReport,
    BundleCompiler,
    BundleLoader,
    compile_bundle,
    discover_sources,
)
from rulebundle.core.errors import (
    BundleIOError,
    CompilationFailedError,
    ConfigError,
    EngineFailureError,
    InvalidInputError,
    RuleBundleError,
)

__all__ = [
    "__version__",
    "BuildReport",
    "BundleCompiler",
    "BundleLoader",
    "compile_bundle",
    "discover_sources",
    "BundleIOError",
    "CompilationFailedError",
    "ConfigError",
    "EngineFailureError",
    "InvalidInputError",
    "RuleBundleError",
]
