"""Archive extraction — persist a compiled module's bytes to disk."""

from __future__ import annotations

from pathlib import Path

from rulebundle.bundle.compiler import CompiledModule
from rulebundle.core.errors import BundleIOError, EngineFailureError
from rulebundle.core.logging import get_logger
from rulebundle.core.result import Result, try_result_with

logger = get_logger(__name__)


def _write(data: bytes, output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    return output


def write_archive(module: CompiledModule, output: str | Path) -> Result[Path]:
    """Write ``module`` to ``output``, creating missing parent directories.

    An existing file is overwritten in place. After a failed write the
    destination state is unspecified; nothing is rolled back.

    Returns:
        ``Ok(path)``, ``Err(EngineFailureError)`` if the engine cannot
        serialize the module, or ``Err(BundleIOError)`` on any filesystem
        failure.
    """
    output_path = Path(output)

    def io_error(e: Exception) -> BundleIOError:
        return BundleIOError(
            f"Cannot write bundle archive {output_path}: {e}", cause=e
        ).with_context(output_path=str(output_path))

    return (
        try_result_with(module.to_bytes, EngineFailureError.wrap)
        .flat_map(lambda data: try_result_with(lambda: _write(data, output_path), io_error))
        .inspect(
            lambda path: logger.debug(
                "bundle.persisted", output=str(path), size_bytes=path.stat().st_size
            )
        )
    )


__all__ = ["write_archive"]
