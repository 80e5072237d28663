"""Environment-driven settings for rulebundle.

``BundleSettings`` reads ``RULEBUNDLE_*`` environment variables and an
optional ``.env`` file. The build pipeline itself takes explicit
arguments; settings only choose the rule engine and shape logging.

Fields
──────
engine      : Engine reference, ``"module:attr"`` or an entry-point name
              in the ``rulebundle.engines`` group
log_level   : structlog log level
log_format  : ``console`` or ``json``
harden_xml  : Run process-wide XML-parser hardening before the first build

Examples:
    >>> import os
    >>> os.environ["RULEBUNDLE_ENGINE"] = "acme_rules.engine:AcmeEngine"
    >>> clear_settings_cache()
    >>> get_settings().engine
    'acme_rules.engine:AcmeEngine'

Tags:
    settings, configuration, pydantic, environment, rulebundle
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BundleSettings(BaseSettings):
    """Validated settings shared by the CLI, the compiler and the loader."""

    model_config = SettingsConfigDict(
        env_prefix="RULEBUNDLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Engine ───────────────────────────────────────────────────
    engine: str | None = Field(
        default=None,
        description="Rule engine reference ('module:attr' or entry-point name)",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")

    # ── Security ─────────────────────────────────────────────────
    harden_xml: bool = Field(default=True)


_settings_cache: dict[str, BundleSettings] = {}


def get_settings(*, _force_reload: bool = False) -> BundleSettings:
    """Load, validate, and cache a :class:`BundleSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = BundleSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = ["BundleSettings", "get_settings", "clear_settings_cache"]
