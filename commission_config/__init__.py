"""
commission_config -- the public entrypoint for commission configuration.

Responsibility:
    Provides ``get_active_config()``, the way a run obtains its
    ``CommissionSettings``. Loads a YAML set (the bundled ``sets/default.yaml``
    unless a path is given), parses it, validates it, and returns the frozen
    settings.

Architecture position:
    Configuration -- sits above ``commission_kernel`` and below
    ``commission_services``. The kernel MUST NEVER import from
    ``commission_config``; settings are injected into kernel components.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``KeyError`` / ``ValueError`` -- a required key is missing or a value
      cannot be parsed.
    - ``ConfigValidationError`` -- the parsed settings are inconsistent.

Audit relevance:
    Every successful call emits a ``config_loaded`` log entry with the
    config_id, version, source path and SHA-256 checksum of the raw set.
"""

from __future__ import annotations

from pathlib import Path

from commission_config.loader import compute_checksum, load_yaml_file, parse_settings
from commission_config.validator import (
    ConfigValidationError,
    ConfigValidationResult,
    validate_settings,
)
from commission_kernel.domain.settings import CommissionSettings
from commission_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration set
DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> CommissionSettings:
    """Load, validate and return the configuration for a run.

    Args:
        config_path: YAML file to load. Defaults to the bundled set.

    Raises:
        ConfigValidationError: if validation reports any error.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    data = load_yaml_file(path)
    settings = parse_settings(data)

    result = validate_settings(settings)
    for warning in result.warnings:
        _logger.warning("config_warning", extra={"config_path": str(path), "detail": warning})
    if not result.is_valid:
        raise ConfigValidationError(result.errors)

    _logger.info("config_loaded", extra={
        "config_id": data.get("config_id", path.stem),
        "config_version": data.get("version"),
        "config_path": str(path),
        "checksum": compute_checksum(data),
        "main_currency": settings.currencies.main,
        "supported_currencies": list(settings.currencies.supported),
    })
    return settings


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigValidationError",
    "ConfigValidationResult",
    "get_active_config",
    "parse_settings",
    "validate_settings",
]
