"""Policy configuration for license-validator."""
from __future__ import annotations

from license_validator.config.loader import (
    CONFIG_FILE_NAMES,
    find_config_file,
    format_validation_errors,
    load_policy_options,
    read_config,
)
from license_validator.models.config import ValidatorConfig

__all__ = [
    "CONFIG_FILE_NAMES",
    "ValidatorConfig",
    "find_config_file",
    "format_validation_errors",
    "load_policy_options",
    "read_config",
]
