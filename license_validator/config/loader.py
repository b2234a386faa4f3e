"""Policy file loading for license-validator.

A project keeps its policy in ``.license-validator.yaml`` (or ``.yml``)
at its root. Values given on the command line extend the file's lists.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from license_validator.exceptions import ConfigurationError
from license_validator.models.config import ValidatorConfig

logger = logging.getLogger(__name__)

# Looked up in this order; the first existing file wins
CONFIG_FILE_NAMES = (".license-validator.yaml", ".license-validator.yml")


def format_validation_errors(error: ValidationError) -> str:
    """Join pydantic errors into ``field: message`` pairs.

    Args:
        error: The pydantic ValidationError.

    Returns:
        Errors separated by ``; ``, located by dotted field path.
    """
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'root'}: {err['msg']}"
        for err in error.errors()
    )


def find_config_file(root_dir: Optional[Path] = None) -> Optional[Path]:
    """Locate a project's policy file.

    Args:
        root_dir: Project root. The working directory is searched instead
            when this is None or not a directory.

    Returns:
        Path of the policy file, or None if the project has none.
    """
    if root_dir is None or not root_dir.is_dir():
        root_dir = Path.cwd()

    for name in CONFIG_FILE_NAMES:
        candidate = root_dir / name
        if candidate.is_file():
            return candidate
    return None


def _read_document(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read policy file '{path}': {e}") from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Policy file '{path}' is not valid YAML: {e}") from e


def read_config(path: Path) -> ValidatorConfig:
    """Read and validate a policy file.

    Args:
        path: Policy file to read.

    Returns:
        The file's configuration. Empty and comment-only files configure
        nothing.

    Raises:
        ConfigurationError: If the file cannot be read, is not YAML, or
            does not match the ValidatorConfig schema.
    """
    document = _read_document(path)
    if document is None:
        return ValidatorConfig()

    if not isinstance(document, dict):
        raise ConfigurationError(
            f"Policy file '{path}' must hold a mapping, "
            f"not {type(document).__name__}"
        )

    try:
        config = ValidatorConfig.model_validate(document)
    except ValidationError as e:
        raise ConfigurationError(
            f"Policy file '{path}' is invalid: {format_validation_errors(e)}"
        ) from e

    logger.debug("Read policy from %s", path)
    return config


def load_policy_options(
    root_dir: Optional[Path] = None,
    config_path: Union[str, Path, None] = None,
    allowed: Sequence[str] = (),
    exceptions: Sequence[str] = (),
) -> dict[str, Any]:
    """Assemble the policy options for a validation run.

    The policy file is ``config_path`` when given, otherwise the one
    found in ``root_dir``. Command-line values are appended after the
    file's own entries.

    Args:
        root_dir: Project root searched for a policy file.
        config_path: Explicit policy file, which must exist.
        allowed: Extra allowed licenses.
        exceptions: Extra exception specifiers.

    Returns:
        Options mapping accepted by ``validate``.

    Raises:
        ConfigurationError: If the policy file is invalid.
    """
    path = Path(config_path) if config_path is not None else find_config_file(root_dir)
    config = read_config(path) if path is not None else ValidatorConfig()
    return config.to_options(allowed, exceptions)
