"""Validate dependency licenses against an allow-list policy."""

__version__ = "0.1.0"

from license_validator.validator import DeliveryMode, validate, validate_async  # noqa: E402

__all__ = ["DeliveryMode", "__version__", "validate", "validate_async"]
