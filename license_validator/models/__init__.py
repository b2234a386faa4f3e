"""Pydantic data models for license-validator."""

from license_validator.models.config import ValidatorConfig
from license_validator.models.policy import ExceptionRule, Policy, split_package_spec
from license_validator.models.result import Decision, ValidationResult
from license_validator.models.scan import Dependency, PackageRecord

__all__ = [
    "Decision",
    "Dependency",
    "ExceptionRule",
    "PackageRecord",
    "Policy",
    "ValidationResult",
    "ValidatorConfig",
    "split_package_spec",
]
