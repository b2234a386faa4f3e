"""Policy-related Pydantic models for license-validator."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def split_package_spec(spec: str) -> tuple[str, Optional[str]]:
    """Split a ``name@version`` string into its name and version parts.

    The separator is the last ``@`` that does not open the string, so
    scoped names such as ``@scope/pkg@^1.0.0`` keep their leading ``@``.

    Args:
        spec: Package identity or exception specifier.

    Returns:
        Tuple of (name, version). Version is None when no separator exists.
    """
    index = spec.rfind("@")
    if index <= 0:
        return spec, None
    return spec[:index], spec[index + 1 :]


class ExceptionRule(BaseModel):
    """A policy override granting compliance to a specific package.

    Rules without a version range cover every version of the package.
    """

    model_config = {"extra": "forbid", "frozen": True}

    package_name: str = Field(min_length=1, description="Package name to exempt")
    version_range: Optional[str] = Field(
        default=None,
        description="Semantic version range the exception is limited to",
    )
    specifier: str = Field(
        description="Original specifier string, shown in reports",
    )

    @classmethod
    def parse(cls, specifier: str) -> ExceptionRule:
        """Create a rule from a ``name`` or ``name@range`` specifier.

        Args:
            specifier: Exception specifier as written in the policy.

        Returns:
            ExceptionRule retaining the specifier, stripped of surrounding
            whitespace.
        """
        text = specifier.strip()
        name, version_range = split_package_spec(text)
        return cls(
            package_name=name,
            version_range=version_range,
            specifier=text,
        )


class Policy(BaseModel):
    """Allowed licenses and package exceptions for a validation run."""

    model_config = {"extra": "forbid"}

    allowed_licenses: list[str] = Field(
        default_factory=list,
        description="License identifiers or exact composite expressions allowed",
    )
    exceptions: list[ExceptionRule] = Field(
        default_factory=list,
        description="Package exceptions, checked before any license",
    )

    @field_validator("exceptions", mode="before")
    @classmethod
    def _parse_specifiers(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [
                ExceptionRule.parse(item) if isinstance(item, str) else item
                for item in value
            ]
        return value

    @property
    def is_empty(self) -> bool:
        """Check whether the policy allows nothing at all.

        Returns:
            True if there are neither allowed licenses nor exceptions.
        """
        return not self.allowed_licenses and not self.exceptions

    @property
    def allowed_set(self) -> frozenset[str]:
        """Allowed licenses as a set for membership checks."""
        return frozenset(self.allowed_licenses)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> Policy:
        """Build a policy from user-facing options.

        Accepts ``licenses`` and ``packages`` as aliases for
        ``allowed_licenses`` and ``exceptions``.

        Args:
            options: Mapping of policy options.

        Returns:
            Validated Policy.

        Raises:
            pydantic.ValidationError: If the options are malformed.
        """
        data = dict(options)
        if "licenses" in data:
            data["allowed_licenses"] = data.pop("licenses")
        if "packages" in data:
            data["exceptions"] = data.pop("packages")
        return cls.model_validate(data)
