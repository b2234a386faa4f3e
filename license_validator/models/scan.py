"""Discovery-related Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from license_validator.models.policy import split_package_spec


class PackageRecord(BaseModel):
    """Raw license declarations found for one installed package."""

    model_config = {"extra": "forbid"}

    pkg: str = Field(min_length=1, description="Package identity, name@version")
    licenses: list[str] = Field(
        description="Declared licenses in discovery order",
    )

    @property
    def name(self) -> str:
        return split_package_spec(self.pkg)[0]

    @property
    def version(self) -> str:
        return split_package_spec(self.pkg)[1] or ""

    def to_dependency(self) -> Dependency:
        """Convert the record into the dependency checked by the policy."""
        return Dependency(identity=self.pkg, candidates=list(self.licenses))


class Dependency(BaseModel):
    """A dependency and its alternative license declarations."""

    model_config = {"extra": "forbid", "frozen": True}

    identity: str = Field(description="Package identity, name@version")
    candidates: list[str] = Field(
        default_factory=list,
        description="Alternative license declarations, in preference order",
    )
