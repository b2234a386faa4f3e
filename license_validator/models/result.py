"""Validation result Pydantic models."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from pydantic import BaseModel, Field


class Decision(BaseModel):
    """Outcome of checking one dependency against a policy."""

    model_config = {"extra": "forbid", "frozen": True}

    identity: str = Field(description="Package identity, name@version")
    display_license: str = Field(description="License text shown in reports")
    matched_license: Optional[str] = Field(
        default=None,
        description="Declaration that satisfied the allow-list, if any",
    )
    compliant: bool = Field(description="Whether the dependency is allowed")


class ValidationResult(BaseModel):
    """Aggregate result of a validation run."""

    model_config = {"extra": "forbid"}

    packages: dict[str, str] = Field(
        default_factory=dict,
        description="Display license by package identity, in traversal order",
    )
    licenses: list[str] = Field(
        default_factory=list,
        description="Distinct allow-listed declarations that were matched",
    )
    invalids: list[str] = Field(
        default_factory=list,
        description="Identities of non-compliant packages, in traversal order",
    )
    report: Optional[str] = Field(
        default=None,
        description="Human-readable report of the discovered packages",
    )

    @property
    def is_valid(self) -> bool:
        """Check whether every package complied with the policy.

        Returns:
            True if there are no invalid packages, False otherwise.
        """
        return not self.invalids

    @classmethod
    def from_decisions(cls, decisions: Iterable[Decision]) -> ValidationResult:
        """Fold per-package decisions into a result.

        Exception-based decisions carry no matched license and so
        contribute nothing to ``licenses``.

        Args:
            decisions: Decisions in traversal order.

        Returns:
            ValidationResult with packages, licenses and invalids populated.
        """
        packages: dict[str, str] = {}
        licenses: list[str] = []
        invalids: list[str] = []

        for decision in decisions:
            packages[decision.identity] = decision.display_license
            if not decision.compliant:
                invalids.append(decision.identity)
            elif (
                decision.matched_license is not None
                and decision.matched_license not in licenses
            ):
                licenses.append(decision.matched_license)

        return cls(packages=packages, licenses=licenses, invalids=invalids)
