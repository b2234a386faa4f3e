"""Configuration Pydantic models for license-validator."""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, Field


class ValidatorConfig(BaseModel):
    """Configuration for license-validator.

    All fields are optional with None defaults to allow partial configuration.
    """

    model_config = {"extra": "forbid"}

    allowed_licenses: Optional[List[str]] = Field(
        default=None,
        description="List of allowed license identifiers or exact expressions. "
        "Packages declaring other licenses will be flagged.",
    )
    exceptions: Optional[List[str]] = Field(
        default=None,
        description="Packages allowed regardless of license, as name or "
        "name@version-range.",
    )

    def to_options(
        self,
        extra_licenses: Sequence[str] = (),
        extra_exceptions: Sequence[str] = (),
    ) -> dict[str, Any]:
        """Build policy options for a run, extended by command-line values.

        Args:
            extra_licenses: Additional allowed licenses.
            extra_exceptions: Additional exception specifiers.

        Returns:
            Policy options with configured values first.
        """
        return {
            "allowed_licenses": [*(self.allowed_licenses or []), *extra_licenses],
            "exceptions": [*(self.exceptions or []), *extra_exceptions],
        }
