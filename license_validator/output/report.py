"""Plain-text report of discovered packages."""
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from license_validator.constants import LICENSE_SEPARATOR
from license_validator.exceptions import InvalidDataError
from license_validator.models.scan import PackageRecord
from license_validator.resolvers.base import BaseReportRenderer


class TextReportRenderer(BaseReportRenderer):
    """Render one line per package: ``name@version [license(s): A, B]``."""

    async def render(self, data: Sequence[Any]) -> str:
        lines = []
        for entry in data:
            try:
                record = PackageRecord.model_validate(entry)
            except ValidationError as e:
                raise InvalidDataError(
                    f"license discovery returned invalid data: {entry!r}"
                ) from e
            lines.append(
                f"{record.pkg} [license(s): {LICENSE_SEPARATOR.join(record.licenses)}]"
            )
        return "\n".join(lines)
