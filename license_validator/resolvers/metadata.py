"""License declaration extraction from package metadata."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional, Protocol

from license_expression import ExpressionError, LicenseSymbol, Licensing

from license_validator.constants import NO_LICENSE_VALUES

# Mapping of trove classifiers to SPDX identifiers
CLASSIFIER_TO_SPDX: dict[str, str] = {
    "License :: OSI Approved :: MIT License": "MIT",
    "License :: OSI Approved :: MIT No Attribution License (MIT-0)": "MIT-0",
    "License :: OSI Approved :: Apache Software License": "Apache-2.0",
    "License :: OSI Approved :: BSD License": "BSD-3-Clause",
    "License :: OSI Approved :: GNU General Public License v3 (GPLv3)": ("GPL-3.0"),
    "License :: OSI Approved :: GNU General Public License v2 (GPLv2)": ("GPL-2.0"),
    "License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)": (
        "LGPL-3.0"
    ),
    "License :: OSI Approved :: GNU Lesser General Public License v2 (LGPLv2)": (
        "LGPL-2.0"
    ),
    "License :: OSI Approved :: GNU Affero General Public License v3": "AGPL-3.0",
    "License :: OSI Approved :: ISC License (ISCL)": "ISC",
    "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)": "MPL-2.0",
    "License :: OSI Approved :: Python Software Foundation License": "PSF-2.0",
    "License :: OSI Approved :: The Unlicense (Unlicense)": "Unlicense",
    "License :: OSI Approved :: zlib/libpng License": "Zlib",
    "License :: CC0 1.0 Universal (CC0 1.0) Public Domain Dedication": "CC0-1.0",
}

# License fields longer than this hold license text rather than an identifier
MAX_LICENSE_FIELD_LENGTH = 80

# No known symbols: identifiers are kept exactly as declared
_licensing = Licensing()


class _Metadata(Protocol):
    def get(self, name: str, failobj: Any = None) -> Any: ...

    def get_all(self, name: str, failobj: Any = None) -> Any: ...


def normalize_expression(value: str) -> str:
    """Normalize a license expression to the ``(L OP R)`` form.

    Operator case and spacing are normalized and composite expressions
    are wrapped in outer parentheses, e.g. ``MIT or Apache-2.0`` becomes
    ``(MIT OR Apache-2.0)``. Identifiers are never renamed. Values that
    do not parse as expressions are returned stripped but otherwise as is.

    Args:
        value: License expression or free-form license name.

    Returns:
        Normalized expression string.
    """
    text = value.strip()
    try:
        parsed = _licensing.parse(text)
    except ExpressionError:
        return text
    # Single identifiers may contain spaces and are kept verbatim
    if parsed is None or isinstance(parsed, LicenseSymbol):
        return text

    return f"({parsed})"


def _usable_license_field(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    cleaned = value.strip()
    if cleaned.upper() in NO_LICENSE_VALUES:
        return None
    if "\n" in cleaned or len(cleaned) > MAX_LICENSE_FIELD_LENGTH:
        return None
    return cleaned


def collect_licenses(
    expression: Optional[str],
    license_field: Optional[str],
    classifiers: Iterable[str],
) -> list[str]:
    """Order license declarations from the individual metadata sources.

    Order: license expression, short license field, then each license
    classifier. Duplicates are dropped, keeping the first occurrence.

    Args:
        expression: PEP 639 license expression, if declared.
        license_field: Legacy free-form license field, if declared.
        classifiers: Trove classifiers of the package.

    Returns:
        License declarations in preference order.
    """
    found: list[str] = []

    def add(value: Optional[str]) -> None:
        if value and value not in found:
            found.append(value)

    if expression and expression.strip():
        add(normalize_expression(expression))

    cleaned = _usable_license_field(license_field)
    if cleaned is not None:
        add(normalize_expression(cleaned))

    for classifier in classifiers:
        add(CLASSIFIER_TO_SPDX.get(classifier))

    return found


def extract_licenses(metadata: _Metadata) -> list[str]:
    """Extract license declarations from installed distribution metadata.

    Args:
        metadata: Core metadata of an installed distribution.

    Returns:
        License declarations in preference order (may be empty).
    """
    return collect_licenses(
        metadata.get("License-Expression"),
        metadata.get("License"),
        metadata.get_all("Classifier") or [],
    )


def extract_project_licenses(project: Mapping[str, Any]) -> list[str]:
    """Extract license declarations from a pyproject ``[project]`` table.

    Args:
        project: Parsed ``[project]`` table.

    Returns:
        License declarations in preference order (may be empty).
    """
    license_value = project.get("license")
    expression: Optional[str] = None
    license_text: Optional[str] = None

    if isinstance(license_value, str):
        expression = license_value
    elif isinstance(license_value, Mapping):
        license_text = license_value.get("text")

    return collect_licenses(
        expression,
        license_text,
        project.get("classifiers") or [],
    )
