"""Package exception lookup for policy overrides."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from license_validator.analysis.versions import matches
from license_validator.models.policy import ExceptionRule, split_package_spec

logger = logging.getLogger(__name__)


def split_identity(identity: str) -> tuple[str, str]:
    """Split a ``name@version`` identity.

    Args:
        identity: Package identity as produced by discovery.

    Returns:
        Tuple of (name, version). Version is empty if the identity has none.
    """
    name, version = split_package_spec(identity)
    return name, version or ""


def resolve_exception(
    identity: str,
    rules: Iterable[ExceptionRule],
) -> Optional[ExceptionRule]:
    """Find the first exception rule covering a package.

    Package name matching is case-sensitive. A rule without a version
    range covers every version; a rule whose range cannot be parsed
    covers none.

    Args:
        identity: Package identity, ``name@version``.
        rules: Exception rules in policy order.

    Returns:
        The first matching rule, or None if no rule applies.
    """
    name, version = split_identity(identity)

    for rule in rules:
        if rule.package_name != name:
            continue
        if matches(version, rule.version_range):
            logger.debug("%s covered by exception %s", identity, rule.specifier)
            return rule

    return None
