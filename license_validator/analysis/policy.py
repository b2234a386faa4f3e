"""License policy checking for dependency license declarations."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from license_validator.analysis.expression import satisfied
from license_validator.analysis.overrides import resolve_exception
from license_validator.constants import LICENSE_SEPARATOR
from license_validator.models.policy import Policy
from license_validator.models.result import Decision, ValidationResult
from license_validator.models.scan import Dependency

logger = logging.getLogger(__name__)


def select_license(dependency: Dependency, policy: Policy) -> Decision:
    """Decide whether a dependency complies with a policy.

    Resolution order:
    1. Package exceptions, which override license checking entirely
    2. Each candidate declaration in order, stopping at the first allowed one

    Args:
        dependency: Dependency with its alternative license declarations.
        policy: Allowed licenses and package exceptions.

    Returns:
        Decision naming the license shown for the dependency and, for
        compliant license matches, the declaration that matched.
    """
    candidates = dependency.candidates

    # No declared license at all is never compliant, exceptions included
    if not candidates:
        logger.debug("%s declares no license", dependency.identity)
        return Decision(
            identity=dependency.identity,
            display_license="",
            compliant=False,
        )

    rule = resolve_exception(dependency.identity, policy.exceptions)
    if rule is not None:
        return Decision(
            identity=dependency.identity,
            display_license=f"{candidates[0]} (exception: {rule.specifier})",
            compliant=True,
        )

    allowed = policy.allowed_set
    for candidate in candidates:
        if satisfied(candidate, allowed):
            return Decision(
                identity=dependency.identity,
                display_license=candidate,
                matched_license=candidate,
                compliant=True,
            )

    logger.debug("%s matched no allowed license", dependency.identity)
    return Decision(
        identity=dependency.identity,
        display_license=LICENSE_SEPARATOR.join(candidates),
        compliant=False,
    )


def check_dependencies(
    dependencies: Iterable[Dependency],
    policy: Policy,
) -> ValidationResult:
    """Check every dependency against a policy.

    Args:
        dependencies: Dependencies in traversal order.
        policy: Allowed licenses and package exceptions.

    Returns:
        ValidationResult preserving the traversal order of the input.
    """
    return ValidationResult.from_decisions(
        select_license(dependency, policy) for dependency in dependencies
    )
