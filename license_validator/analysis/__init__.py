"""License policy evaluation for license-validator."""
from license_validator.analysis.expression import (
    ExpressionSyntaxError,
    parse_expression,
    satisfied,
)
from license_validator.analysis.overrides import resolve_exception, split_identity
from license_validator.analysis.policy import check_dependencies, select_license
from license_validator.analysis.versions import matches

__all__ = [
    "ExpressionSyntaxError",
    "check_dependencies",
    "matches",
    "parse_expression",
    "resolve_exception",
    "satisfied",
    "select_license",
    "split_identity",
]
