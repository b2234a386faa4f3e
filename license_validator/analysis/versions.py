"""Semantic version range matching for package exceptions.

Ranges use the npm range grammar (exact, comparators, caret, tilde,
X-ranges, hyphen ranges, ``||`` unions). A PEP 440 specifier set such as
``>=1.0,<2`` or ``~=1.4`` is evaluated with ``packaging`` instead.
Anything that cannot be parsed never matches.
"""

from __future__ import annotations

import logging
import operator
import re
from typing import Callable, NamedTuple, Optional

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

_PEP440_OPERATORS = ("~=", "==", "!=")

_OPERATORS: dict[str, Callable[[Version, Version], bool]] = {
    "==": operator.eq,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}

_WILDCARDS = {"x", "X", "*"}

_PARTIAL_VERSION = re.compile(
    r"^v?(?P<major>\d+|[xX*])"
    r"(?:\.(?P<minor>\d+|[xX*])"
    r"(?:\.(?P<patch>\d+|[xX*])"
    r"(?:-?(?P<pre>[0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?)?)?$"
)

_COMPARATOR = re.compile(r"^(?P<op><=|>=|<|>|=|\^|~)?(?P<version>.*)$")

_OPERATOR_SPACING = re.compile(r"(<=|>=|<|>|=|\^|~)\s+")

_HYPHEN_RANGE = re.compile(r"^(?P<low>\S+)\s+-\s+(?P<high>\S+)$")


class Comparator(NamedTuple):
    """A single version bound.

    Attributes:
        op: One of ``==``, ``>``, ``>=``, ``<``, ``<=``.
        version: Version the candidate is compared against.
    """

    op: str
    version: Version

    def test(self, candidate: Version) -> bool:
        return _OPERATORS[self.op](candidate, self.version)


class _Partial(NamedTuple):
    major: Optional[int]
    minor: Optional[int]
    patch: Optional[int]
    pre: Optional[str]

    @property
    def is_full(self) -> bool:
        return self.patch is not None

    def floor(self) -> Version:
        text = f"{self.major or 0}.{self.minor or 0}.{self.patch or 0}"
        if self.pre and self.is_full:
            text += f"-{self.pre}"
        return Version(text)

    def next_minor(self) -> Version:
        return Version(f"{self.major}.{(self.minor or 0) + 1}.0")

    def next_major(self) -> Version:
        return Version(f"{(self.major or 0) + 1}.0.0")

    def next_significant(self) -> Version:
        """First version past the precision given, e.g. ``1.2`` -> ``1.3.0``."""
        if self.minor is None:
            return self.next_major()
        return self.next_minor()


def _parse_number(value: Optional[str]) -> Optional[int]:
    if value is None or value in _WILDCARDS:
        return None
    return int(value)


def _parse_partial(text: str) -> _Partial:
    match = _PARTIAL_VERSION.match(text)
    if match is None:
        raise ValueError(f"Invalid version in range: {text!r}")

    major = _parse_number(match.group("major"))
    minor = _parse_number(match.group("minor")) if major is not None else None
    patch = _parse_number(match.group("patch")) if minor is not None else None
    return _Partial(major, minor, patch, match.group("pre"))


def _caret(partial: _Partial) -> list[Comparator]:
    if partial.major is None:
        return []
    low = Comparator(">=", partial.floor())
    if partial.major > 0 or partial.minor is None:
        return [low, Comparator("<", partial.next_major())]
    if partial.minor > 0 or partial.patch is None:
        return [low, Comparator("<", partial.next_minor())]
    return [low, Comparator("<", Version(f"0.0.{partial.patch + 1}"))]


def _tilde(partial: _Partial) -> list[Comparator]:
    if partial.major is None:
        return []
    return [
        Comparator(">=", partial.floor()),
        Comparator("<", partial.next_significant()),
    ]


def _primitive(op: str, partial: _Partial) -> list[Comparator]:
    if partial.major is None:
        if op in ("<", ">"):
            raise ValueError(f"Range {op}* matches nothing")
        return []

    if op in ("", "="):
        if partial.is_full:
            return [Comparator("==", partial.floor())]
        return [
            Comparator(">=", partial.floor()),
            Comparator("<", partial.next_significant()),
        ]
    if op == ">":
        if partial.is_full:
            return [Comparator(">", partial.floor())]
        return [Comparator(">=", partial.next_significant())]
    if op == "<=":
        if partial.is_full:
            return [Comparator("<=", partial.floor())]
        return [Comparator("<", partial.next_significant())]
    # ">=" and "<" only need the zero-filled floor
    return [Comparator(op, partial.floor())]


def _parse_comparator(token: str) -> list[Comparator]:
    match = _COMPARATOR.match(token)
    if match is None:
        raise ValueError(f"Invalid comparator: {token!r}")
    op = match.group("op") or ""
    partial = _parse_partial(match.group("version"))

    if op == "^":
        return _caret(partial)
    if op == "~":
        return _tilde(partial)
    return _primitive(op, partial)


def _parse_hyphen(low: str, high: str) -> list[Comparator]:
    lower = _parse_partial(low)
    upper = _parse_partial(high)
    comparators: list[Comparator] = []
    if lower.major is not None:
        comparators.append(Comparator(">=", lower.floor()))
    if upper.major is not None:
        if upper.is_full:
            comparators.append(Comparator("<=", upper.floor()))
        else:
            comparators.append(Comparator("<", upper.next_significant()))
    return comparators


def _parse_comparator_set(text: str) -> list[Comparator]:
    text = _OPERATOR_SPACING.sub(r"\1", text.strip())
    if not text:
        return []

    hyphen = _HYPHEN_RANGE.match(text)
    if hyphen is not None:
        return _parse_hyphen(hyphen.group("low"), hyphen.group("high"))

    comparators: list[Comparator] = []
    for token in text.split():
        comparators.extend(_parse_comparator(token))
    return comparators


def parse_range(version_range: str) -> list[list[Comparator]]:
    """Parse an npm-style range into alternative comparator sets.

    Args:
        version_range: Range expression, e.g. ``^1.2.0 || >=3.0.0 <4``.

    Returns:
        List of comparator sets; a version matches the range if it
        satisfies every comparator of at least one set. An empty set
        matches every version.

    Raises:
        ValueError: If the range is malformed.
    """
    return [_parse_comparator_set(part) for part in version_range.split("||")]


def _release(version: Version) -> tuple[int, ...]:
    return (version.release + (0, 0, 0))[:3]


def _satisfies(version: Version, comparators: list[Comparator]) -> bool:
    if not all(comparator.test(version) for comparator in comparators):
        return False
    if not version.is_prerelease:
        return True
    # Prereleases only match a set that names a prerelease of the same release
    return any(
        comparator.version.is_prerelease
        and _release(comparator.version) == _release(version)
        for comparator in comparators
    )


def _is_pep440(version_range: str) -> bool:
    return "," in version_range or version_range.startswith(_PEP440_OPERATORS)


def matches(version: str, version_range: Optional[str]) -> bool:
    """Check whether a concrete version falls inside a range.

    Args:
        version: Concrete package version, e.g. ``1.2.0``.
        version_range: Range expression, or None for "any version".

    Returns:
        True if the version satisfies the range. Malformed versions or
        ranges return False.
    """
    if version_range is None:
        return True

    try:
        parsed = Version(version.strip())
    except InvalidVersion:
        logger.debug("Unparsable version %r never matches a range", version)
        return False

    text = version_range.strip()
    if _is_pep440(text):
        try:
            return SpecifierSet(text).contains(parsed)
        except InvalidSpecifier:
            logger.debug("Unparsable specifier set %r", version_range)
            return False

    try:
        alternatives = parse_range(text)
    except ValueError:
        logger.debug("Unparsable version range %r", version_range)
        return False

    return any(_satisfies(parsed, comparators) for comparators in alternatives)
