"""SPDX-style license expression parsing and allow-list evaluation.

Grammar (operators are upper-case keywords, WITH binds tightest, then AND,
then OR)::

    or    := and ("OR" and)*
    and   := with ("AND" with)*
    with  := atom ["WITH" identifier]
    atom  := identifier | "(" or ")"

Every node keeps the exact source text it was parsed from, parentheses
included, so a policy can allow-list any sub-expression verbatim.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Set
from typing import NamedTuple, Union

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"\(|\)|[^\s()]+")

AND = "AND"
OR = "OR"
WITH = "WITH"
_KEYWORDS = frozenset({AND, OR, WITH})


class ExpressionSyntaxError(ValueError):
    """Raised when a license declaration is not a well-formed expression."""


class LicenseSymbol(NamedTuple):
    """An atomic license identifier such as ``MIT``."""

    text: str


class LicenseWith(NamedTuple):
    """A license paired with an exception, e.g. ``GPL-2.0 WITH Bison-exception-2.2``."""

    text: str
    license: LicenseSymbol
    exception: LicenseSymbol


class LicenseAnd(NamedTuple):
    """Both operands must be allowed."""

    text: str
    left: LicenseNode
    right: LicenseNode


class LicenseOr(NamedTuple):
    """Either operand must be allowed."""

    text: str
    left: LicenseNode
    right: LicenseNode


LicenseNode = Union[LicenseSymbol, LicenseWith, LicenseAnd, LicenseOr]


class _Token(NamedTuple):
    value: str
    start: int
    end: int


class _Parser:
    """Recursive-descent parser over a tokenized expression."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._tokens = [
            _Token(m.group(), m.start(), m.end()) for m in _TOKEN.finditer(source)
        ]
        self._pos = 0

    def parse(self) -> LicenseNode:
        if not self._tokens:
            raise ExpressionSyntaxError("Empty license expression")
        node, _, _ = self._parse_or()
        if self._pos != len(self._tokens):
            token = self._tokens[self._pos]
            raise ExpressionSyntaxError(
                f"Unexpected {token.value!r} at position {token.start}"
            )
        return node

    def _peek(self) -> str | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos].value
        return None

    def _advance(self) -> _Token:
        if self._pos >= len(self._tokens):
            raise ExpressionSyntaxError("Unexpected end of license expression")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _slice(self, start: int, end: int) -> str:
        return self._source[start:end]

    def _parse_or(self) -> tuple[LicenseNode, int, int]:
        left, start, end = self._parse_and()
        while self._peek() == OR:
            self._advance()
            right, _, end = self._parse_and()
            left = LicenseOr(self._slice(start, end), left, right)
        return left, start, end

    def _parse_and(self) -> tuple[LicenseNode, int, int]:
        left, start, end = self._parse_with()
        while self._peek() == AND:
            self._advance()
            right, _, end = self._parse_with()
            left = LicenseAnd(self._slice(start, end), left, right)
        return left, start, end

    def _parse_with(self) -> tuple[LicenseNode, int, int]:
        node, start, end = self._parse_atom()
        if self._peek() != WITH:
            return node, start, end
        if not isinstance(node, LicenseSymbol) or self._source[start] == "(":
            raise ExpressionSyntaxError(
                "WITH must follow a single license identifier"
            )
        self._advance()
        exception = self._expect_identifier()
        pairing = LicenseWith(
            self._slice(start, exception.end),
            node,
            LicenseSymbol(exception.value),
        )
        return pairing, start, exception.end

    def _parse_atom(self) -> tuple[LicenseNode, int, int]:
        token = self._advance()
        if token.value == "(":
            node, _, _ = self._parse_or()
            closing = self._advance()
            if closing.value != ")":
                raise ExpressionSyntaxError(
                    f"Expected ')' at position {closing.start}"
                )
            # A bare identifier in parentheses is still just that identifier
            if not isinstance(node, LicenseSymbol):
                node = node._replace(text=self._slice(token.start, closing.end))
            return node, token.start, closing.end
        self._pos -= 1
        identifier = self._expect_identifier()
        return LicenseSymbol(identifier.value), identifier.start, identifier.end

    def _expect_identifier(self) -> _Token:
        token = self._advance()
        if token.value in _KEYWORDS or token.value in ("(", ")"):
            raise ExpressionSyntaxError(
                f"Expected a license identifier at position {token.start}, "
                f"got {token.value!r}"
            )
        return token


def parse_expression(expression: str) -> LicenseNode:
    """Parse a license declaration into a typed tree.

    Args:
        expression: License declaration, e.g. ``(MIT OR (ISC AND BSD-2-Clause))``.

    Returns:
        Root node of the parsed expression.

    Raises:
        ExpressionSyntaxError: If the declaration is malformed.
    """
    return _Parser(expression).parse()


def _is_group(text: str) -> bool:
    """Check whether the whole text is one parenthesized group."""
    if not text.startswith("("):
        return False
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index == len(text) - 1
    return False


def is_satisfied(node: LicenseNode, allowed: Set[str]) -> bool:
    """Evaluate a parsed expression against an allow-list.

    A node whose source text is allow-listed is satisfied outright.
    Otherwise AND needs both operands and OR needs either; identifiers
    and WITH pairings have nothing left to decompose.

    Args:
        node: Parsed expression.
        allowed: Allowed identifiers and exact composite expressions.

    Returns:
        True if the expression is permitted by the allow-list.
    """
    if node.text in allowed:
        return True
    if isinstance(node, LicenseAnd):
        return is_satisfied(node.left, allowed) and is_satisfied(node.right, allowed)
    if isinstance(node, LicenseOr):
        return is_satisfied(node.left, allowed) or is_satisfied(node.right, allowed)
    return False


def satisfied(expression: str, allowed: Set[str]) -> bool:
    """Check whether a license declaration is permitted by an allow-list.

    The declaration is first looked up verbatim. Only a composite wrapped
    in parentheses, such as ``(MIT OR ISC)``, is decomposed; a bare
    ``MIT OR ISC`` or a declaration that does not parse is only ever
    satisfied by that verbatim lookup.

    Args:
        expression: A single license declaration.
        allowed: Allowed identifiers and exact composite expressions.

    Returns:
        True if the declaration is permitted.
    """
    if expression in allowed:
        return True
    try:
        node = parse_expression(expression)
    except ExpressionSyntaxError as e:
        logger.debug("Treating %r as an opaque identifier: %s", expression, e)
        return False
    if isinstance(node, (LicenseAnd, LicenseOr)) and not _is_group(node.text):
        logger.debug("Treating unparenthesized %r as an opaque identifier", expression)
        return False
    return is_satisfied(node, allowed)
