"""Transitive dependency resolution over installed distributions."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from importlib.metadata import Distribution, distributions
from typing import Optional

from packaging.requirements import InvalidRequirement, Requirement

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Resolves transitive dependencies for installed packages."""

    def __init__(self, search_paths: Optional[list[str]] = None) -> None:
        """Initialize resolver with package index.

        Args:
            search_paths: Directories to look for distributions in.
                Defaults to the running interpreter's ``sys.path``.
        """
        found = (
            distributions(path=search_paths)
            if search_paths is not None
            else distributions()
        )
        self._installed: dict[str, Distribution] = {}
        for dist in found:
            name = dist.metadata.get("Name")
            # First match wins, as it does for imports
            if name and self._normalize(name) not in self._installed:
                self._installed[self._normalize(name)] = dist

    @staticmethod
    def _normalize(name: str) -> str:
        """Normalize package name per PEP 503.

        Args:
            name: Package name to normalize.

        Returns:
            Normalized package name (lowercase, underscores).
        """
        return name.lower().replace("-", "_").replace(".", "_")

    def get(self, name: str) -> Optional[Distribution]:
        """Look up an installed distribution by name."""
        return self._installed.get(self._normalize(name))

    def resolve(
        self,
        requirements: list[str],
        exclude: Iterable[str] = (),
    ) -> list[Distribution]:
        """Collect installed distributions reachable from requirements.

        Each distribution appears once, in depth-first pre-order of the
        requirement graph. Requirements that are malformed, not installed,
        excluded by an environment marker, or only needed for an extra are
        skipped.

        Args:
            requirements: Requirement strings, e.g. ``["requests>=2"]``.
            exclude: Package names never to include, such as the project
                being scanned.

        Returns:
            Distributions in traversal order.
        """
        visited = {self._normalize(name) for name in exclude}
        ordered: list[Distribution] = []
        for req_str in requirements:
            self._visit(req_str, visited, ordered)
        return ordered

    def _visit(
        self,
        req_str: str,
        visited: set[str],
        ordered: list[Distribution],
    ) -> None:
        try:
            req = Requirement(req_str)
        except InvalidRequirement:
            logger.debug("Skipping malformed requirement %r", req_str)
            return

        if self._is_extras_only_marker(req.marker):
            return
        if req.marker and not req.marker.evaluate():
            return

        normalized = self._normalize(req.name)
        # Already visited, which also cuts dependency cycles
        if normalized in visited:
            return
        visited.add(normalized)

        dist = self._installed.get(normalized)
        if dist is None:
            logger.warning("Dependency %s is not installed, skipping", req.name)
            return

        ordered.append(dist)
        for child in dist.requires or []:
            self._visit(child, visited, ordered)

    @staticmethod
    def _is_extras_only_marker(marker: Optional[object]) -> bool:
        """Check if marker indicates an extras-only dependency.

        Args:
            marker: Parsed marker object from Requirement.

        Returns:
            True if the marker references the ``extra`` variable.
        """
        if marker is None:
            return False
        return "extra" in str(marker)
