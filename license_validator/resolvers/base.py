"""Collaborator interfaces for license discovery and report rendering."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Any


class BaseLicenseFinder(ABC):
    """Abstract base class for license discovery.

    Implementations walk a project's dependency tree and report the
    license declarations of every package found.
    """

    @abstractmethod
    async def find(self, root_dir: Path) -> Any:
        """Discover packages and their declared licenses.

        Args:
            root_dir: Project root directory.

        Returns:
            Sequence of PackageRecord objects (or mappings with ``pkg`` and
            ``licenses`` keys) in traversal order. The caller validates the
            shape of whatever is returned.

        Raises:
            ScanError: If the project cannot be scanned.
        """


class BaseReportRenderer(ABC):
    """Abstract base class for human-readable discovery reports."""

    @abstractmethod
    async def render(self, data: Sequence[Any]) -> str:
        """Render discovered packages as text.

        Args:
            data: Discovered entries as returned by the finder, already
                known to be a non-empty sequence. Entries are usually
                PackageRecord objects or mappings with the same keys.

        Returns:
            Report text.
        """
