"""License discovery for a Python project and its installed dependencies."""
from __future__ import annotations

import asyncio
import logging
import tomllib
from pathlib import Path
from typing import Any, Optional

from license_validator.exceptions import ScanError
from license_validator.models.scan import PackageRecord
from license_validator.resolvers.base import BaseLicenseFinder
from license_validator.resolvers.dependency import DependencyResolver
from license_validator.resolvers.metadata import (
    extract_licenses,
    extract_project_licenses,
)

logger = logging.getLogger(__name__)

PYPROJECT_FILE = "pyproject.toml"

# Virtual environment directories looked for inside a project root
VENV_DIR_NAMES = (".venv", "venv", "env")


def find_site_packages(root_dir: Path) -> Optional[list[str]]:
    """Locate site-packages of a virtual environment inside the project.

    Args:
        root_dir: Project root directory.

    Returns:
        Site-packages directories of the first virtual environment found,
        or None to fall back to the running interpreter's environment.
    """
    for venv_name in VENV_DIR_NAMES:
        venv = root_dir / venv_name
        if not (venv / "pyvenv.cfg").is_file():
            continue
        candidates = sorted(venv.glob("lib/python*/site-packages"))
        candidates += sorted(venv.glob("Lib/site-packages"))
        if candidates:
            return [str(path) for path in candidates]
    return None


def read_project(root_dir: Path) -> dict[str, Any]:
    """Read the ``[project]`` table of a project's pyproject.toml.

    Args:
        root_dir: Project root directory.

    Returns:
        The ``[project]`` table.

    Raises:
        ScanError: If pyproject.toml is missing, unreadable, invalid,
            or has no named ``[project]`` table.
    """
    path = root_dir / PYPROJECT_FILE
    if not path.is_file():
        raise ScanError(f"No {PYPROJECT_FILE} file found in {root_dir}")

    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except OSError as e:
        raise ScanError(f"Cannot read '{path}': {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ScanError(f"Invalid TOML in '{path}': {e}") from e

    project = data.get("project")
    if not isinstance(project, dict) or not project.get("name"):
        raise ScanError(f"No [project] name declared in '{path}'")
    return project


class ProjectLicenseFinder(BaseLicenseFinder):
    """Finds declared licenses for a project and its runtime dependencies.

    The project itself is read from its pyproject.toml. Dependencies are
    resolved transitively through the project's virtual environment when
    one exists inside the root, otherwise through the running interpreter.
    """

    def __init__(self, search_paths: Optional[list[str]] = None) -> None:
        """Initialize the finder.

        Args:
            search_paths: Directories to look for installed distributions
                in. Overrides virtual environment detection.
        """
        self._search_paths = search_paths

    async def find(self, root_dir: Path) -> list[PackageRecord]:
        """Discover the project's packages and their declared licenses.

        Args:
            root_dir: Project root directory.

        Returns:
            One PackageRecord per package, project first, then dependencies
            in traversal order.

        Raises:
            ScanError: If the project cannot be read.
        """
        return await asyncio.to_thread(self.scan, root_dir)

    def scan(self, root_dir: Path) -> list[PackageRecord]:
        """Synchronous implementation of :meth:`find`."""
        project = read_project(root_dir)
        search_paths = self._search_paths or find_site_packages(root_dir)
        resolver = DependencyResolver(search_paths)

        name = str(project["name"])
        installed = resolver.get(name)
        version = project.get("version")
        if version is None and installed is not None:
            version = installed.metadata.get("Version")

        records = [
            PackageRecord(
                pkg=f"{name}@{version or 'unknown'}",
                licenses=extract_project_licenses(project),
            )
        ]

        for dist in resolver.resolve(
            list(project.get("dependencies") or []), exclude=[name]
        ):
            records.append(
                PackageRecord(
                    pkg=f"{dist.metadata['Name']}@{dist.metadata['Version']}",
                    licenses=extract_licenses(dist.metadata),
                )
            )

        logger.debug("Discovered %d packages under %s", len(records), root_dir)
        return records
