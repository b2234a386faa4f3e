"""Shared fixtures for license-validator tests."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Callable, Optional

import pytest
from click.testing import CliRunner

from license_validator.models.scan import PackageRecord
from license_validator.resolvers.base import BaseLicenseFinder, BaseReportRenderer


class StubLicenseFinder(BaseLicenseFinder):
    """Finder returning canned data, or raising a canned error."""

    def __init__(self, data: Any = None, error: Optional[BaseException] = None) -> None:
        self.data = data
        self.error = error
        self.calls: list[Path] = []

    async def find(self, root_dir: Path) -> Any:
        self.calls.append(root_dir)
        if self.error is not None:
            raise self.error
        return self.data


class StubReportRenderer(BaseReportRenderer):
    """Renderer producing the same line format as the production renderer."""

    def __init__(self, error: Optional[BaseException] = None) -> None:
        self.error = error

    async def render(self, data: Sequence[Any]) -> str:
        if self.error is not None:
            raise self.error
        records = [PackageRecord.model_validate(entry) for entry in data]
        return "\n".join(
            f"{record.pkg} [license(s): {', '.join(record.licenses)}]"
            for record in records
        )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_finder() -> Callable[..., StubLicenseFinder]:
    """Factory for stub license finders."""
    return StubLicenseFinder


@pytest.fixture
def make_renderer() -> Callable[..., StubReportRenderer]:
    """Factory for stub report renderers."""
    return StubReportRenderer


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project root with a minimal pyproject.toml."""
    (tmp_path / "pyproject.toml").write_text(
        "[project]\n"
        'name = "demo"\n'
        'version = "1.0.0"\n'
        'license = "MIT"\n'
        "dependencies = []\n"
    )
    return tmp_path
