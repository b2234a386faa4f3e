"""Validation entry point for dependency license policies."""
from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, cast

from pydantic import TypeAdapter, ValidationError

from license_validator.analysis.policy import check_dependencies
from license_validator.config.loader import format_validation_errors
from license_validator.exceptions import (
    EmptyPolicyError,
    InvalidArgumentError,
    InvalidDataError,
    InvalidOptionsError,
    InvalidRootDirError,
    MissingCallbackError,
    NoLicensesFoundError,
)
from license_validator.models.policy import Policy
from license_validator.models.result import ValidationResult
from license_validator.models.scan import PackageRecord
from license_validator.output.report import TextReportRenderer
from license_validator.resolvers.base import BaseLicenseFinder, BaseReportRenderer
from license_validator.resolvers.project import ProjectLicenseFinder

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[BaseException], Optional[ValidationResult]], Any]

_RECORDS = TypeAdapter(list[PackageRecord])


class DeliveryMode(Enum):
    """How validation failures reach the caller."""

    RAISE = "raise"
    CALLBACK = "callback"

    @classmethod
    def for_callback(cls, callback: Any) -> DeliveryMode:
        """Choose the delivery mode for a run.

        Args:
            callback: Completion handler passed by the caller.

        Returns:
            CALLBACK if the handler is callable, RAISE otherwise.
        """
        return cls.CALLBACK if callable(callback) else cls.RAISE


def check_root_dir(root_dir: Any) -> Path:
    """Validate the project root directory.

    Args:
        root_dir: Path supplied by the caller.

    Returns:
        The root directory as a Path.

    Raises:
        InvalidRootDirError: If the path is empty, not a path, does not
            exist, or is not a directory.
    """
    if not isinstance(root_dir, (str, os.PathLike)) or not str(root_dir):
        raise InvalidRootDirError("invalid root_dir")

    path = Path(root_dir)
    try:
        path.stat()
    except OSError as e:
        raise InvalidRootDirError(f"invalid root_dir: {e}") from e

    if not path.is_dir():
        raise InvalidRootDirError(f"invalid root_dir: {path} is not a directory")
    return path


def check_options(options: Any) -> Policy:
    """Validate the policy options.

    Args:
        options: A Policy, or a mapping with ``licenses`` and/or
            ``packages`` (or ``allowed_licenses`` / ``exceptions``).

    Returns:
        The validated Policy.

    Raises:
        InvalidOptionsError: If options are missing or malformed.
        EmptyPolicyError: If the policy allows no licenses and no packages.
    """
    if isinstance(options, Policy):
        policy = options
    elif isinstance(options, Mapping):
        try:
            policy = Policy.from_options(options)
        except ValidationError as e:
            raise InvalidOptionsError(
                f"invalid options: {format_validation_errors(e)}"
            ) from e
    else:
        raise InvalidOptionsError("invalid options")

    if policy.is_empty:
        raise EmptyPolicyError("no licenses or packages specified")
    return policy


def check_discovered(data: Any) -> Sequence[Any]:
    """Check that license discovery returned a non-empty collection.

    Entries are not inspected here; see check_records.

    Args:
        data: Whatever the finder returned.

    Returns:
        The discovered data, unchanged.

    Raises:
        InvalidDataError: If data is absent or not a sequence.
        NoLicensesFoundError: If the sequence is empty.
    """
    if (
        data is None
        or isinstance(data, (str, bytes, Mapping))
        or not isinstance(data, Sequence)
    ):
        raise InvalidDataError("license discovery returned invalid data")

    if not data:
        raise NoLicensesFoundError("license discovery found no licenses")
    return data


def check_records(data: Sequence[Any]) -> list[PackageRecord]:
    """Validate every discovered entry as a package record.

    Args:
        data: Discovered entries, in discovery order.

    Returns:
        Validated package records in discovery order.

    Raises:
        InvalidDataError: If any entry is not a package record.
    """
    try:
        return _RECORDS.validate_python(list(data))
    except ValidationError as e:
        raise InvalidDataError(
            "license discovery returned invalid data: "
            f"{format_validation_errors(e)}"
        ) from e


async def _run(
    root_dir: Path,
    policy: Policy,
    finder: Optional[BaseLicenseFinder],
    renderer: Optional[BaseReportRenderer],
) -> ValidationResult:
    finder = finder if finder is not None else ProjectLicenseFinder()
    renderer = renderer if renderer is not None else TextReportRenderer()

    data = check_discovered(await finder.find(root_dir))
    # Rendered from the raw entries; their shape is checked afterwards
    report = await renderer.render(data)
    records = check_records(data)

    result = check_dependencies(
        (record.to_dependency() for record in records), policy
    )
    logger.info(
        "Validated %d packages, %d invalid",
        len(result.packages),
        len(result.invalids),
    )
    return result.model_copy(update={"report": report})


async def validate_async(
    root_dir: Any,
    options: Any,
    *,
    finder: Optional[BaseLicenseFinder] = None,
    renderer: Optional[BaseReportRenderer] = None,
) -> ValidationResult:
    """Validate the licenses of a project's dependencies.

    Args:
        root_dir: Project root directory.
        options: Policy, or mapping of policy options.
        finder: License discovery collaborator. Defaults to
            ProjectLicenseFinder.
        renderer: Report collaborator. Defaults to TextReportRenderer.

    Returns:
        ValidationResult with the discovery report attached.

    Raises:
        InvalidArgumentError: If root_dir or options are invalid.
        DiscoveryDataError: If discovery returns unusable data.
        Exception: Any error raised by the collaborators, unchanged.
    """
    path = check_root_dir(root_dir)
    policy = check_options(options)
    return await _run(path, policy, finder, renderer)


def validate(
    root_dir: Any,
    options: Any = None,
    callback: Optional[Callback] = None,
    *,
    finder: Optional[BaseLicenseFinder] = None,
    renderer: Optional[BaseReportRenderer] = None,
) -> None:
    """Validate dependency licenses and report through a callback.

    Arguments are checked in order: root directory, options, policy
    contents, callback. When a callable callback is supplied, every
    failure, including collaborator errors, is delivered as
    ``callback(error, None)``. Without one, argument errors are raised
    immediately, ending with MissingCallbackError. On success the
    callback receives ``callback(None, result)``.

    Must not be called from a running event loop; use validate_async
    there instead.

    Args:
        root_dir: Project root directory.
        options: Policy, or mapping of policy options.
        callback: Completion handler taking (error, result).
        finder: License discovery collaborator.
        renderer: Report collaborator.

    Raises:
        InvalidArgumentError: Only when no callable callback is supplied.
    """
    mode = DeliveryMode.for_callback(callback)

    try:
        path = check_root_dir(root_dir)
        policy = check_options(options)
    except InvalidArgumentError as e:
        if mode is DeliveryMode.RAISE:
            raise
        cast(Callback, callback)(e, None)
        return

    if mode is DeliveryMode.RAISE:
        raise MissingCallbackError("no callback specified")

    deliver = cast(Callback, callback)
    try:
        result = asyncio.run(_run(path, policy, finder, renderer))
    except Exception as e:
        logger.debug("Validation failed: %s", e)
        deliver(e, None)
        return
    deliver(None, result)
