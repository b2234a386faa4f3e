"""Custom exceptions for license-validator."""


class LicenseValidatorError(Exception):
    """Base exception for all license-validator errors."""

    pass


class ConfigurationError(LicenseValidatorError):
    """Exception raised when configuration is invalid."""

    pass


class ScanError(LicenseValidatorError):
    """Exception raised when dependency discovery fails."""

    pass


class InvalidArgumentError(LicenseValidatorError):
    """Exception raised when the validation entry point is misused."""

    pass


class InvalidRootDirError(InvalidArgumentError):
    """Exception raised when the project root is missing or not a directory."""

    pass


class InvalidOptionsError(InvalidArgumentError):
    """Exception raised when no usable policy object is supplied."""

    pass


class EmptyPolicyError(InvalidArgumentError):
    """Exception raised when a policy allows no licenses and no packages."""

    pass


class MissingCallbackError(InvalidArgumentError):
    """Exception raised when no completion callback is supplied."""

    pass


class DiscoveryDataError(LicenseValidatorError):
    """Exception raised when license discovery returns unusable data."""

    pass


class InvalidDataError(DiscoveryDataError):
    """Exception raised when discovery data is absent or wrongly shaped."""

    pass


class NoLicensesFoundError(DiscoveryDataError):
    """Exception raised when discovery returns no packages at all."""

    pass
