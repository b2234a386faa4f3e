"""License discovery collaborators."""

from license_validator.resolvers.base import BaseLicenseFinder, BaseReportRenderer
from license_validator.resolvers.dependency import DependencyResolver
from license_validator.resolvers.project import ProjectLicenseFinder

__all__ = [
    "BaseLicenseFinder",
    "BaseReportRenderer",
    "DependencyResolver",
    "ProjectLicenseFinder",
]
