"""Constants for license-validator."""

# Exit codes
EXIT_SUCCESS = 0  # Every dependency is compliant
EXIT_ISSUES = 1  # At least one dependency violates the policy
EXIT_ERROR = 2  # Validation could not run

# Display separator between alternative license declarations
LICENSE_SEPARATOR = ", "

# Values of the License metadata field that carry no information
NO_LICENSE_VALUES = frozenset({"", "UNKNOWN", "NONE"})

LEGAL_DISCLAIMER_SHORT = (
    "This tool reports declared license metadata for informational purposes "
    "only. It does not constitute legal advice."
)
