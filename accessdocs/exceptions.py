"""
Exception types for the accessdocs package.

Accessibility findings are never raised; they are returned as issues.
These exceptions cover the operational layer around the core: loading
configuration and talking to the external markup validator.
"""


class AccessDocsError(Exception):
    """Base exception class for all accessdocs errors."""


class ConfigurationError(AccessDocsError):
    """Raised when a configuration file cannot be found or parsed."""


class ValidatorError(AccessDocsError):
    """Raised when the external HTML validator cannot be reached or answers badly."""
