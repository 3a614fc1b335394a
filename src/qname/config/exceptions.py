"""Custom exceptions for configuration management."""

from qname.errors import QnameError


class ConfigError(QnameError):
    """Raised when configuration data cannot be loaded or is invalid."""
