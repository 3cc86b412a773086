"""Custom exceptions for RepoGraph."""


class RepographError(Exception):
    """Base exception for all RepoGraph errors."""


class ConfigError(RepographError):
    """Configuration-related errors."""


class GraphError(RepographError):
    """Dependency graph errors."""


class InputError(RepographError):
    """Malformed analysis input document."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid analysis input '{source}': {reason}")
