"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Settings are unusable in the running environment.

    Raised at startup, e.g. a production deployment that still carries the
    placeholder signing secret.
    """

    pass


class DependencyInjectionError(UtilError):
    """No provider implementation exists for a requested component."""

    pass
