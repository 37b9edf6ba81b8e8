"""Utility layer errors."""


class UtilError(Exception):
    """Base error for wiring and startup problems."""

    pass


class ConfigurationError(UtilError):
    """Settings or test container options that cannot be used."""

    pass


class DependencyInjectionError(UtilError):
    """No provider implementation for a requested component."""

    pass
