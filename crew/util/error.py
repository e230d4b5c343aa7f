"""Errors raised by the utility layer."""


class UtilError(Exception):
    """Base utility error."""


class DependencyInjectionError(UtilError):
    """No provider implementation matches the requested component."""


class JWTError(UtilError):
    """Bearer token could not be decoded, or has expired."""
