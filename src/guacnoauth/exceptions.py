"""Exceptions raised by the guacnoauth library."""


class ValidationError(ValueError):
    """A value was rejected by a setter or while composing a filename."""
