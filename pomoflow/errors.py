"""Exceptions raised by Pomoflow."""


class PomoflowError(Exception):
    """Base class for Pomoflow errors."""


class InvalidSettingsError(PomoflowError, ValueError):
    """A timer settings update was rejected; the previous values stay."""
