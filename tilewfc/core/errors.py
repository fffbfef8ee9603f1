# errors.py - exceptions raised by the tile WFC core


class WFCError(Exception):
    """Base class for every error raised by tilewfc."""


class ConfigurationError(WFCError, ValueError):
    """
    The generation inputs can not be used as given.

    Raised for bad grid dimensions, unknown edge names and malformed rule
    strings. When raised from a failed validation, ``violations`` holds the
    individual rule violations so a caller can show them.
    """

    def __init__(self, message, violations=()):
        super().__init__(message)
        self.violations = tuple(violations)


class CellStateError(WFCError):
    """A cell operation was requested on a cell that can not accept it."""
