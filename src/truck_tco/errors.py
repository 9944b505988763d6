"""Error taxonomy for the TCO core.

Every error aborts the whole four-fuel calculation; nothing is retried and
no partial result is ever returned.
"""


class TCOError(Exception):
    """Base class for all calculator errors."""


class InvalidInputError(TCOError, ValueError):
    """A required number is missing, non-positive or non-finite."""


class ResolutionError(InvalidInputError):
    """An override resolved to NaN (e.g. a non-numeric string was sent)."""


class MissingPresetError(TCOError, LookupError):
    """No rate preset resolves for the request."""


class NoActivePresetError(MissingPresetError):
    """Zero presets, or more than one, are marked active."""
