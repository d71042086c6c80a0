"""Exceptions raised by the self-organizing feature map."""


class SOMError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SOMError, ValueError):
    """Invalid map dimensions, epoch budget, connection type or training parameters."""


class InvalidInputError(SOMError, ValueError):
    """Empty, ragged or non-numeric data set, or a pattern of the wrong dimension."""
