"""
Error Types

Exceptions raised across the spatiotemporal filtering pipeline.
"""


class STFiltersError(Exception):
    """Base class for all errors raised by stfilters."""


class SourceError(STFiltersError, IOError):
    """The input video could not be opened or decoded."""


class ValidationError(STFiltersError, ValueError):
    """
    Input shapes or parameters do not satisfy an operation's contract.

    Raised before the offending operation runs, never after partial work.
    """
