"""Exceptions raised while formatting pivot tables."""

from typing import Any, Sequence


class PivotFormatError(Exception):
    """Base class for all pivot formatting errors."""


class InvalidInputError(PivotFormatError, ValueError):
    """Input is not a usable pivot table, or an option has an unknown value."""


class FormatterError(PivotFormatError):
    """A stat formatter raised while formatting a group of values."""

    def __init__(self, stat: str, values: Sequence[Any], cause: BaseException):
        self.stat = stat
        self.values = list(values)
        self.cause = cause
        super().__init__(
            f"Formatter for stat '{stat}' failed on values {self.values!r}: {cause}"
        )


class LayoutAmbiguityError(PivotFormatError):
    """Table has more than one column-grouping variable and strict layout is on."""
