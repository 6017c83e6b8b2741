"""Numeric formatters applied to each statistic before display."""

from dataclasses import dataclass
from typing import Any, Callable

import numpy as np
import pandas as pd

from .labels import STAT_KEYS

StatFormatter = Callable[[Any], str]

# Text shown for missing statistics
MISSING_TEXT = ""


def is_missing(value: Any) -> bool:
    """Check whether a statistic value is missing (None, NaN, NaT or pd.NA)."""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Array-likes are never a single missing value
        return False


def format_number(value: Any, digits: int = 0) -> str:
    """
    Round half-to-even and drop trailing zeros.

    Examples: 42.345 -> "42.3" (digits=1), 12.0 -> "12", 50.0 -> "50".
    """
    if is_missing(value):
        return MISSING_TEXT
    rounded = float(np.round(float(value), digits))
    text = f"{rounded:.{max(digits, 0)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def format_count(value: Any) -> str:
    """Format a count as a whole number."""
    return format_number(value, 0)


def format_percent(value: Any, digits: int = 1) -> str:
    """Format a percentage with one decimal and a trailing '%'."""
    if is_missing(value):
        return MISSING_TEXT
    return f"{format_number(value, digits)}%"


def percent_formatter(digits: int = 1, suffix: str = "%") -> StatFormatter:
    """Build a percentage formatter with a custom precision and suffix."""
    def _format(value: Any) -> str:
        if is_missing(value):
            return MISSING_TEXT
        return f"{format_number(value, digits)}{suffix}"
    return _format


@dataclass(frozen=True)
class PivotFormatter:
    """One formatter per stat key. Callables may return any value; it is passed through str()."""
    n: StatFormatter = format_count
    p: StatFormatter = format_percent
    p_col: StatFormatter = format_percent
    p_row: StatFormatter = format_percent

    def __post_init__(self):
        for key in STAT_KEYS:
            if not callable(getattr(self, key)):
                raise TypeError(f"Formatter for '{key}' must be callable")

    def for_stat(self, key: str) -> StatFormatter:
        """Get the formatter of a stat key."""
        if key not in STAT_KEYS:
            raise KeyError(key)
        return getattr(self, key)


def pivot_formatter(
    n: StatFormatter = format_count,
    p: StatFormatter = format_percent,
    p_col: StatFormatter = format_percent,
    p_row: StatFormatter = format_percent,
) -> PivotFormatter:
    """Create formatters for :func:`flexpivot.layout_engine.pivot_format`."""
    return PivotFormatter(n=n, p=p, p_col=p_col, p_row=p_row)
