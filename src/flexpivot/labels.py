"""Display labels for statistics and grouping variables."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from .errors import InvalidInputError

# Stat keys produced by the aggregation step, in formatting order
STAT_KEYS = ("n", "p", "p_col", "p_row")


def _as_tuple(value: Union[None, str, Sequence[str]]) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class PivotLabels:
    """Labels used by the layout engine.

    ``rows`` and ``cols`` rename the grouping variables by position, so they
    must have the same length as the table's ``rows`` / ``cols``.
    """
    stats: str = "Statistic"  # Name of the statistics column
    n: str = "N"
    p: str = "%"
    p_col: str = "Col %"
    p_row: str = "Row %"
    rows: Optional[Tuple[str, ...]] = None
    cols: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "rows", _as_tuple(self.rows))
        object.__setattr__(self, "cols", _as_tuple(self.cols))

    def stat_label(self, key: str) -> str:
        """Get the display label of a stat key."""
        if key not in STAT_KEYS:
            raise KeyError(key)
        return getattr(self, key)

    def stat_mapping(self) -> Dict[str, str]:
        """Map every stat key to its display label."""
        return {key: getattr(self, key) for key in STAT_KEYS}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PivotLabels":
        """Build labels from a plain mapping, e.g. a YAML block."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidInputError(f"Unknown label fields: {sorted(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats,
            "n": self.n,
            "p": self.p,
            "p_col": self.p_col,
            "p_row": self.p_row,
            "rows": list(self.rows) if self.rows is not None else None,
            "cols": list(self.cols) if self.cols is not None else None,
        }


def pivot_labels(
    stats: str = "Statistic",
    n: str = "N",
    p: str = "%",
    p_col: str = "Col %",
    p_row: str = "Row %",
    rows: Optional[Sequence[str]] = None,
    cols: Optional[Sequence[str]] = None,
) -> PivotLabels:
    """Create labels for :func:`flexpivot.layout_engine.pivot_format`."""
    return PivotLabels(
        stats=stats,
        n=n,
        p=p,
        p_col=p_col,
        p_row=p_row,
        rows=rows,
        cols=cols,
    )
