"""Pivot table data model and structural validation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd
import yaml

from .errors import InvalidInputError
from .labels import PivotLabels

DEFAULT_STAT_COLUMN = "stats"


def _as_name_list(value: Union[None, str, List[str], Tuple[str, ...]]) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


@dataclass
class PivotTable:
    """
    A pre-aggregated pivot table and the metadata describing its shape.

    ``rows`` are the row-grouping columns. ``cols`` are the variables that
    were spread into wide columns; when set, ``cols_values`` lists the values
    of each variable (one generated column per value) and ``stat_column``
    tells which statistic each row reports.
    """
    data: pd.DataFrame
    rows: List[str]
    cols: Optional[List[str]] = None
    cols_values: Dict[str, List[Any]] = field(default_factory=dict)
    stat_column: str = DEFAULT_STAT_COLUMN

    def __post_init__(self):
        self.rows = _as_name_list(self.rows)
        self.cols = _as_name_list(self.cols) or None
        self.cols_values = {
            str(k): list(v) for k, v in (self.cols_values or {}).items()
        }

    @property
    def is_crosstab(self) -> bool:
        """True when at least one column-grouping variable is present."""
        return bool(self.cols)

    @property
    def n_column_groups(self) -> int:
        return len(self.cols or [])

    def value_columns(self, variable: str) -> List[str]:
        """Names of the wide columns generated for a column-grouping variable."""
        return [str(v) for v in self.cols_values.get(variable, [])]

    def validate(self) -> None:
        """
        Check the structural shape of the table.

        Raises InvalidInputError when required metadata is missing. The
        aggregation invariants (row-group contiguity, value/column
        correspondence) are trusted, not checked.
        """
        if not isinstance(self.data, pd.DataFrame):
            raise InvalidInputError(
                f"Pivot data must be a pandas DataFrame, got {type(self.data).__name__}"
            )
        if self.rows is None:
            raise InvalidInputError("Pivot table is missing its 'rows' metadata")

        columns = [str(c) for c in self.data.columns]
        missing_rows = [r for r in self.rows if r not in columns]
        if missing_rows:
            raise InvalidInputError(f"Row-grouping columns not found in data: {missing_rows}")

        if self.cols:
            if self.stat_column not in columns:
                raise InvalidInputError(
                    f"Cross-tabulated pivot table has no '{self.stat_column}' column"
                )
            missing_values = [c for c in self.cols if c not in self.cols_values]
            if missing_values:
                raise InvalidInputError(
                    f"Missing 'cols_values' for column-grouping variables: {missing_values}"
                )

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "PivotTable":
        """Build a pivot table from a DataFrame carrying its metadata in ``attrs``."""
        attrs = frame.attrs
        if "rows" not in attrs:
            raise InvalidInputError("DataFrame has no pivot metadata ('rows' missing from attrs)")
        return cls(
            data=frame,
            rows=attrs["rows"],
            cols=attrs.get("cols"),
            cols_values=attrs.get("cols_values") or {},
            stat_column=attrs.get("stat_column", DEFAULT_STAT_COLUMN),
        )

    def to_frame(self) -> pd.DataFrame:
        """Copy of the data with the metadata stored in ``attrs``."""
        frame = self.data.copy()
        frame.attrs = {
            "rows": list(self.rows),
            "cols": list(self.cols) if self.cols else None,
            "cols_values": {k: list(v) for k, v in self.cols_values.items()},
            "stat_column": self.stat_column,
        }
        return frame


def as_pivot_table(obj: Any) -> PivotTable:
    """Accept a PivotTable or a DataFrame with pivot metadata; reject anything else."""
    if isinstance(obj, PivotTable):
        return obj
    if isinstance(obj, pd.DataFrame):
        return PivotTable.from_frame(obj)
    raise InvalidInputError(
        f"Expected a PivotTable or a DataFrame with pivot metadata, got {type(obj).__name__}"
    )


def load_pivot(data_path: Path, meta_path: Path) -> Tuple[PivotTable, PivotLabels]:
    """
    Load a pivot table from a CSV file and its metadata from YAML.

    The YAML file holds ``rows``, optionally ``cols``, ``cols_values`` and
    ``stat_column``, and an optional ``labels`` block.

    Returns:
        Tuple of (pivot table, labels)
    """
    with open(meta_path, "r") as f:
        meta = yaml.safe_load(f) or {}
    if not isinstance(meta, dict):
        raise InvalidInputError(f"Metadata file {meta_path} must contain a mapping")
    if "rows" not in meta:
        raise InvalidInputError(f"Metadata file {meta_path} has no 'rows' entry")

    frame = pd.read_csv(data_path)
    pivot = PivotTable(
        data=frame,
        rows=meta["rows"],
        cols=meta.get("cols"),
        cols_values=meta.get("cols_values") or {},
        stat_column=meta.get("stat_column", DEFAULT_STAT_COLUMN),
    )
    labels = PivotLabels.from_dict(meta.get("labels"))
    return pivot, labels
