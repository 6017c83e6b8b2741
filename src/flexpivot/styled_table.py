"""Styled table description produced by the layout engine."""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

HEADER = "header"
BODY = "body"
PARTS = (HEADER, BODY)


@dataclass(frozen=True)
class Border:
    """A single border line."""
    color: str
    width: float = 1.0


@dataclass(frozen=True)
class CellStyle:
    """
    Paint for one cell. Fields left as None are unset and inherit from
    earlier rules (or the defaults when no rule sets them).
    """
    background: Optional[str] = None
    foreground: Optional[str] = None
    bold: Optional[bool] = None
    font_name: Optional[str] = None
    font_size: Optional[float] = None
    padding: Optional[float] = None
    border_top: Optional[Border] = None
    border_bottom: Optional[Border] = None
    border_left: Optional[Border] = None
    border_right: Optional[Border] = None

    def merged(self, other: "CellStyle") -> "CellStyle":
        """Overlay the fields set in other on top of this style."""
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **changes) if changes else self

    @classmethod
    def all_borders(cls, border: Border) -> "CellStyle":
        return cls(
            border_top=border,
            border_bottom=border,
            border_left=border,
            border_right=border,
        )


DEFAULT_CELL_STYLE = CellStyle(
    foreground="#000000",
    bold=False,
    font_size=11,
    padding=2.0,
)


@dataclass(frozen=True)
class StyleRule:
    """Paint directive addressed to a part and a set of rows/columns (None = all)."""
    part: str
    style: CellStyle
    rows: Optional[Tuple[int, ...]] = None
    cols: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        if self.part not in PARTS:
            raise ValueError(f"Unknown table part: {self.part!r}")
        if self.rows is not None:
            object.__setattr__(self, "rows", tuple(self.rows))
        if self.cols is not None:
            object.__setattr__(self, "cols", tuple(self.cols))

    def covers(self, row: int, col: int) -> bool:
        return (self.rows is None or row in self.rows) and (
            self.cols is None or col in self.cols
        )


@dataclass(frozen=True)
class HeaderCell:
    """Header label spanning one or more columns."""
    label: str
    span: int = 1
    align: str = "left"  # "left", "center", "right"


@dataclass(frozen=True)
class VerticalMerge:
    """Body cells of one column merged from first_row to last_row (inclusive)."""
    col: int
    first_row: int
    last_row: int

    @property
    def size(self) -> int:
        return self.last_row - self.first_row + 1


@dataclass
class StyledTable:
    """
    Fully specified description of a styled pivot table.

    Rules are applied in order, later rules overriding earlier ones field by
    field. Positions are 0-based and relative to their part.
    """
    col_keys: List[str]
    header_rows: List[List[HeaderCell]]
    body: List[List[str]]
    rules: List[StyleRule] = field(default_factory=list)
    merges: List[VerticalMerge] = field(default_factory=list)
    column_width: float = 1.5  # Inches
    source: Optional[pd.DataFrame] = None

    def __post_init__(self):
        for i, row in enumerate(self.header_rows):
            width = sum(cell.span for cell in row)
            if width != len(self.col_keys):
                raise ValueError(
                    f"Header row {i} spans {width} columns, expected {len(self.col_keys)}"
                )

    @property
    def n_cols(self) -> int:
        return len(self.col_keys)

    @property
    def n_header_rows(self) -> int:
        return len(self.header_rows)

    @property
    def n_body_rows(self) -> int:
        return len(self.body)

    def part_size(self, part: str) -> int:
        return self.n_header_rows if part == HEADER else self.n_body_rows

    def header_spans(self, row: int) -> List[Tuple[int, int, HeaderCell]]:
        """(first column, last column, cell) for each cell of a header row."""
        spans = []
        col = 0
        for cell in self.header_rows[row]:
            spans.append((col, col + cell.span - 1, cell))
            col += cell.span
        return spans

    def header_text(self, row: int) -> List[str]:
        """Header labels expanded to one entry per column; merged positions are blank."""
        texts = []
        for cell in self.header_rows[row]:
            texts.append(cell.label)
            texts.extend([""] * (cell.span - 1))
        return texts

    def merge_at(self, row: int, col: int) -> Optional[VerticalMerge]:
        """The body merge covering a cell, if any."""
        for merge in self.merges:
            if merge.col == col and merge.first_row <= row <= merge.last_row:
                return merge
        return None

    def resolve(self, part: str) -> List[List[CellStyle]]:
        """Fold all rules into one CellStyle per cell of a part."""
        n_rows = self.part_size(part)
        grid = [[DEFAULT_CELL_STYLE] * self.n_cols for _ in range(n_rows)]
        for rule in self.rules:
            if rule.part != part:
                continue
            rows = range(n_rows) if rule.rows is None else rule.rows
            cols = range(self.n_cols) if rule.cols is None else rule.cols
            for i in rows:
                if not 0 <= i < n_rows:
                    continue
                for j in cols:
                    if 0 <= j < self.n_cols:
                        grid[i][j] = grid[i][j].merged(rule.style)
        return grid

    def cell_style(self, part: str, row: int, col: int) -> CellStyle:
        """Resolved style of a single cell."""
        style = DEFAULT_CELL_STYLE
        for rule in self.rules:
            if rule.part == part and rule.covers(row, col):
                style = style.merged(rule.style)
        return style

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable description (the retained source frame is omitted)."""
        def _style_dict(style: CellStyle) -> Dict[str, Any]:
            data = {}
            for f in fields(style):
                value = getattr(style, f.name)
                if value is None:
                    continue
                if isinstance(value, Border):
                    value = {"color": value.color, "width": value.width}
                data[f.name] = value
            return data

        return {
            "col_keys": list(self.col_keys),
            "column_width": self.column_width,
            "header": [
                [{"label": c.label, "span": c.span, "align": c.align} for c in row]
                for row in self.header_rows
            ],
            "body": [list(row) for row in self.body],
            "merges": [
                {"col": m.col, "first_row": m.first_row, "last_row": m.last_row}
                for m in self.merges
            ],
            "rules": [
                {
                    "part": rule.part,
                    "rows": list(rule.rows) if rule.rows is not None else None,
                    "cols": list(rule.cols) if rule.cols is not None else None,
                    "style": _style_dict(rule.style),
                }
                for rule in self.rules
            ],
        }
