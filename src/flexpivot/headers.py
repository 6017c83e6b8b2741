"""Header construction strategies, one per table shape."""

import logging
from typing import List, Sequence

from .config import StyleOptions
from .errors import LayoutAmbiguityError
from .labels import PivotLabels
from .pivot_table import PivotTable
from .styled_table import HEADER, CellStyle, HeaderCell, StyleRule

logger = logging.getLogger(__name__)


class HeaderStrategy:
    """Builds the header rows and header paint for one table shape."""

    # Whether the table is cross-tabulated by a column-grouping variable;
    # enables stats banding and group separators in the body.
    grouped = False

    def build_rows(self, col_keys: Sequence[str]) -> List[List[HeaderCell]]:
        raise NotImplementedError

    def paint(self, col_keys: Sequence[str], options: StyleOptions) -> List[StyleRule]:
        raise NotImplementedError


class FlatHeader(HeaderStrategy):
    """Single header row labelled with the column names, uniform paint."""

    def build_rows(self, col_keys: Sequence[str]) -> List[List[HeaderCell]]:
        return [[HeaderCell(str(key)) for key in col_keys]]

    def paint(self, col_keys: Sequence[str], options: StyleOptions) -> List[StyleRule]:
        return [
            StyleRule(
                HEADER,
                CellStyle(background=options.background, foreground=options.foreground),
            )
        ]


class MultiGroupHeader(FlatHeader):
    """Several column-grouping variables: flat header, grouped body."""
    grouped = True


class GroupedHeader(HeaderStrategy):
    """
    Two header rows for a single column-grouping variable.

    The top row carries the variable label merged over the generated value
    columns and is blank elsewhere; the bottom row has one right-aligned
    cell per column.
    """
    grouped = True

    def __init__(self, label: str, value_columns: Sequence[str]):
        self.label = label
        self.value_columns = [str(v) for v in value_columns]

    def value_positions(self, col_keys: Sequence[str]) -> List[int]:
        """Positions in col_keys of the generated value columns."""
        values = set(self.value_columns)
        return [i for i, key in enumerate(col_keys) if str(key) in values]

    def build_rows(self, col_keys: Sequence[str]) -> List[List[HeaderCell]]:
        positions = set(self.value_positions(col_keys))

        top: List[HeaderCell] = []
        i = 0
        while i < len(col_keys):
            if i in positions:
                # Merge the run of consecutive value columns
                start = i
                while i < len(col_keys) and i in positions:
                    i += 1
                top.append(HeaderCell(self.label, span=i - start, align="center"))
            else:
                top.append(HeaderCell("", align="center"))
                i += 1

        bottom = [HeaderCell(str(key), align="right") for key in col_keys]
        return [top, bottom]

    def paint(self, col_keys: Sequence[str], options: StyleOptions) -> List[StyleRule]:
        rules = []
        positions = self.value_positions(col_keys)
        if positions:
            rules.append(StyleRule(
                HEADER,
                CellStyle(background=options.background),
                rows=(0,),
                cols=tuple(positions),
            ))
        rules.append(StyleRule(HEADER, CellStyle(background=options.background), rows=(1,)))
        rules.append(StyleRule(HEADER, CellStyle(foreground=options.foreground)))
        return rules


def select_header_strategy(
    pivot: PivotTable,
    labels: PivotLabels,
    options: StyleOptions,
) -> HeaderStrategy:
    """Pick the header strategy for a table's shape."""
    if not pivot.cols:
        return FlatHeader()

    if len(pivot.cols) == 1:
        variable = pivot.cols[0]
        label = labels.cols[0] if labels.cols else variable
        return GroupedHeader(label, pivot.value_columns(variable))

    if options.strict_layout:
        raise LayoutAmbiguityError(
            f"Cannot lay out a two-tier header for {len(pivot.cols)} "
            f"column-grouping variables: {pivot.cols}"
        )
    logger.warning(
        "Table has %d column-grouping variables %s; using a flat header",
        len(pivot.cols), pivot.cols,
    )
    return MultiGroupHeader()
