"""Layout engine deriving a styled table from a pivot table and its metadata."""

import logging
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

from .config import StyleOptions, ZebraStyle
from .errors import FormatterError, InvalidInputError
from .formatters import PivotFormatter, StatFormatter, is_missing
from .headers import HeaderStrategy, select_header_strategy
from .labels import STAT_KEYS, PivotLabels
from .pivot_table import PivotTable, as_pivot_table
from .styled_table import (
    BODY, HEADER, PARTS, Border, CellStyle, StyledTable, StyleRule, VerticalMerge
)

logger = logging.getLogger(__name__)

# Stats reformatted in tables without a column-grouping variable
FLAT_FORMATTED_STATS = ("n", "p")


def _display(value: Any) -> str:
    """
    Cell text for a raw value; missing values are blank.

    Whole-valued floats print without a fractional part (25.0 -> "25").
    """
    if is_missing(value):
        return ""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return str(value)


# ============================================================================
# STAT FORMATTING AND RELABELING
# ============================================================================

def apply_formatter(func: StatFormatter, stat: str, values: pd.Series) -> List[str]:
    """
    Format a group of values with a stat's formatter.

    Values are reinterpreted as float64 first; non-numeric text and nullable
    missing values (pd.NA) both become NaN.
    Any exception raised by the formatter is re-raised as FormatterError.
    """
    numeric = pd.to_numeric(values, errors="coerce").astype("float64")
    formatted = []
    for value in numeric:
        try:
            formatted.append(str(func(value)))
        except Exception as exc:
            raise FormatterError(stat, numeric.tolist(), exc) from exc
    return formatted


def format_crosstab_stats(
    frame: pd.DataFrame,
    rows: Sequence[str],
    stat_column: str,
    formatter: PivotFormatter,
) -> pd.DataFrame:
    """Format the value columns of a cross-tabulated table, row by row according to its stat."""
    value_columns = [c for c in frame.columns if c not in rows and c != stat_column]
    result = frame.copy()
    for col in value_columns:
        result[col] = pd.Series([_display(v) for v in frame[col]], index=frame.index, dtype=object)

    for key in STAT_KEYS:
        mask = (frame[stat_column] == key).to_numpy()
        if not mask.any():
            continue
        func = formatter.for_stat(key)
        for col in value_columns:
            result.loc[mask, col] = apply_formatter(func, key, frame.loc[mask, col])
    return result


def relabel_stats(frame: pd.DataFrame, stat_column: str, labels: PivotLabels) -> pd.DataFrame:
    """
    Replace stat keys with their labels and rename the stat column.

    A frame that was already relabeled has no ``stat_column`` left and is
    returned unchanged.
    """
    if stat_column not in frame.columns:
        return frame
    mapping = labels.stat_mapping()
    result = frame.copy()
    result[stat_column] = pd.Series(
        [mapping.get(v, v) if isinstance(v, str) else v for v in frame[stat_column]],
        index=frame.index,
        dtype=object,
    )
    return result.rename(columns={stat_column: labels.stats})


def format_flat_stats(
    frame: pd.DataFrame,
    rows: Sequence[str],
    formatter: PivotFormatter,
) -> pd.DataFrame:
    """
    Format the stat columns of a table without column-grouping variable.

    Only ``n`` and ``p`` go through their formatters; ``p_col`` and
    ``p_row`` are only converted to text.
    """
    value_columns = [c for c in frame.columns if c not in rows]
    result = frame.copy()
    for col in value_columns:
        result[col] = pd.Series([_display(v) for v in frame[col]], index=frame.index, dtype=object)

    for key in FLAT_FORMATTED_STATS:
        if key in value_columns:
            result[key] = pd.Series(
                apply_formatter(formatter.for_stat(key), key, frame[key]),
                index=frame.index,
                dtype=object,
            )
    return result


def relabel_flat_stats(
    frame: pd.DataFrame,
    rows: Sequence[str],
    labels: PivotLabels,
) -> pd.DataFrame:
    """Rename the flat stat columns to their labels, skipping absent ones."""
    mapping = {
        key: label
        for key, label in labels.stat_mapping().items()
        if key in frame.columns and key not in rows
    }
    if not mapping:
        return frame
    return frame.rename(columns=mapping)


def rename_row_columns(
    frame: pd.DataFrame,
    rows: Sequence[str],
    labels: PivotLabels,
) -> Tuple[pd.DataFrame, List[str]]:
    """Rename row-grouping columns by position with ``labels.rows``."""
    if labels.rows is None:
        return frame, list(rows)
    mapping = dict(zip(rows, labels.rows))
    return frame.rename(columns=mapping), list(labels.rows)


# ============================================================================
# LAYOUT HELPERS
# ============================================================================

def select_col_keys(
    frame: pd.DataFrame,
    stats_label: Optional[str],
    drop_stats: bool = False,
) -> List[str]:
    """Display columns in order, optionally without the stats column."""
    keys = [str(c) for c in frame.columns]
    if drop_stats and stats_label is not None:
        keys = [k for k in keys if k != stats_label]
    return keys


def zebra_rows(n_rows: int, block: int = 1) -> Tuple[int, ...]:
    """Shaded body rows: blocks 0, 2, 4... of the given size."""
    block = max(1, block)
    return tuple(i for i in range(n_rows) if (i // block) % 2 == 0)


def stats_block_size(frame: pd.DataFrame, stats_label: str) -> int:
    """Number of distinct stat labels, i.e. rows per row-group."""
    return max(1, int(frame[stats_label].nunique(dropna=False)))


def separator_rows(frame: pd.DataFrame, stats_label: str) -> Tuple[int, ...]:
    """Body rows starting a row-group: those whose stat equals the first row's stat."""
    if frame.empty:
        return ()
    stats = frame[stats_label].tolist()
    first = stats[0]
    return tuple(i for i, value in enumerate(stats) if value == first)


def row_label_merges(body: List[List[str]], positions: Sequence[int]) -> List[VerticalMerge]:
    """
    Vertical merges for row-label columns.

    ``positions`` are the row-grouping columns from outermost to innermost.
    A run in one column also ends where any outer column changes.
    """
    merges = []
    n_rows = len(body)
    for level, col in enumerate(positions):
        keys = positions[:level + 1]
        start = 0
        for i in range(1, n_rows + 1):
            if i == n_rows or any(body[i][k] != body[start][k] for k in keys):
                if i - start > 1:
                    merges.append(VerticalMerge(col, start, i - 1))
                start = i
    return merges


# ============================================================================
# ENGINE
# ============================================================================

class PivotLayoutEngine:
    """Derives a StyledTable from a pivot table, its labels and formatters."""

    def __init__(
        self,
        options: Optional[StyleOptions] = None,
        labels: Optional[PivotLabels] = None,
        formatter: Optional[PivotFormatter] = None,
    ):
        self.options = options or StyleOptions()
        self.labels = labels or PivotLabels()
        self.formatter = formatter or PivotFormatter()

    def layout(self, pivot: Any) -> StyledTable:
        """
        Lay out a pivot table.

        Args:
            pivot: PivotTable, or DataFrame with pivot metadata in ``attrs``

        Returns:
            StyledTable describing header, body, merges and paint

        Raises:
            InvalidInputError: input is not a usable pivot table
            FormatterError: a stat formatter failed
            LayoutAmbiguityError: several column-grouping variables with strict layout
        """
        pivot = as_pivot_table(pivot)
        pivot.validate()
        self._check_labels(pivot)
        strategy = select_header_strategy(pivot, self.labels, self.options)

        working = self.format_stats(pivot)
        stats_label = self.labels.stats if pivot.cols else None
        working, rows = rename_row_columns(working, pivot.rows, self.labels)
        working.attrs = {"rows": rows, "stat_column": stats_label}

        col_keys = select_col_keys(working, stats_label, self.options.drop_stats)
        body = [
            [_display(v) for v in record]
            for record in working[col_keys].itertuples(index=False, name=None)
        ]
        row_positions = [col_keys.index(r) for r in rows if r in col_keys]

        # Order matters: later rules win, and the separators must follow the
        # global border pass.
        rules: List[StyleRule] = []
        rules.extend(self._zebra_rules(working, strategy, stats_label))
        rules.extend(self._row_label_rules(row_positions))
        rules.extend(strategy.paint(col_keys, self.options))
        rules.extend(self._global_rules())
        if strategy.grouped:
            rules.extend(self._separator_rules(working, stats_label))

        table = StyledTable(
            col_keys=col_keys,
            header_rows=strategy.build_rows(col_keys),
            body=body,
            rules=rules,
            merges=row_label_merges(body, row_positions),
            column_width=self.options.column_width,
            source=working if self.options.keep_source else None,
        )
        logger.debug(
            "Laid out pivot table: %d columns, %d header rows, %d body rows, %d merges",
            table.n_cols, table.n_header_rows, table.n_body_rows, len(table.merges),
        )
        return table

    def format_stats(self, pivot: PivotTable) -> pd.DataFrame:
        """Working copy of the data with formatted and relabeled stats."""
        frame = pivot.data.copy()
        frame.columns = [str(c) for c in frame.columns]
        if pivot.cols:
            frame = format_crosstab_stats(frame, pivot.rows, pivot.stat_column, self.formatter)
            return relabel_stats(frame, pivot.stat_column, self.labels)
        frame = format_flat_stats(frame, pivot.rows, self.formatter)
        return relabel_flat_stats(frame, pivot.rows, self.labels)

    def _check_labels(self, pivot: PivotTable) -> None:
        rows_labels = self.labels.rows
        if rows_labels is not None and len(rows_labels) != len(pivot.rows):
            raise InvalidInputError(
                f"labels.rows has {len(rows_labels)} entries but the table has "
                f"{len(pivot.rows)} row-grouping columns {pivot.rows}"
            )
        cols_labels = self.labels.cols
        if cols_labels is not None and pivot.cols and len(cols_labels) != len(pivot.cols):
            raise InvalidInputError(
                f"labels.cols has {len(cols_labels)} entries but the table has "
                f"{len(pivot.cols)} column-grouping variables {pivot.cols}"
            )

    def _zebra_rules(
        self,
        working: pd.DataFrame,
        strategy: HeaderStrategy,
        stats_label: Optional[str],
    ) -> List[StyleRule]:
        zebra = self.options.zebra_style
        n_rows = len(working)
        if zebra is ZebraStyle.NONE or n_rows == 0:
            return []

        block = 1
        if zebra is ZebraStyle.STATS:
            if strategy.grouped and stats_label in working.columns:
                block = stats_block_size(working, stats_label)
            else:
                logger.debug("Stats banding needs a column-grouping variable, using classic")

        return [StyleRule(
            BODY,
            CellStyle(background=self.options.zebra_color),
            rows=zebra_rows(n_rows, block),
        )]

    def _row_label_rules(self, positions: Sequence[int]) -> List[StyleRule]:
        if not positions:
            return []
        return [StyleRule(
            BODY,
            CellStyle(
                background=self.options.background,
                foreground=self.options.foreground,
                bold=True,
            ),
            cols=tuple(positions),
        )]

    def _global_rules(self) -> List[StyleRule]:
        options = self.options
        rules = [StyleRule(HEADER, CellStyle(bold=True))]
        text = CellStyle(
            font_name=options.font_name,
            font_size=options.font_size,
            padding=options.padding,
        )
        rules.extend(StyleRule(part, text) for part in PARTS)
        if options.border_color is not None:
            border = CellStyle.all_borders(Border(options.border_color, options.border_width))
            rules.extend(StyleRule(part, border) for part in PARTS)
        return rules

    def _separator_rules(self, working: pd.DataFrame, stats_label: Optional[str]) -> List[StyleRule]:
        if stats_label is None or stats_label not in working.columns:
            return []
        rows = separator_rows(working, stats_label)
        if not rows:
            return []
        border = Border(self.options.separator_color, self.options.separator_width)
        return [StyleRule(BODY, CellStyle(border_top=border), rows=rows)]


def pivot_format(
    pivot: Any,
    background: str = "#81A1C1",
    foreground: str = "#FFFFFF",
    border_color: Optional[str] = "#FFFFFF",
    font_size: float = 14,
    font_name: Optional[str] = None,
    labels: Optional[PivotLabels] = None,
    formatter: Optional[PivotFormatter] = None,
    zebra_style: str = "classic",
    zebra_color: str = "#ECEFF4",
    drop_stats: bool = False,
    keep_source: bool = True,
    **options: Any,
) -> StyledTable:
    """
    Format a pivot table for display.

    Extra keyword arguments are passed to StyleOptions (e.g. ``padding``,
    ``column_width``, ``separator_color``, ``strict_layout``).
    """
    style = StyleOptions(
        background=background,
        foreground=foreground,
        border_color=border_color,
        font_size=font_size,
        font_name=font_name,
        zebra_style=zebra_style,
        zebra_color=zebra_color,
        drop_stats=drop_stats,
        keep_source=keep_source,
        **options,
    )
    return PivotLayoutEngine(style, labels, formatter).layout(pivot)
