"""Layout and styling of pre-aggregated pivot tables."""

from .config import StyleOptions, ZebraStyle, load_style
from .errors import FormatterError, InvalidInputError, LayoutAmbiguityError, PivotFormatError
from .formatters import PivotFormatter, format_count, format_percent, percent_formatter, pivot_formatter
from .labels import PivotLabels, pivot_labels
from .layout_engine import PivotLayoutEngine, pivot_format
from .pivot_table import PivotTable, as_pivot_table, load_pivot
from .styled_table import Border, CellStyle, HeaderCell, StyledTable, StyleRule, VerticalMerge

__version__ = "0.1.0"

__all__ = [
    "Border",
    "CellStyle",
    "FormatterError",
    "HeaderCell",
    "InvalidInputError",
    "LayoutAmbiguityError",
    "PivotFormatError",
    "PivotFormatter",
    "PivotLabels",
    "PivotLayoutEngine",
    "PivotTable",
    "StyleOptions",
    "StyleRule",
    "StyledTable",
    "VerticalMerge",
    "ZebraStyle",
    "as_pivot_table",
    "format_count",
    "format_percent",
    "load_pivot",
    "load_style",
    "percent_formatter",
    "pivot_format",
    "pivot_formatter",
    "pivot_labels",
]
