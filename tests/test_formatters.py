"""Tests for the default stat formatters and the formatter/labels records."""

import math

import pandas as pd
import pytest

from flexpivot.errors import InvalidInputError
from flexpivot.formatters import (
    PivotFormatter,
    format_count,
    format_number,
    format_percent,
    is_missing,
    percent_formatter,
    pivot_formatter,
)
from flexpivot.labels import STAT_KEYS, PivotLabels, pivot_labels


class TestNumberFormatting:
    """Rounding and text conversion of statistics."""

    def test_percent_rounds_to_one_decimal(self):
        assert format_percent(42.345) == "42.3%"
        assert format_percent(28.571) == "28.6%"

    def test_percent_drops_trailing_zeros(self):
        assert format_percent(50) == "50%"
        assert format_percent(12.50) == "12.5%"

    def test_count_is_whole_number(self):
        assert format_count(12.0) == "12"
        assert format_count(7) == "7"

    def test_count_rounds_half_to_even(self):
        assert format_count(2.5) == "2"
        assert format_count(3.5) == "4"

    def test_negative_zero_is_zero(self):
        assert format_number(-0.04, 1) == "0"

    def test_missing_values_are_blank(self):
        assert format_count(float("nan")) == ""
        assert format_percent(None) == ""
        assert is_missing(math.nan)
        assert not is_missing("text")

    def test_pandas_missing_markers(self):
        assert is_missing(pd.NA)
        assert is_missing(pd.NaT)
        assert format_count(pd.NA) == ""
        assert format_percent(pd.NA) == ""
        assert not is_missing([1.0, 2.0])

    def test_custom_percent_formatter(self):
        fmt = percent_formatter(digits=0, suffix=" pct")
        assert fmt(12.345) == "12 pct"
        assert fmt(float("nan")) == ""


class TestFormatterRecord:

    def test_defaults(self):
        formatter = pivot_formatter()
        assert formatter.for_stat("n")(4.0) == "4"
        assert formatter.for_stat("p_row")(33.333) == "33.3%"

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            PivotFormatter(n=5)

    def test_unknown_stat(self):
        with pytest.raises(KeyError):
            PivotFormatter().for_stat("mean")


class TestLabels:

    def test_defaults(self):
        labels = pivot_labels()
        assert labels.stat_mapping() == {"n": "N", "p": "%", "p_col": "Col %", "p_row": "Row %"}
        assert labels.stats == "Statistic"
        assert labels.rows is None

    def test_single_string_becomes_tuple(self):
        labels = pivot_labels(rows=["Sex"], cols="Treatment")
        assert labels.rows == ("Sex",)
        assert labels.cols == ("Treatment",)

    def test_stat_label(self):
        labels = PivotLabels(p="Percent")
        assert labels.stat_label("p") == "Percent"
        with pytest.raises(KeyError):
            labels.stat_label("stats")

    def test_from_dict(self):
        labels = PivotLabels.from_dict({"stats": "Stat", "rows": ["Region", "Sex"]})
        assert labels.stats == "Stat"
        assert labels.rows == ("Region", "Sex")
        assert PivotLabels.from_dict(None) == PivotLabels()
        assert set(labels.to_dict()) == {"stats", *STAT_KEYS, "rows", "cols"}

    def test_from_dict_rejects_unknown_fields(self):
        with pytest.raises(InvalidInputError):
            PivotLabels.from_dict({"mean": "Mean"})
