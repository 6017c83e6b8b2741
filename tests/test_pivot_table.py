"""Tests for the pivot table model, validation and loading."""

import pandas as pd
import pytest

from flexpivot.errors import InvalidInputError
from flexpivot.pivot_table import PivotTable, as_pivot_table, load_pivot


class TestPivotTable:

    def test_single_col_name_becomes_list(self, crosstab_pivot):
        assert crosstab_pivot.cols == ["treatment"]
        assert crosstab_pivot.is_crosstab
        assert crosstab_pivot.n_column_groups == 1

    def test_flat_table(self, flat_pivot):
        assert flat_pivot.cols is None
        assert not flat_pivot.is_crosstab
        flat_pivot.validate()

    def test_empty_cols_is_flat(self):
        pivot = PivotTable(data=pd.DataFrame({"g": ["a"], "n": [1]}), rows=["g"], cols=[])
        assert pivot.cols is None

    def test_value_columns_are_strings(self):
        pivot = PivotTable(
            data=pd.DataFrame({"g": ["a"], "stats": ["n"], "1": [1]}),
            rows=["g"],
            cols=["dose"],
            cols_values={"dose": [1, 2]},
        )
        assert pivot.value_columns("dose") == ["1", "2"]
        assert pivot.value_columns("other") == []

    def test_frame_attrs_round_trip(self, crosstab_pivot):
        frame = crosstab_pivot.to_frame()
        assert frame.attrs["rows"] == ["sex"]
        restored = PivotTable.from_frame(frame)
        assert restored.rows == ["sex"]
        assert restored.cols == ["treatment"]
        assert restored.cols_values == {"treatment": ["A", "B"]}
        assert restored.stat_column == "stats"

    def test_as_pivot_table(self, crosstab_pivot):
        assert as_pivot_table(crosstab_pivot) is crosstab_pivot
        assert as_pivot_table(crosstab_pivot.to_frame()).rows == ["sex"]
        with pytest.raises(InvalidInputError):
            as_pivot_table({"rows": ["sex"]})


class TestValidation:

    def test_missing_rows_metadata(self):
        pivot = PivotTable(data=pd.DataFrame({"a": [1]}), rows=None)
        with pytest.raises(InvalidInputError):
            pivot.validate()

    def test_unknown_row_column(self):
        pivot = PivotTable(data=pd.DataFrame({"a": [1]}), rows=["b"])
        with pytest.raises(InvalidInputError, match="not found"):
            pivot.validate()

    def test_missing_cols_values(self, crosstab_pivot):
        crosstab_pivot.cols_values = {}
        with pytest.raises(InvalidInputError, match="cols_values"):
            crosstab_pivot.validate()

    def test_data_must_be_frame(self):
        pivot = PivotTable(data=[[1, 2]], rows=["a"])
        with pytest.raises(InvalidInputError):
            pivot.validate()


class TestLoadPivot:

    def test_load_csv_and_yaml(self, tmp_path, crosstab_pivot):
        data_path = tmp_path / "table.csv"
        meta_path = tmp_path / "meta.yaml"
        crosstab_pivot.data.to_csv(data_path, index=False)
        meta_path.write_text(
            "rows: [sex]\n"
            "cols: treatment\n"
            "cols_values:\n"
            "  treatment: [A, B]\n"
            "labels:\n"
            "  stats: Stat\n"
            "  cols: [Treatment arm]\n"
        )

        pivot, labels = load_pivot(data_path, meta_path)
        assert pivot.rows == ["sex"]
        assert pivot.cols == ["treatment"]
        assert list(pivot.data.columns) == ["sex", "stats", "A", "B"]
        assert labels.stats == "Stat"
        assert labels.cols == ("Treatment arm",)

    def test_meta_without_rows(self, tmp_path, flat_pivot):
        data_path = tmp_path / "table.csv"
        meta_path = tmp_path / "meta.yaml"
        flat_pivot.data.to_csv(data_path, index=False)
        meta_path.write_text("cols: null\n")
        with pytest.raises(InvalidInputError):
            load_pivot(data_path, meta_path)
