"""Shared fixtures: small pivot tables in each supported shape."""

import pandas as pd
import pytest

from flexpivot.pivot_table import PivotTable


@pytest.fixture
def crosstab_pivot() -> PivotTable:
    """sex x treatment, with n and p rows for each sex."""
    data = pd.DataFrame({
        "sex": ["F", "F", "M", "M"],
        "stats": ["n", "p", "n", "p"],
        "A": [10, 23.8, 15, 42.345],
        "B": [12, 28.571, 5, 11.9],
    })
    return PivotTable(
        data=data,
        rows=["sex"],
        cols="treatment",
        cols_values={"treatment": ["A", "B"]},
    )


@pytest.fixture
def flat_pivot() -> PivotTable:
    """Long table with n, p and p_col columns and no column-grouping variable."""
    data = pd.DataFrame({
        "group": ["g1", "g2", "g3", "g4"],
        "n": [3, 7, 5, 5],
        "p": [15.0, 35.0, 25.0, 25.0],
        "p_col": [12.5, 37.5, 25.0, 25.0],
    })
    return PivotTable(data=data, rows=["group"])


@pytest.fixture
def nested_pivot() -> PivotTable:
    """region > sex row groups, where sex 'M' ends one region and starts the next."""
    data = pd.DataFrame({
        "region": ["North"] * 4 + ["South"] * 4,
        "sex": ["F", "F", "M", "M", "M", "M", "F", "F"],
        "stats": ["n", "p"] * 4,
        "A": [1, 10.0, 2, 20.0, 3, 30.0, 4, 40.0],
        "B": [5, 50.0, 6, 60.0, 7, 70.0, 8, 80.0],
    })
    return PivotTable(
        data=data,
        rows=["region", "sex"],
        cols=["treatment"],
        cols_values={"treatment": ["A", "B"]},
    )


def make_crosstab(values, groups=("x", "y"), stats=("n", "p")) -> PivotTable:
    """Cross-tabulated table with one value column per entry of values."""
    records = []
    for g_index, group in enumerate(groups):
        for s_index, stat in enumerate(stats):
            record = {"group": group, "stats": stat}
            for v_index, value in enumerate(values):
                record[str(value)] = float(g_index * 100 + s_index * 10 + v_index)
            records.append(record)
    return PivotTable(
        data=pd.DataFrame.from_records(records),
        rows=["group"],
        cols=["arm"],
        cols_values={"arm": list(values)},
    )
