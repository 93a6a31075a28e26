"""
Unit tests for the long-format table assembler
(tsf_ingest.parsers.assembler).
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tsf_ingest.config import DatasetMetadata
from tsf_ingest.exceptions import InvalidIndexError, InvalidKeyError
from tsf_ingest.parsers.assembler import TableAssembler
from tsf_ingest.parsers.base import Attribute, AttributeType, IndexStatus
from tsf_ingest.parsers.series import SeriesRecord

ATTRIBUTES = (
    Attribute("series_name", AttributeType.STRING),
    Attribute("start_timestamp", AttributeType.DATE),
)
YEARLY = DatasetMetadata(frequency="yearly", horizon=1)


def _record(name: str, start: str, values: list[float]) -> SeriesRecord:
    return SeriesRecord(
        attribute_values=(name, start),
        values=np.asarray(values, dtype=np.float64),
    )


@pytest.fixture()
def filled() -> TableAssembler:
    asm = TableAssembler(ATTRIBUTES, YEARLY)
    asm.add(_record("T1", "2000-01-01 00-00-00", [1, 2, 3]), line_no=3)
    asm.add(_record("T2", "2010-01-01 00-00-00", [4, np.nan]), line_no=4)
    return asm


class TestBuild:
    """Tests for TableAssembler.add() / build()."""

    def test_counts(self, filled):
        assert filled.series_count == 2
        assert filled.row_count == 5

    def test_column_order(self, filled):
        table = filled.build()
        assert list(table.columns) == ["series_name", "start_timestamp", "series_value"]

    def test_rows_follow_series_order(self, filled):
        table = filled.build()
        assert table["series_name"].tolist() == ["T1", "T1", "T1", "T2", "T2"]
        assert table["start_timestamp"].iloc[3] == pd.Timestamp("2010-01-01")
        assert table["start_timestamp"].iloc[4] == pd.Timestamp("2011-01-01")

    def test_values_keep_missing(self, filled):
        values = filled.build()["series_value"]
        assert values.dtype == np.float64
        assert values.iloc[:4].tolist() == [1.0, 2.0, 3.0, 4.0]
        assert np.isnan(values.iloc[4])

    def test_custom_value_column_name(self):
        asm = TableAssembler(ATTRIBUTES, YEARLY, value_column_name="y")
        asm.add(_record("T1", "2000-01-01 00-00-00", [1]))
        assert list(asm.build().columns)[-1] == "y"

    def test_value_column_collides_with_attribute(self):
        with pytest.raises(ValueError, match="collides"):
            TableAssembler(ATTRIBUTES, YEARLY, value_column_name="series_name")

    def test_empty_build(self):
        table = TableAssembler(ATTRIBUTES, YEARLY).build()
        assert len(table) == 0
        assert list(table.columns) == ["series_name", "start_timestamp", "series_value"]

    def test_diverging_column_detected(self, filled):
        # a builder fed outside add() no longer matches the row count
        filled._columns[0].append("T3", 2)
        with pytest.raises(RuntimeError, match="5 observations"):
            filled.build()


class TestRecommend:
    """Tests for TableAssembler.recommend()."""

    def test_ready_with_explicit_index(self, filled):
        rec = filled.recommend(key="series_name", index="start_timestamp")
        assert rec.status is IndexStatus.READY
        assert rec.is_ready
        assert (rec.key, rec.index) == ("series_name", "start_timestamp")

    def test_ready_with_default_index(self, filled):
        rec = filled.recommend(key="series_name", default_index="start_timestamp")
        assert rec.status is IndexStatus.READY
        assert rec.index == "start_timestamp"

    def test_no_key(self, filled):
        rec = filled.recommend(default_index="start_timestamp")
        assert rec.status is IndexStatus.NO_KEY
        assert rec.key is None
        assert rec.index == "start_timestamp"
        assert not rec.is_ready

    def test_no_index(self, filled):
        rec = filled.recommend(key="series_name")
        assert rec.status is IndexStatus.NO_INDEX
        assert rec.key == "series_name"
        assert rec.index is None

    def test_unknown_key(self, filled):
        with pytest.raises(InvalidKeyError, match="'id'"):
            filled.recommend(key="id")

    def test_unknown_index(self, filled):
        with pytest.raises(InvalidIndexError, match="'when'"):
            filled.recommend(key="series_name", index="when")

    def test_unknown_index_without_key(self, filled):
        with pytest.raises(InvalidIndexError):
            filled.recommend(index="when")
