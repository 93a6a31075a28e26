"""
Long-format table assembler for the .tsf decoder.

Owns one column builder per declared attribute (in schema order) plus the
value buffer, folds each decoded series into them, and builds the final
DataFrame once the input is exhausted. Also validates the caller's
key/index choice and produces the ``IndexRecommendation``.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from tsf_ingest.config import DEFAULT_VALUE_COLUMN, DatasetMetadata
from tsf_ingest.exceptions import InvalidIndexError, InvalidKeyError
from tsf_ingest.parsers.base import Attribute, IndexRecommendation, IndexStatus
from tsf_ingest.parsers.columns import ColumnBuilder, make_column
from tsf_ingest.parsers.series import SeriesRecord

logger = logging.getLogger(__name__)


class TableAssembler:
    """Accumulates series into a long-format table.

    Args:
        attributes: The attribute schema, in declaration order.
        metadata: Dataset metadata (date columns need the frequency).
        value_column_name: Name of the value column appended last.

    Raises:
        ValueError: If *value_column_name* is also an attribute name.
    """

    def __init__(
        self,
        attributes: tuple[Attribute, ...],
        metadata: DatasetMetadata,
        value_column_name: str = DEFAULT_VALUE_COLUMN,
    ) -> None:
        names = [attr.name for attr in attributes]
        if value_column_name in names:
            raise ValueError(
                f"value_column_name '{value_column_name}' collides with a declared attribute"
            )
        self.attributes = attributes
        self.value_column_name = value_column_name
        self._columns: list[ColumnBuilder] = [
            make_column(attr, metadata) for attr in attributes
        ]
        self._values: list[np.ndarray] = []
        self._rows = 0
        self._series = 0

    @property
    def row_count(self) -> int:
        return self._rows

    @property
    def series_count(self) -> int:
        return self._series

    def add(self, record: SeriesRecord, line_no: int | None = None) -> None:
        """Fold one decoded series into the table."""
        length = len(record)
        for column, token in zip(self._columns, record.attribute_values):
            column.append(token, length, line_no)
        self._values.append(record.values)
        self._rows += length
        self._series += 1

    def build(self) -> pd.DataFrame:
        """Build the long-format DataFrame from everything added so far."""
        data: dict[str, pd.Series] = {
            column.name: column.to_series() for column in self._columns
        }
        values = np.concatenate(self._values) if self._values else np.array([], dtype=np.float64)
        data[self.value_column_name] = pd.Series(values, name=self.value_column_name)

        table = pd.DataFrame(data)
        if len(table) != self._rows:
            raise RuntimeError(
                f"Assembled {len(table)} rows but {self._rows} observations were added"
            )
        return table

    def recommend(
        self,
        key: str | None = None,
        index: str | None = None,
        default_index: str | None = None,
    ) -> IndexRecommendation:
        """Validate the caller's key/index and pick the index attribute.

        Raises:
            InvalidKeyError: *key* is not a declared attribute.
            InvalidIndexError: *index* is not a declared attribute.
        """
        names = [attr.name for attr in self.attributes]
        if key is not None and key not in names:
            raise InvalidKeyError(
                f"Invalid key '{key}'. Declared attributes: {names}"
            )
        if index is not None and index not in names:
            raise InvalidIndexError(
                f"Invalid index '{index}'. Declared attributes: {names}"
            )

        chosen_index = index if index is not None else default_index
        if key is None:
            logger.info("Key is not provided; the table is returned unkeyed.")
            return IndexRecommendation(index=chosen_index, status=IndexStatus.NO_KEY)
        if chosen_index is None:
            logger.info(
                "Index is not provided and no date attribute was found; "
                "the table is returned unindexed."
            )
            return IndexRecommendation(key=key, status=IndexStatus.NO_INDEX)
        return IndexRecommendation(key=key, index=chosen_index, status=IndexStatus.READY)
