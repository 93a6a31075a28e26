"""
Attribute materializers for the .tsf decoder.

One column builder exists per declared attribute, held in schema order by
the table assembler. For every decoded series the assembler hands each
builder the raw attribute token and the number of observations; the
builder appends that many cells:

- StringColumn: the token verbatim, repeated.
- NumericColumn: the token parsed as float, repeated.
- DateColumn: a timestamp run starting at the parsed token and advancing
  by the dataset frequency, one step per observation.

Builders are append-only; ``to_series()`` concatenates everything seen so
far into one pandas Series.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

import numpy as np
import pandas as pd

from tsf_ingest.config import DatasetMetadata
from tsf_ingest.exceptions import (
    InvalidAttributeValuesError,
    InvalidTimestampFormatError,
    MissingFrequencyError,
)
from tsf_ingest.frequency import (
    Frequency,
    generate_timestamps,
    lookup,
    parse_start_timestamp,
)
from tsf_ingest.parsers.base import Attribute, AttributeType


def _where(line_no: int | None) -> str:
    return f" (line {line_no})" if line_no is not None else ""


class ColumnBuilder(ABC):
    """Accumulates one output column across all series."""

    def __init__(self, attribute: Attribute) -> None:
        self.attribute = attribute
        self._rows = 0

    @property
    def name(self) -> str:
        return self.attribute.name

    def __len__(self) -> int:
        return self._rows

    @abstractmethod
    def append(self, token: str, length: int, line_no: int | None = None) -> None:
        """Materialize *token* for a series with *length* observations."""

    @abstractmethod
    def to_series(self) -> pd.Series:
        """Return the accumulated column."""


class _BroadcastColumn(ColumnBuilder):
    """Repeats one scalar per series."""

    dtype: str = "object"

    def __init__(self, attribute: Attribute) -> None:
        super().__init__(attribute)
        self._scalars: list[object] = []
        self._lengths: list[int] = []

    def _convert(self, token: str, line_no: int | None) -> object:
        return token

    def append(self, token: str, length: int, line_no: int | None = None) -> None:
        self._scalars.append(self._convert(token, line_no))
        self._lengths.append(length)
        self._rows += length

    def to_series(self) -> pd.Series:
        scalars = np.array(self._scalars, dtype=self.dtype)
        return pd.Series(np.repeat(scalars, self._lengths), name=self.name, dtype=self.dtype)


class StringColumn(_BroadcastColumn):
    """Broadcasts the raw token unchanged."""


class NumericColumn(_BroadcastColumn):
    dtype = "float64"

    def _convert(self, token: str, line_no: int | None) -> object:
        try:
            value = float(token)
        except ValueError:
            value = math.nan
        if math.isnan(value):
            raise InvalidAttributeValuesError(
                f"Invalid value '{token}' for numeric attribute "
                f"'{self.name}'{_where(line_no)}."
            )
        return value


class DateColumn(ColumnBuilder):
    """Generates a timestamp run per series from its start date.

    The frequency is resolved on first use, so a file without
    ``@frequency`` (or with an unknown label) fails on its first series
    line rather than while reading the header.
    """

    def __init__(self, attribute: Attribute, metadata: DatasetMetadata) -> None:
        super().__init__(attribute)
        self._metadata = metadata
        self._frequency: Frequency | None = None
        self._runs: list[pd.DatetimeIndex] = []

    @property
    def frequency(self) -> Frequency:
        if self._frequency is None:
            if self._metadata.frequency is None:
                raise MissingFrequencyError(
                    f"Frequency is missing: date attribute '{self.name}' "
                    "requires a @frequency directive in the header."
                )
            self._frequency = lookup(self._metadata.frequency)
        return self._frequency

    def append(self, token: str, length: int, line_no: int | None = None) -> None:
        frequency = self.frequency
        try:
            start = parse_start_timestamp(token, frequency)
        except InvalidTimestampFormatError as exc:
            raise InvalidTimestampFormatError(
                f"{exc} Attribute '{self.name}'{_where(line_no)}."
            ) from exc
        self._runs.append(generate_timestamps(start, length, frequency))
        self._rows += length

    def to_series(self) -> pd.Series:
        if not self._runs:
            return pd.Series([], name=self.name, dtype="datetime64[ns]")
        index = self._runs[0].append(self._runs[1:])
        return pd.Series(index, name=self.name)


_BROADCAST_BUILDERS: dict[AttributeType, type[_BroadcastColumn]] = {
    AttributeType.STRING: StringColumn,
    AttributeType.NUMERIC: NumericColumn,
}


def make_column(attribute: Attribute, metadata: DatasetMetadata) -> ColumnBuilder:
    """Create the builder matching *attribute*'s declared type."""
    if attribute.type is AttributeType.DATE:
        return DateColumn(attribute, metadata)
    return _BROADCAST_BUILDERS[attribute.type](attribute)
