"""
Shared types for the .tsf decoder.

The header parser produces a ``Header`` (attribute schema + dataset
metadata); the decoder returns a ``DecodeResult`` holding the long-format
table, the metadata and an ``IndexRecommendation`` that tells the caller
which (key, index) pair can be used to build a keyed time-indexed view.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

import pandas as pd

from tsf_ingest.config import DatasetMetadata


class AttributeType(str, Enum):
    """The three attribute types a .tsf header may declare."""

    STRING = "string"
    NUMERIC = "numeric"
    DATE = "date"


@dataclass(frozen=True)
class Attribute:
    """One ``@attribute name type`` declaration."""
    name: str
    type: AttributeType


@dataclass
class Header:
    """Everything learned from the lines before ``@data``.

    Attributes:
        attributes: Declared attributes in declaration order. This is
            also the output column order.
        metadata: Scalar dataset metadata.
        default_index: Name of the first date attribute, used as the time
            index when the caller does not name one. ``None`` if the caller
            supplied an index or no date attribute exists.
        lines_consumed: Number of source lines read, ``@data`` included.
    """
    attributes: tuple[Attribute, ...]
    metadata: DatasetMetadata
    default_index: str | None = None
    lines_consumed: int = 0

    @property
    def names(self) -> list[str]:
        return [attr.name for attr in self.attributes]


class IndexStatus(str, Enum):
    """Whether a keyed, time-indexed view can be built from the table."""

    READY = "ready"
    NO_KEY = "no_key"
    NO_INDEX = "no_index"


@dataclass(frozen=True)
class IndexRecommendation:
    """The (key, index) pair a caller can use to index the table.

    ``status`` is ``NO_KEY`` when no key was requested and ``NO_INDEX``
    when a key was requested but neither an explicit index nor a date
    attribute is available. Both are informational, not errors.
    """
    key: str | None = None
    index: str | None = None
    status: IndexStatus = IndexStatus.NO_KEY

    @property
    def is_ready(self) -> bool:
        return self.status is IndexStatus.READY


@dataclass
class DecodeResult:
    """Output of decoding one .tsf source.

    Iterating yields ``(table, frequency, horizon, contains_missing,
    equal_length)`` so the result can be unpacked like a plain tuple.

    Attributes:
        table: Long-format DataFrame, one row per observation. Columns are
            the attributes in declaration order followed by the value column.
        metadata: Dataset metadata from the header.
        attributes: The attribute schema.
        recommendation: Suggested (key, index) pair.
        series_count: Number of series (data lines) decoded.
    """
    table: pd.DataFrame
    metadata: DatasetMetadata
    attributes: tuple[Attribute, ...] = ()
    recommendation: IndexRecommendation = field(default_factory=IndexRecommendation)
    series_count: int = 0

    @property
    def frequency(self) -> str | None:
        return self.metadata.frequency

    @property
    def horizon(self) -> int | None:
        return self.metadata.horizon

    @property
    def contains_missing(self) -> bool | None:
        return self.metadata.contains_missing

    @property
    def equal_length(self) -> bool | None:
        return self.metadata.equal_length

    def __iter__(self) -> Iterator[object]:
        return iter((
            self.table,
            self.frequency,
            self.horizon,
            self.contains_missing,
            self.equal_length,
        ))
