"""
Frequency table for tsf-ingest.

Maps the closed set of ``@frequency`` labels to a calendar/clock step and
to a sub-daily / day-or-coarser classification. The table itself lives in
``frequencies.yaml`` next to this module and is loaded once into Pydantic
models, so new cadences can be added without touching code.

Steps are ``pandas.DateOffset`` objects: month, quarter and year steps add
calendar units rather than fixed durations, so month-length variation is
respected. Timestamp runs are generated by stepping from the previous
element, which compounds calendar steps (Jan 31 -> Feb 29 -> Mar 29).
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path

import pandas as pd
import yaml
from pydantic import BaseModel, Field

from tsf_ingest.exceptions import InvalidFrequencyError, InvalidTimestampFormatError

logger = logging.getLogger(__name__)

_FREQUENCIES_PATH = Path(__file__).parent / "frequencies.yaml"

# Hyphens separate both the date and the time components
TIMESTAMP_FORMAT = "%Y-%m-%d %H-%M-%S"
_DATE_ONLY_FORMAT = "%Y-%m-%d"

# Step units with a constant length; months and years vary
_FIXED_UNITS = {"weeks", "days", "hours", "minutes", "seconds"}


class FrequencyClass(str, Enum):
    """Selects the date-parsing rule for a frequency."""

    SUB_DAILY = "sub_daily"
    DAY_OR_COARSER = "day_or_coarser"


class Frequency(BaseModel):
    """One row of the frequency table."""

    label: str
    step: dict[str, int] = Field(..., min_length=1)
    kind: FrequencyClass
    period_alias: str

    @property
    def offset(self) -> pd.DateOffset:
        return pd.DateOffset(**self.step)

    @property
    def is_sub_daily(self) -> bool:
        return self.kind is FrequencyClass.SUB_DAILY

    @property
    def fixed_step(self) -> pd.Timedelta | None:
        """The step as a fixed duration, or None for calendar steps."""
        if not set(self.step) <= _FIXED_UNITS:
            return None
        return pd.Timedelta(**self.step)


_FREQUENCY_TABLE: dict[str, Frequency] = {}


def load_frequencies(path: Path | None = None) -> dict[str, Frequency]:
    """Load a frequency table YAML file into ``label -> Frequency``.

    Raises:
        ValueError: If a label is declared twice.
    """
    path = path or _FREQUENCIES_PATH
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    table: dict[str, Frequency] = {}
    for entry in raw.get("frequencies", []):
        freq = Frequency(**entry)
        if freq.label in table:
            raise ValueError(f"Duplicate frequency label '{freq.label}' in {path}")
        table[freq.label] = freq
    logger.debug("Loaded %d frequencies from %s", len(table), path)
    return table


def _get_frequency_table() -> dict[str, Frequency]:
    """Lazily load the built-in frequency table."""
    if not _FREQUENCY_TABLE:
        _FREQUENCY_TABLE.update(load_frequencies())
    return _FREQUENCY_TABLE


def known_labels() -> list[str]:
    """All frequency labels in table order."""
    return list(_get_frequency_table())


def lookup(label: str) -> Frequency:
    """Resolve a ``@frequency`` label.

    Raises:
        InvalidFrequencyError: If *label* is not in the table.
    """
    table = _get_frequency_table()
    try:
        return table[label]
    except KeyError:
        raise InvalidFrequencyError(
            f"Invalid frequency '{label}'. Known frequencies: {list(table)}"
        ) from None


def parse_start_timestamp(token: str, frequency: Frequency) -> pd.Timestamp:
    """Parse a date attribute value into the first timestamp of a series.

    Sub-daily frequencies keep the time of day and are pinned to UTC.
    Day-or-coarser frequencies keep only the date; the time component must
    still parse when present, and a bare ``YYYY-MM-DD`` is accepted.

    Raises:
        InvalidTimestampFormatError: If *token* does not match the pattern.
    """
    text = token.strip()
    formats = [TIMESTAMP_FORMAT]
    if not frequency.is_sub_daily:
        formats.append(_DATE_ONLY_FORMAT)

    for fmt in formats:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if frequency.is_sub_daily:
            return pd.Timestamp(parsed, tz="UTC")
        return pd.Timestamp(parsed.date())

    raise InvalidTimestampFormatError(
        f"Incorrect timestamp format: '{token}'. "
        "Specify your timestamps as YYYY-mm-dd HH-MM-SS"
    )


def generate_timestamps(
    start: pd.Timestamp,
    periods: int,
    frequency: Frequency,
) -> pd.DatetimeIndex:
    """Generate *periods* timestamps starting at *start*.

    Each element is the previous one advanced by the frequency step.
    Fixed-length steps are generated in one vectorized call; calendar
    steps are applied one at a time so clipped month ends carry forward.
    """
    fixed = frequency.fixed_step
    if fixed is not None:
        return pd.date_range(start=start, periods=periods, freq=fixed)

    offset = frequency.offset
    stamps: list[pd.Timestamp] = []
    current = start
    for _ in range(periods):
        stamps.append(current)
        current = current + offset
    return pd.DatetimeIndex(stamps)
