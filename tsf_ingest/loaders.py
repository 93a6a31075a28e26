"""
Dataset loaders for tsf-ingest.

Thin wrappers over ``read_tsf()`` for forecasting benchmarks: each decoded
series is split into a training prefix and a test tail whose length is
the forecast horizon, and both parts are wrapped as pandas Series indexed
by a ``PeriodIndex`` at the dataset frequency.

Built-in collections (M3 / M4 competition files) are registered in
``DATASETS``; the M4 files carry no usable ``@horizon`` so their horizon
is fixed here.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from tsf_ingest.config import DecodeOptions
from tsf_ingest.frequency import lookup
from tsf_ingest.parsers.base import DecodeResult
from tsf_ingest.parsers.tsf import TsfParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetSpec:
    """How to decode and split one named collection."""
    key: str = "series_name"
    index: str = "start_timestamp"
    horizon: int | None = None  # None: use the file's @horizon


DATASETS: dict[str, DatasetSpec] = {
    "m3_yearly": DatasetSpec(),
    "m3_quarterly": DatasetSpec(),
    "m3_monthly": DatasetSpec(),
    "m4_yearly": DatasetSpec(horizon=6),
    "m4_quarterly": DatasetSpec(horizon=8),
    "m4_monthly": DatasetSpec(horizon=18),
}


@dataclass
class SplitSeries:
    """One series split for forecasting evaluation."""
    name: str
    training: pd.Series
    test: pd.Series


def to_periodic(
    values: Sequence[float] | np.ndarray,
    start: pd.Timestamp,
    frequency_label: str,
) -> pd.Series:
    """Wrap *values* in a Series indexed by consecutive periods.

    The first period is the one containing *start*, at the pandas period
    alias of *frequency_label* (e.g. ``quarterly`` -> ``Q``).
    """
    alias = lookup(frequency_label).period_alias
    start = pd.Timestamp(start)
    if start.tzinfo is not None:
        start = start.tz_convert(None)
    index = pd.period_range(start=start.to_period(alias), periods=len(values), freq=alias)
    return pd.Series(np.asarray(values, dtype=np.float64), index=index)


def split_series(
    result: DecodeResult,
    key: str | None = None,
    horizon: int | None = None,
) -> list[SplitSeries]:
    """Split every series of a decoded table into training and test parts.

    Args:
        result: Output of ``read_tsf()``.
        key: Attribute identifying a series. Defaults to the recommended key.
        horizon: Test length. Defaults to the file's ``@horizon``.

    Returns:
        One ``SplitSeries`` per key value, in order of first appearance.

    Raises:
        ValueError: If no key, horizon, index attribute or frequency is
            available, or a series is not longer than the horizon.
    """
    key = key or result.recommendation.key
    if key is None:
        raise ValueError("A key attribute is required to split series.")
    if horizon is None:
        horizon = result.horizon
    if horizon is None:
        raise ValueError("No horizon given and the file declares no @horizon.")
    index_col = result.recommendation.index
    if index_col is None:
        raise ValueError("No date attribute is available to anchor the periods.")
    if result.frequency is None:
        raise ValueError("The file declares no @frequency.")

    value_col = result.table.columns[-1]
    splits: list[SplitSeries] = []
    for name, group in result.table.groupby(key, sort=False):
        values = group[value_col].to_numpy()
        if horizon >= len(values):
            raise ValueError(
                f"Series '{name}' has {len(values)} observations; "
                f"cannot hold out a horizon of {horizon}."
            )
        periodic = to_periodic(values, group[index_col].iloc[0], result.frequency)
        cut = len(values) - horizon
        splits.append(SplitSeries(
            name=str(name),
            training=periodic.iloc[:cut],
            test=periodic.iloc[cut:],
        ))

    logger.info("Split %d series with horizon %d", len(splits), horizon)
    return splits


def load_dataset(name: str, path: str | Path) -> list[SplitSeries]:
    """Decode and split one of the registered collections.

    Raises:
        KeyError: If *name* is not in ``DATASETS``.
    """
    if name not in DATASETS:
        raise KeyError(f"Unknown dataset '{name}'. Known datasets: {sorted(DATASETS)}")
    spec = DATASETS[name]
    result = TsfParser().parse(path, DecodeOptions(key=spec.key, index=spec.index))
    return split_series(result, key=spec.key, horizon=spec.horizon)
