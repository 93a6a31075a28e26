"""
tsf-ingest: decode .tsf (Time Series File) datasets into pandas.

Public API surface:

- ``read_tsf(source, ...)`` -- **main entry point**. Decodes a .tsf file
  path or open text stream into a long-format DataFrame plus the dataset
  metadata (frequency, horizon, missing / equal-length flags) and a
  (key, index) recommendation. The result unpacks as
  ``table, frequency, horizon, contains_missing, equal_length``.

- ``convert(config_path)`` -- Config-driven conversion: loads a YAML
  ``ConvertConfig``, decodes the source and writes the table (CSV or
  Parquet) plus a metadata sidecar.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tsf_ingest.config import DEFAULT_VALUE_COLUMN, DecodeOptions, load_config
from tsf_ingest.export import export_result
from tsf_ingest.parsers.base import DecodeResult, IndexRecommendation, IndexStatus
from tsf_ingest.parsers.tsf import Source, TsfParser

__all__ = [
    "read_tsf",
    "convert",
    "DecodeResult",
    "IndexRecommendation",
    "IndexStatus",
]

logger = logging.getLogger(__name__)


def read_tsf(
    source: Source,
    value_column_name: str = DEFAULT_VALUE_COLUMN,
    key: str | None = None,
    index: str | None = None,
) -> DecodeResult:
    """Decode a .tsf file into a long-format table.

    Args:
        source: Path to a .tsf file, or an open text stream. Paths are
            opened and closed here; streams are left open.
        value_column_name: Name of the column holding the series values.
        key: Attribute identifying each series (e.g. ``"series_name"``).
            Without it the recommendation status is ``NO_KEY``.
        index: Date attribute to use as time index. Defaults to the first
            date attribute declared in the header.

    Returns:
        A ``DecodeResult``. Unpack it as
        ``table, frequency, horizon, contains_missing, equal_length``, or
        read ``result.recommendation`` for the (key, index) pair.

    Raises:
        ParsingError: A subclass naming the exact problem, e.g.
            ``MissingDataSectionError`` or ``AllValuesMissingError``.
        pydantic.ValidationError: If *value_column_name* is empty or equal
            to *key* / *index*.

    Examples::

        table, frequency, horizon, missing, equal = read_tsf(
            "m3_yearly_dataset.tsf",
            key="series_name",
            index="start_timestamp",
        )
    """
    options = DecodeOptions(value_column_name=value_column_name, key=key, index=index)
    return TsfParser().parse(source, options)


def convert(config_path: str | Path) -> list[str]:
    """Decode the source named in a YAML config and export it.

    Orchestration:
      1. ``load_config()`` -> ``ConvertConfig`` (Pydantic validation on load).
      2. ``TsfParser.parse()`` with the config's decode options.
      3. ``export_result()`` to ``output.output_dir``.

    Returns:
        Paths written: the table, then its ``.meta.yaml`` sidecar.

    Raises:
        FileNotFoundError: If *config_path* does not exist.
        ConfigValidationError: If the config file is empty.
        ParsingError: If the source file is malformed.
        ExportError: If writing fails.
    """
    logger.info("convert() -- config_path=%s", config_path)
    config = load_config(config_path)

    result = TsfParser().parse(config.source.input_path, config.decode)

    return export_result(
        result,
        output_dir=config.output.output_dir,
        table_name=config.table_name,
        output_format=config.output.output_format,
    )
