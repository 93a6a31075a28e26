"""
.tsf (Time Series File) decoder.

Input structure:
  - Meta-data lines (``@attribute``, ``@frequency``, ``@horizon``,
    ``@missing``, ``@equallength``, ...) terminated by ``@data``.
  - One line per series: ``attr_1:...:attr_n:v_1,...,v_m``.

Decoding runs in one pass over the lines:
  1. ``parse_header()`` builds the attribute schema and dataset metadata.
  2. Every remaining non-blank line is split by ``decode_series_line()``
     and folded into the ``TableAssembler``, which materializes the
     attribute columns (broadcast scalars or generated timestamps).
  3. The assembler builds the long-format DataFrame and validates the
     caller's key/index choice.

Any structural violation aborts the decode; no partial table is returned.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TextIO

from tsf_ingest.config import DecodeOptions
from tsf_ingest.exceptions import MissingSeriesInformationError
from tsf_ingest.parsers.assembler import TableAssembler
from tsf_ingest.parsers.base import DecodeResult
from tsf_ingest.parsers.header import parse_header
from tsf_ingest.parsers.series import decode_series_line

logger = logging.getLogger(__name__)

Source = str | os.PathLike | TextIO | Iterable[str]


def _describe(source: Source) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    return getattr(source, "name", "<stream>")


@contextmanager
def _open_lines(source: Source) -> Iterator[Iterator[str]]:
    """Yield a line iterator over *source*.

    Paths are opened here and closed on every exit path. Open streams
    (or any iterable of lines) belong to the caller and are left open.
    """
    if isinstance(source, (str, os.PathLike)):
        # utf-8-sig so a leading BOM does not hide the first directive
        with open(source, "r", encoding="utf-8-sig") as f:
            yield iter(f)
    elif isinstance(source, Iterable):
        yield iter(source)
    else:
        raise TypeError(
            "Argument 'source' must be a file path or an open text stream, "
            f"got {type(source).__name__}."
        )


class TsfParser:
    """Decoder for .tsf files."""

    def parse(self, source: Source, options: DecodeOptions | None = None) -> DecodeResult:
        """Decode a .tsf source into a long-format table.

        Args:
            source: Path to a .tsf file, or an open text stream.
            options: Value column name and key/index choice. Defaults to
                ``DecodeOptions()``.

        Returns:
            DecodeResult with the table, metadata and index recommendation.

        Raises:
            ParsingError: One of its subclasses, for any malformed input or
                an invalid key/index.
        """
        options = options or DecodeOptions()
        logger.info("Parsing .tsf source: %s", _describe(source))

        with _open_lines(source) as lines:
            header = parse_header(lines, index=options.index)
            assembler = TableAssembler(
                header.attributes,
                header.metadata,
                value_column_name=options.value_column_name,
            )
            n_attributes = len(header.attributes)

            for line_no, line in enumerate(lines, start=header.lines_consumed + 1):
                if not line.strip():
                    continue
                record = decode_series_line(line, n_attributes, line_no)
                assembler.add(record, line_no)

        if assembler.series_count == 0:
            raise MissingSeriesInformationError(
                "Missing series information under data section."
            )

        table = assembler.build()
        recommendation = assembler.recommend(
            key=options.key,
            index=options.index,
            default_index=header.default_index,
        )
        logger.info(
            "Decoded %d series into %d rows x %d columns (frequency=%s)",
            assembler.series_count,
            len(table),
            len(table.columns),
            header.metadata.frequency,
        )

        return DecodeResult(
            table=table,
            metadata=header.metadata,
            attributes=header.attributes,
            recommendation=recommendation,
            series_count=assembler.series_count,
        )
