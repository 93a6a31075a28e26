"""
Series line decoder for .tsf files.

Each line of the data section describes one series:

    attr_1:attr_2:...:attr_n:v_1,v_2,...,v_m

The first ``n`` fields are the raw attribute values (one per declared
attribute, in declaration order); the last field is a comma-separated
list of decimal numbers where ``?`` marks a missing observation.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tsf_ingest.exceptions import (
    AllValuesMissingError,
    InvalidAttributeValuesError,
    MissingAttributesOrValuesError,
)

MISSING_MARKER = "?"


@dataclass(frozen=True)
class SeriesRecord:
    """One decoded data line.

    Attributes:
        attribute_values: Raw attribute tokens aligned with the schema.
        values: Observations as float64; missing ones are ``NaN``.
    """
    attribute_values: tuple[str, ...]
    values: np.ndarray

    def __len__(self) -> int:
        return len(self.values)


def _where(line_no: int | None) -> str:
    return f" (line {line_no})" if line_no is not None else ""


def _parse_value(token: str, line_no: int | None) -> float:
    text = token.strip()
    if text == MISSING_MARKER:
        return np.nan
    try:
        return float(text)
    except ValueError:
        raise InvalidAttributeValuesError(
            f"Invalid series value '{token}'{_where(line_no)}. "
            f"Values must be numbers or '{MISSING_MARKER}'."
        ) from None


def decode_series_line(
    line: str,
    n_attributes: int,
    line_no: int | None = None,
) -> SeriesRecord:
    """Split and validate one data line.

    Args:
        line: The raw line (a trailing newline is ignored).
        n_attributes: Number of declared attributes.
        line_no: 1-based source line number, used in error messages.

    Returns:
        The decoded ``SeriesRecord``.

    Raises:
        MissingAttributesOrValuesError: Field count is not ``n_attributes + 1``.
        InvalidAttributeValuesError: A value is neither a number nor ``?``.
        AllValuesMissingError: Every value is ``?``.
    """
    fields = line.rstrip("\r\n").split(":")
    if len(fields) != n_attributes + 1:
        raise MissingAttributesOrValuesError(
            f"Missing attributes/values in series{_where(line_no)}: expected "
            f"{n_attributes} attribute(s) plus a value list, found {len(fields)} field(s)."
        )
    if not fields[-1].strip():
        raise MissingAttributesOrValuesError(
            f"Missing attributes/values in series{_where(line_no)}: the value list is empty."
        )

    tokens = fields[-1].split(",")
    # one trailing comma is tolerated
    if len(tokens) > 1 and not tokens[-1].strip():
        tokens.pop()
    values = np.array(
        [_parse_value(token, line_no) for token in tokens],
        dtype=np.float64,
    )
    if np.isnan(values).all():
        raise AllValuesMissingError(
            f"All series values are missing{_where(line_no)}. A series must "
            "contain at least one numeric value."
        )

    return SeriesRecord(attribute_values=tuple(fields[:-1]), values=values)
