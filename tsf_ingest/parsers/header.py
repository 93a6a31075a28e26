"""
Header (meta-data section) parser for .tsf files.

Input structure:
  - Zero or more meta-data lines starting with ``@`` (leading whitespace
    allowed). ``@attribute <name> <type>`` declares a per-series attribute;
    ``@frequency``, ``@horizon``, ``@missing`` and ``@equallength`` set
    dataset metadata. Other two-token directives (e.g. ``@relation``) are
    accepted and ignored.
  - Lines not starting with ``@`` (blank lines, ``#`` comments) are skipped.
  - A line consisting of ``@data`` ends the header.

The parser consumes lines from an iterator and stops right after the
``@data`` marker, leaving the iterator positioned on the first series line.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterator
from typing import Any

from tsf_ingest.config import DatasetMetadata
from tsf_ingest.exceptions import (
    InvalidAttributeTypeError,
    InvalidMetadataError,
    InvalidMetadataSpecificationError,
    MissingAttributeSectionError,
    MissingDataSectionError,
)
from tsf_ingest.parsers.base import Attribute, AttributeType, Header

logger = logging.getLogger(__name__)

_DATA_MARKER = re.compile(r"^\s*@data\s*$")
_DIRECTIVE = re.compile(r"^\s*@")

# Scalar directive -> DatasetMetadata field
_SCALAR_FIELDS = {
    "@frequency": "frequency",
    "@horizon": "horizon",
    "@missing": "contains_missing",
    "@equallength": "equal_length",
}

_BOOLEAN_LITERALS = {"true": True, "false": False}


def _parse_attribute(tokens: list[str], line_no: int) -> Attribute:
    if len(tokens) != 3:
        raise InvalidMetadataSpecificationError(
            f"Invalid meta-data specification on line {line_no}: "
            f"@attribute takes a name and a type, got {tokens[1:]}"
        )
    _, name, type_name = tokens
    try:
        attr_type = AttributeType(type_name)
    except ValueError:
        raise InvalidAttributeTypeError(
            f"Invalid attribute type '{type_name}' for attribute '{name}' "
            f"on line {line_no}. Supported types: "
            f"{[t.value for t in AttributeType]}"
        ) from None
    return Attribute(name=name, type=attr_type)


def _parse_horizon(value: str, line_no: int) -> int:
    try:
        number = float(value)
    except ValueError:
        number = math.nan
    # integral literals such as "6.0" are accepted
    if not number.is_integer():
        raise InvalidMetadataError(
            f"@horizon must be an integer, got '{value}' on line {line_no}"
        )
    horizon = int(number)
    if horizon < 0:
        raise InvalidMetadataError(
            f"@horizon must not be negative, got {horizon} on line {line_no}"
        )
    return horizon


def _parse_boolean(directive: str, value: str, line_no: int) -> bool:
    try:
        return _BOOLEAN_LITERALS[value.lower()]
    except KeyError:
        raise InvalidMetadataError(
            f"{directive} must be 'true' or 'false', got '{value}' on line {line_no}"
        ) from None


def _parse_scalar(tokens: list[str], scalars: dict[str, Any], line_no: int) -> None:
    """Apply one scalar directive to *scalars* (field name -> value)."""
    if len(tokens) != 2:
        raise InvalidMetadataSpecificationError(
            f"Invalid meta-data specification on line {line_no}: "
            f"expected '<directive> <value>', got {tokens}"
        )
    directive, value = tokens

    field_name = _SCALAR_FIELDS.get(directive)
    if field_name is None:
        logger.debug("Ignoring directive %s on line %d", directive, line_no)
        return
    if field_name in scalars:
        raise InvalidMetadataSpecificationError(
            f"{directive} is declared more than once (line {line_no})"
        )

    if directive == "@frequency":
        scalars[field_name] = value
    elif directive == "@horizon":
        scalars[field_name] = _parse_horizon(value, line_no)
    else:
        scalars[field_name] = _parse_boolean(directive, value, line_no)


def parse_header(lines: Iterator[str], index: str | None = None) -> Header:
    """Consume the meta-data section up to and including ``@data``.

    Args:
        lines: Iterator over raw lines of the source. Advanced past the
            ``@data`` marker on success.
        index: The caller's explicit index attribute, if any. When ``None``
            the first date attribute becomes ``Header.default_index``.

    Returns:
        The parsed ``Header``.

    Raises:
        InvalidMetadataSpecificationError: Malformed ``@`` line, duplicate
            attribute name or repeated scalar directive.
        InvalidAttributeTypeError: Unknown attribute type.
        InvalidMetadataError: Non-integer horizon or non-boolean flag.
        MissingDataSectionError: No ``@data`` line before end of input.
        MissingAttributeSectionError: No ``@attribute`` line before ``@data``.
    """
    attributes: list[Attribute] = []
    seen_names: set[str] = set()
    scalars: dict[str, Any] = {}
    default_index: str | None = None
    line_no = 0

    for line in lines:
        line_no += 1
        if _DATA_MARKER.match(line):
            break
        if not _DIRECTIVE.match(line):
            continue

        tokens = line.split()
        if tokens[0] != "@attribute":
            _parse_scalar(tokens, scalars, line_no)
            continue

        attr = _parse_attribute(tokens, line_no)
        if attr.name in seen_names:
            raise InvalidMetadataSpecificationError(
                f"Attribute '{attr.name}' is declared more than once (line {line_no})"
            )
        if index is None and default_index is None and attr.type is AttributeType.DATE:
            default_index = attr.name
        seen_names.add(attr.name)
        attributes.append(attr)
    else:
        raise MissingDataSectionError("Missing data section: no @data line found.")

    if not attributes:
        raise MissingAttributeSectionError(
            "Missing attribute section: declare at least one @attribute before @data."
        )

    metadata = DatasetMetadata(**scalars)
    logger.debug(
        "Parsed header: attributes=%s, metadata=%s",
        [a.name for a in attributes],
        metadata.model_dump(),
    )
    return Header(
        attributes=tuple(attributes),
        metadata=metadata,
        default_index=default_index,
        lines_consumed=line_no,
    )
