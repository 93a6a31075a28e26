"""
Custom exception hierarchy for tsf-ingest.

Every decode failure has its own class so callers can tell a structural
problem in the header (e.g. ``MissingDataSectionError``) apart from a bad
series line (e.g. ``AllValuesMissingError``) without parsing messages.
All decode errors share the ``ParsingError`` base; configuration and
export failures have their own branches.
"""


class TsfIngestError(Exception):
    """Base exception for all tsf-ingest errors."""


class ConfigValidationError(TsfIngestError):
    """Raised when a conversion config file is empty or inconsistent."""


class ExportError(TsfIngestError):
    """Raised when the exporter fails to write output files.

    For example, permission errors, disk full, or unsupported format.
    """


class ParsingError(TsfIngestError):
    """Base class for every error raised while decoding a .tsf file."""


# ---------------------------------------------------------------------------
# Header section
# ---------------------------------------------------------------------------

class InvalidMetadataSpecificationError(ParsingError):
    """An ``@`` line has neither the attribute shape nor the scalar shape.

    ``@attribute`` lines take exactly three tokens (directive, name, type);
    every other directive takes exactly two. Repeated directives and
    duplicate attribute names are rejected the same way.
    """


class InvalidMetadataError(ParsingError):
    """A scalar directive value cannot be interpreted.

    For example ``@horizon six`` or ``@missing maybe``.
    """


class InvalidAttributeTypeError(ParsingError):
    """An ``@attribute`` type is not one of string, numeric or date."""


class MissingDataSectionError(ParsingError):
    """End of input was reached before the ``@data`` marker."""


class MissingAttributeSectionError(ParsingError):
    """No ``@attribute`` line was declared before ``@data``."""


class MissingSeriesInformationError(ParsingError):
    """The ``@data`` marker is not followed by any series line."""


# ---------------------------------------------------------------------------
# Data section
# ---------------------------------------------------------------------------

class MissingAttributesOrValuesError(ParsingError):
    """A series line does not have one field per attribute plus the values."""


class AllValuesMissingError(ParsingError):
    """Every value of a series is the ``?`` missing marker."""


class InvalidAttributeValuesError(ParsingError):
    """A numeric attribute or a series value is not a number."""


class MissingFrequencyError(ParsingError):
    """A date attribute is declared but the header has no ``@frequency``."""


class InvalidFrequencyError(ParsingError):
    """The ``@frequency`` label is not in the frequency table."""


class InvalidTimestampFormatError(ParsingError):
    """A date attribute does not match ``YYYY-MM-DD HH-MM-SS``."""


# ---------------------------------------------------------------------------
# Caller-supplied key / index
# ---------------------------------------------------------------------------

class InvalidKeyError(ParsingError):
    """The requested key is not a declared attribute."""


class InvalidIndexError(ParsingError):
    """The requested index is not a declared attribute."""
