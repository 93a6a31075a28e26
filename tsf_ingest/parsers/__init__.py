"""
Parsers sub-package for tsf-ingest.

Turns a raw .tsf file into a long-format DataFrame plus dataset metadata.

Modules, leaves first:
- base.py: shared types (Attribute, Header, DecodeResult, IndexRecommendation).
- header.py: meta-data section parser (attribute schema, @frequency, ...).
- series.py: single data line decoder (attribute tokens + value list).
- columns.py: per-attribute column builders (broadcast or timestamp run).
- assembler.py: folds series into columns and builds the table.
- tsf.py: TsfParser, the one-pass decoder tying the above together.
"""
