"""
Configuration models and YAML I/O for tsf-ingest.

Key models:
- DatasetMetadata: Scalar metadata declared in a .tsf header
  (@frequency, @horizon, @missing, @equallength).
- DecodeOptions: Caller choices for one decode (value column name,
  key and index attributes).
- ConvertConfig: Top-level config for a .tsf -> table conversion
  (source + decode + output), mapped 1:1 to a YAML file.

Key functions:
- load_config(path) -> ConvertConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from tsf_ingest.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

DEFAULT_VALUE_COLUMN = "series_value"


class DatasetMetadata(BaseModel):
    """Dataset-level metadata read from the .tsf header.

    ``None`` means the directive was absent ("unspecified"), not
    false or zero.
    """

    frequency: str | None = None
    horizon: int | None = Field(None, ge=0, description="Forecast horizon")
    contains_missing: bool | None = None
    equal_length: bool | None = None


class DecodeOptions(BaseModel):
    """Caller-supplied options for a single decode."""

    value_column_name: str = Field(
        DEFAULT_VALUE_COLUMN,
        min_length=1,
        description="Name of the column holding the series values",
    )
    key: str | None = Field(
        None, description="Attribute identifying a series (e.g. 'series_name')"
    )
    index: str | None = Field(
        None,
        description="Date attribute used as time index; defaults to the first date attribute",
    )

    @model_validator(mode="after")
    def _check_value_column_is_distinct(self) -> DecodeOptions:
        """The value column must not shadow the key or index attribute."""
        for role, name in (("key", self.key), ("index", self.index)):
            if name is not None and name == self.value_column_name:
                raise ValueError(
                    f"value_column_name '{name}' collides with the {role} attribute"
                )
        return self


class SourceConfig(BaseModel):
    """Source file information."""

    input_path: str = Field(..., description="Path to the .tsf file")

    @field_validator("input_path")
    @classmethod
    def _check_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("input_path must not be blank")
        return value


class OutputConfig(BaseModel):
    """Output settings."""

    output_dir: str = Field("outputs/", description="Directory for output files")
    output_format: Literal["csv", "parquet"] = Field(
        "parquet", description="Output format"
    )
    table_name: str | None = Field(
        None, description="Output file stem; defaults to the source file stem"
    )


class ConvertConfig(BaseModel):
    """Top-level configuration for a .tsf conversion. Maps 1:1 to YAML."""

    source: SourceConfig
    decode: DecodeOptions = Field(default_factory=DecodeOptions)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def table_name(self) -> str:
        return self.output.table_name or Path(self.source.input_path).stem


def load_config(path: str | Path) -> ConvertConfig:
    """Load and validate a conversion config YAML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return ConvertConfig.model_validate(raw)


def save_config(config: ConvertConfig, path: str | Path) -> None:
    """Serialize a ConvertConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# tsf-ingest conversion configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
