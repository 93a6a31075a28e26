"""
Unit tests for config models and YAML I/O (tsf_ingest.config).

Tests Pydantic model validation and the YAML serialization round-trip.
"""

import pytest
from pydantic import ValidationError

from tsf_ingest.config import (
    ConvertConfig,
    DatasetMetadata,
    DecodeOptions,
    OutputConfig,
    SourceConfig,
    load_config,
    save_config,
)
from tsf_ingest.exceptions import ConfigValidationError


def _make_config(**overrides) -> ConvertConfig:
    defaults = {"source": SourceConfig(input_path="inputs/m3_yearly_dataset.tsf")}
    defaults.update(overrides)
    return ConvertConfig(**defaults)


# ---------------------------------------------------------------------------
# DatasetMetadata
# ---------------------------------------------------------------------------

class TestDatasetMetadata:
    """Tests for DatasetMetadata -- all fields optional."""

    def test_empty_is_unspecified(self):
        md = DatasetMetadata()
        assert md.frequency is None
        assert md.horizon is None
        assert md.contains_missing is None
        assert md.equal_length is None

    def test_negative_horizon_rejected(self):
        with pytest.raises(ValidationError, match="horizon"):
            DatasetMetadata(horizon=-1)


# ---------------------------------------------------------------------------
# DecodeOptions
# ---------------------------------------------------------------------------

class TestDecodeOptions:
    """Tests for DecodeOptions validation."""

    def test_defaults(self):
        opts = DecodeOptions()
        assert opts.value_column_name == "series_value"
        assert opts.key is None
        assert opts.index is None

    @pytest.mark.parametrize("role", ["key", "index"])
    def test_value_column_must_differ(self, role):
        with pytest.raises(ValidationError, match="collides"):
            DecodeOptions(value_column_name="x", **{role: "x"})

    def test_empty_value_column(self):
        with pytest.raises(ValidationError):
            DecodeOptions(value_column_name="")


# ---------------------------------------------------------------------------
# SourceConfig / OutputConfig / ConvertConfig
# ---------------------------------------------------------------------------

class TestConvertConfig:
    """Tests for the top-level conversion config."""

    def test_missing_input_path(self):
        with pytest.raises(ValidationError, match="input_path"):
            SourceConfig()

    def test_blank_input_path(self):
        with pytest.raises(ValidationError, match="blank"):
            SourceConfig(input_path="   ")

    def test_output_defaults(self):
        out = OutputConfig()
        assert out.output_dir == "outputs/"
        assert out.output_format == "parquet"

    def test_unsupported_output_format(self):
        with pytest.raises(ValidationError, match="output_format"):
            OutputConfig(output_format="xlsx")

    def test_table_name_defaults_to_source_stem(self):
        assert _make_config().table_name == "m3_yearly_dataset"

    def test_explicit_table_name(self):
        cfg = _make_config(output=OutputConfig(table_name="m3"))
        assert cfg.table_name == "m3"

    def test_decode_section_from_dict(self):
        cfg = ConvertConfig.model_validate({
            "source": {"input_path": "a.tsf"},
            "decode": {"key": "series_name", "index": "start_timestamp"},
        })
        assert cfg.decode.key == "series_name"
        assert cfg.decode.value_column_name == "series_value"


# ---------------------------------------------------------------------------
# YAML round-trip
# ---------------------------------------------------------------------------

class TestYamlRoundTrip:
    """save_config() -> load_config() preserves every field."""

    def test_roundtrip(self, tmp_path):
        cfg = _make_config(
            decode=DecodeOptions(value_column_name="y", key="series_name"),
            output=OutputConfig(output_dir="out/", output_format="csv"),
        )
        path = tmp_path / "convert.yaml"
        save_config(cfg, path)
        assert load_config(path) == cfg

    def test_header_comment(self, tmp_path):
        path = tmp_path / "convert.yaml"
        save_config(_make_config(), path)
        assert path.read_text(encoding="utf-8").startswith("# tsf-ingest")

    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "convert.yaml"
        save_config(_make_config(), path)
        assert path.exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="empty"):
            load_config(path)

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("source: {}\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)
