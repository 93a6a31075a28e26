"""
Exporter for tsf-ingest.

Writes a decoded .tsf table to disk as CSV or Parquet, together with a
YAML sidecar that keeps what the flat table cannot: the dataset metadata
(frequency, horizon, missing / equal-length flags), the attribute schema
and the (key, index) recommendation.

Output file naming convention:
  {table_name}.{format}      -- e.g. "m3_yearly.parquet"
  {table_name}.meta.yaml     -- always written alongside the table.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

import pandas as pd
import yaml

from tsf_ingest.exceptions import ExportError
from tsf_ingest.parsers.base import DecodeResult

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}
SIDECAR_SUFFIX = ".meta.yaml"


def _write_dataframe(df: pd.DataFrame, path: Path, output_format: str) -> None:
    """Write a single DataFrame to disk in the specified format.

    Raises:
        ExportError: If writing fails for any reason.
    """
    try:
        if output_format == "csv":
            df.to_csv(path, index=False, encoding="utf-8")
        else:  # parquet
            df.to_parquet(path, index=False, engine="pyarrow")
    except Exception as exc:
        raise ExportError(
            f"Failed to write {path.name} as {output_format}: {exc}"
        ) from exc


def build_sidecar(result: DecodeResult) -> dict[str, Any]:
    """Describe a DecodeResult as a YAML-serializable dict."""
    rec = result.recommendation
    return {
        "metadata": result.metadata.model_dump(mode="json"),
        "attributes": [
            {"name": attr.name, "type": attr.type.value} for attr in result.attributes
        ],
        "value_column": str(result.table.columns[-1]),
        "recommendation": {
            "key": rec.key,
            "index": rec.index,
            "status": rec.status.value,
        },
        "series_count": result.series_count,
        "row_count": len(result.table),
    }


def export_result(
    result: DecodeResult,
    output_dir: str | Path,
    table_name: str,
    output_format: Literal["csv", "parquet"] = "parquet",
) -> list[str]:
    """Write the decoded table and its metadata sidecar.

    The output directory is created recursively if it does not exist.

    Args:
        result: Output of ``read_tsf()``.
        output_dir: Directory to write files into (created if needed).
        table_name: File stem for both outputs.
        output_format: "csv" or "parquet".

    Returns:
        Paths written, the table first and the sidecar second.

    Raises:
        ExportError: If *output_format* is unsupported, or if any write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    table_path = out / f"{table_name}.{output_format}"
    _write_dataframe(result.table, table_path, output_format)
    logger.info(
        "Exported table '%s' -> %s (%d rows, %d cols)",
        table_name,
        table_path.name,
        len(result.table),
        len(result.table.columns),
    )

    sidecar_path = out / f"{table_name}{SIDECAR_SUFFIX}"
    try:
        with open(sidecar_path, "w", encoding="utf-8") as f:
            yaml.dump(
                build_sidecar(result),
                f,
                allow_unicode=True,
                default_flow_style=False,
                sort_keys=False,
            )
    except OSError as exc:
        raise ExportError(f"Failed to write {sidecar_path.name}: {exc}") from exc
    logger.info("Exported metadata -> %s", sidecar_path.name)

    return [str(table_path), str(sidecar_path)]


def load_sidecar(path: str | Path) -> dict[str, Any]:
    """Read a ``.meta.yaml`` sidecar written by ``export_result()``."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)
