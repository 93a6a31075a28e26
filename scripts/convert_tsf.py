"""
Demo script: decode .tsf files, or run YAML conversion configs.

Usage:
    uv run python scripts/convert_tsf.py inputs/m3_yearly_dataset.tsf
    uv run python scripts/convert_tsf.py configs/m3_yearly.yaml
    uv run python scripts/convert_tsf.py inputs/*.tsf --key series_name

A ``.tsf`` argument is decoded and summarized. A ``.yaml`` / ``.yml``
argument is treated as a conversion config and exported via ``convert()``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("convert_tsf")


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _pop_option(args: list[str], flag: str) -> str | None:
    """Remove ``flag value`` from *args* and return the value."""
    if flag not in args:
        return None
    pos = args.index(flag)
    if pos + 1 >= len(args):
        log.error("%s requires a value", flag)
        sys.exit(2)
    value = args[pos + 1]
    del args[pos:pos + 2]
    return value


def _summarize(path: Path, key: str | None) -> None:
    import tsf_ingest

    result = tsf_ingest.read_tsf(path, key=key)
    log.info("  frequency        : %s", result.frequency)
    log.info("  horizon          : %s", result.horizon)
    log.info("  contains_missing : %s", result.contains_missing)
    log.info("  equal_length     : %s", result.equal_length)
    log.info("  series           : %s", f"{result.series_count:,}")
    log.info("  rows             : %s", f"{len(result.table):,}")
    log.info("  recommendation   : %s", result.recommendation)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    import tsf_ingest

    args = sys.argv[1:]
    key = _pop_option(args, "--key")
    if not args:
        log.error("Usage: convert_tsf.py <file.tsf | config.yaml> ... [--key NAME]")
        sys.exit(2)

    for arg in args:
        path = Path(arg)
        if not path.exists():
            log.warning("SKIP  %s  (file not found)", path)
            continue

        log.info("=" * 70)
        log.info("Processing: %s", path)
        log.info("=" * 70)

        if path.suffix.lower() in (".yaml", ".yml"):
            for written in tsf_ingest.convert(path):
                log.info("  wrote %s", written)
        else:
            _summarize(path, key)

    log.info("All files processed.")


if __name__ == "__main__":
    main()
