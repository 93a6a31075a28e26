"""
Shared test fixtures and path constants for tsf-ingest tests.

Sample .tsf files live in ``tests/data``. Inline samples used by several
unit test modules are defined here as module-level strings and exposed
through fixtures.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Sample file paths -- edit here if files move or new ones are added
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent / "data"

M3_YEARLY_TSF = DATA_DIR / "m3_yearly_sample.tsf"
HOURLY_TSF = DATA_DIR / "hourly_sample.tsf"
STATIC_TSF = DATA_DIR / "static_sample.tsf"


# ---------------------------------------------------------------------------
# Inline samples
# ---------------------------------------------------------------------------
YEARLY_SAMPLE = """\
@attribute id string
@attribute start date
@frequency yearly
@horizon 2
@data
A:2000-01-01 00-00-00:10,20,30
"""


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def yearly_stream() -> io.StringIO:
    """The one-series yearly sample as an open text stream."""
    return io.StringIO(YEARLY_SAMPLE)


@pytest.fixture()
def m3_yearly_path() -> Path:
    return M3_YEARLY_TSF


@pytest.fixture()
def hourly_path() -> Path:
    return HOURLY_TSF


@pytest.fixture()
def static_path() -> Path:
    return STATIC_TSF


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs against sample .tsf files)",
    )
