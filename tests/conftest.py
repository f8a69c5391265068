"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from risio.models import RisRecord, RisRecordBuilder  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the RIS fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_ris_file() -> Path:
    """Path to a well-formed RIS file with three records."""
    return FIXTURES_DIR / "sample.ris"


@pytest.fixture
def malformed_ris_file() -> Path:
    """Path to a RIS file mixing good records with broken ones."""
    return FIXTURES_DIR / "malformed.ris"


@pytest.fixture
def make_record() -> Callable[..., RisRecord]:
    """Factory for journal article records with minimal boilerplate.

    Any RisRecord field can be overridden by keyword; list fields accept
    plain lists.
    """

    def _factory(**overrides: object) -> RisRecord:
        values: dict[str, object] = {
            "type": "JOUR",
            "title": "Machine Learning for Systematic Reviews",
            "authors": ["Smith, John", "Doe, Jane"],
            "publication_year": "2024",
        }
        values.update(overrides)
        return RisRecordBuilder(**values).build()

    return _factory
