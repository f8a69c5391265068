"""Tests for the bundled JSON schemas."""

import json
from collections.abc import Callable
from dataclasses import fields
from pathlib import Path

import jsonschema
import pytest

from risio.audit import AuditLogger
from risio.errors import StructuralError
from risio.models import RisRecord, RisType
from risio.parse import DiagnosticKind, ParseDiagnostic
from risio.schemas import LOG_EVENT_SCHEMA, RECORD_SCHEMA, load_schema, validate_record_dict


@pytest.fixture(scope="module")
def record_schema() -> dict:
    """Load the record JSON schema."""
    return load_schema(RECORD_SCHEMA)


@pytest.fixture(scope="module")
def event_schema() -> dict:
    """Load the log event JSON schema."""
    return load_schema(LOG_EVENT_SCHEMA)


@pytest.mark.unit
def test_schemas_are_valid(record_schema: dict, event_schema: dict) -> None:
    """Test both schemas are themselves valid draft 2020-12 schemas."""
    jsonschema.Draft202012Validator.check_schema(record_schema)
    jsonschema.Draft202012Validator.check_schema(event_schema)


@pytest.mark.unit
def test_record_schema_matches_model(record_schema: dict) -> None:
    """Test the schema requires exactly the record fields and knows every type."""
    assert set(record_schema["required"]) == {f.name for f in fields(RisRecord)}
    assert set(record_schema["properties"]["type"]["enum"]) == {None, *(t.code for t in RisType)}


@pytest.mark.unit
def test_to_dict_validates(record_schema: dict, make_record: Callable[..., RisRecord]) -> None:
    """Test serialized records validate, typed and untyped alike."""
    jsonschema.validate(instance=make_record(abstr="a\nb").to_dict(), schema=record_schema)
    jsonschema.validate(instance=RisRecord().to_dict(), schema=record_schema)


@pytest.mark.unit
@pytest.mark.parametrize(
    "data",
    [
        {"type": "NOPE"},
        {"authors": "Smith, J"},
        {"title": ["A", "B"]},
        {"unknown_field": "x"},
        {"keywords": [1, 2]},
    ],
)
def test_validate_record_dict_rejects(data: dict) -> None:
    """Test malformed mappings are rejected."""
    with pytest.raises(jsonschema.ValidationError):
        validate_record_dict(data)


@pytest.mark.unit
def test_validate_record_dict_allows_partial() -> None:
    """Test omitted keys are allowed when validating input mappings."""
    validate_record_dict({"type": "JOUR", "title": "T"})


@pytest.mark.unit
def test_generated_events_validate(tmp_path: Path, event_schema: dict) -> None:
    """Test events written by the logger validate against the schema."""
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="r1", log_path=log_path) as logger:
        logger.run_started(command=["risio", "parse"], parameters={"strict": False})
        with logger.stage("parse") as counters:
            logger.diagnostic(
                ParseDiagnostic(3, DiagnosticKind.STRUCTURAL, "Found ER without opening TY", "ER")
            )
            counters["records_out"] = 2
        logger.error(StructuralError("boom", line_number=4))
        logger.run_finished("failed")

    with log_path.open() as f:
        events = [json.loads(line) for line in f]

    assert len(events) == 6
    for event in events:
        jsonschema.validate(instance=event, schema=event_schema)
