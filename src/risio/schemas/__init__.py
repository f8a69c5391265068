"""JSON schemas for records and audit events.

Schemas are shipped as package data and loaded with importlib.resources.
"""

import json
from functools import cache
from importlib import resources
from typing import Any

import jsonschema

__all__ = ["load_schema", "validate_record_dict", "RECORD_SCHEMA", "LOG_EVENT_SCHEMA"]

RECORD_SCHEMA = "ris_record.schema.json"
LOG_EVENT_SCHEMA = "log_event.schema.json"


@cache
def load_schema(name: str) -> dict[str, Any]:
    """Load a bundled JSON schema by file name.

    Parameters
    ----------
    name : str
        Schema file name (e.g., "ris_record.schema.json").

    Returns
    -------
    dict[str, Any]
        Parsed schema.
    """
    with resources.files(__package__).joinpath(name).open(encoding="utf-8") as f:
        return json.load(f)


def validate_record_dict(data: dict[str, Any]) -> None:
    """Validate a record mapping against the record schema.

    Keys may be omitted; values must have the type of their field.

    Raises
    ------
    jsonschema.ValidationError
        If the mapping does not describe a RIS record.
    """
    schema = load_schema(RECORD_SCHEMA)
    jsonschema.validate(instance=data, schema={**schema, "required": []})
