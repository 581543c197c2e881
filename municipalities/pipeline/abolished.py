"""Loading and decoding of the abolished municipalities dataset."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from municipalities.common.errors import ParseError, ValidationError
from municipalities.common.fs import read_utf8_text
from municipalities.common.models import AbolishedMunicipality

REQUIRED_STRING_FIELDS = ("comune", "provincia")


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _record_errors(idx: int, item: Any) -> list[str]:
    if not isinstance(item, dict):
        return [f"[{idx}]: expected object, got {_type_name(item)}"]
    errors = []
    for key in REQUIRED_STRING_FIELDS:
        if key not in item:
            errors.append(f"[{idx}].{key}: missing required field")
        elif not isinstance(item[key], str):
            errors.append(f"[{idx}].{key}: expected string, got {_type_name(item[key])}")
    return errors


def decode_abolished_municipalities(payload: Any) -> list[AbolishedMunicipality]:
    """Decode a parsed JSON payload, reporting every shape violation at once."""
    if not isinstance(payload, list):
        raise ValidationError(
            "Invalid abolished municipalities dataset",
            [f"expected array, got {_type_name(payload)}"],
        )

    errors: list[str] = []
    for idx, item in enumerate(payload):
        errors.extend(_record_errors(idx, item))
    if errors:
        raise ValidationError("Invalid abolished municipalities dataset", errors)

    return [
        AbolishedMunicipality(
            comune=item["comune"],
            provincia=item["provincia"],
            extra={key: value for key, value in item.items() if key not in REQUIRED_STRING_FIELDS},
        )
        for item in payload
    ]


def load_abolished_municipalities(path: Path) -> list[AbolishedMunicipality]:
    text = read_utf8_text(path)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON in {path}: {exc}") from exc
    return decode_abolished_municipalities(payload)
