from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from beacon_validator.models.messages import ValidationMessage

_REPORT_FIELDS = ("code", "path", "location", "message")


def report_entry(error: ValidationMessage) -> dict[str, object]:
    """Report representation of *error*: only the fields that are set."""
    payload = error.model_dump(include=set(_REPORT_FIELDS), exclude_none=True)
    return {key: payload[key] for key in _REPORT_FIELDS if key in payload}


def write_report(errors: Iterable[ValidationMessage], output_path: Path) -> Path:
    """Write *errors* as a pretty-printed JSON array, replacing any existing file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [report_entry(error) for error in errors]
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return output_path
