from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml


def load_json_schema(schema_path: Path) -> dict[str, Any]:
    try:
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Failed to load schema from {schema_path}: {exc}") from exc
    if not isinstance(schema, dict):
        raise ValueError(f"Schema JSON must be an object: {schema_path}")
    return schema


def load_yaml_object(path: Path, *, label: str) -> dict[str, Any]:
    """Load a YAML (or JSON) mapping from disk."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise ValueError(f"Failed to read {label} from {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"{label} is not valid YAML: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"{label} root must be a mapping: {path}")
    return payload


def validate_payload_against_schema(
    payload: dict[str, Any],
    *,
    schema_path: Path,
    payload_name: str,
) -> None:
    schema = load_json_schema(schema_path)
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(
        validator.iter_errors(payload),
        key=lambda err: [str(item) for item in err.path],
    )
    if not errors:
        return

    lines: list[str] = []
    for err in errors:
        path = ".".join(str(item) for item in err.path) or "$"
        lines.append(f"- {path}: {err.message}")
    details = "\n".join(lines)
    raise ValueError(f"{payload_name} schema validation failed:\n{details}")
