from __future__ import annotations

from pathlib import Path
from typing import Any

from fuzdur.core.schema_validation import (
    load_yaml_object,
    validate_payload_against_schema,
)
from fuzdur.dsp.locator import DEFAULT_LOCATOR_MODE, LOCATOR_MODES
from fuzdur.resources import schema_path

SCAN_CONFIG_SCHEMA_VERSION = "0.1.0"
DEFAULT_EXTENSIONS: tuple[str, ...] = (".fuz", ".xwm")
DEFAULT_TOLERANCE_S = 0.05

_TOP_LEVEL_KEYS = {
    "schema_version",
    "locator_mode",
    "extensions",
    "recursive",
    "include_hashes",
    "tolerance_s",
}


def _coerce_non_negative_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a number.")
    if isinstance(value, (int, float)):
        coerced = float(value)
    elif isinstance(value, str):
        try:
            coerced = float(value.strip())
        except ValueError as exc:
            raise ValueError(f"{field_name} must be a number.") from exc
    else:
        raise ValueError(f"{field_name} must be a number.")
    if coerced < 0:
        raise ValueError(f"{field_name} must be >= 0.")
    return coerced


def _coerce_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    raise ValueError(f"{field_name} must be a boolean.")


def _normalize_locator_mode(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("locator_mode must be a string.")
    mode = value.strip().lower()
    if mode not in LOCATOR_MODES:
        raise ValueError(
            f"Unknown locator_mode: {mode!r}. Known modes: {', '.join(LOCATOR_MODES)}"
        )
    return mode


def _normalize_extensions(value: Any) -> list[str]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise ValueError("extensions must be a list of file suffixes.")

    normalized: list[str] = []
    for item in items:
        if not isinstance(item, str):
            raise ValueError("extensions must contain only strings.")
        suffix = item.strip().lower()
        if not suffix:
            continue
        if not suffix.startswith("."):
            suffix = f".{suffix}"
        if suffix not in normalized:
            normalized.append(suffix)
    if not normalized:
        raise ValueError("extensions must not be empty.")
    return sorted(normalized)


def default_scan_config() -> dict[str, Any]:
    return {
        "schema_version": SCAN_CONFIG_SCHEMA_VERSION,
        "locator_mode": DEFAULT_LOCATOR_MODE,
        "extensions": list(DEFAULT_EXTENSIONS),
        "recursive": False,
        "include_hashes": False,
        "tolerance_s": DEFAULT_TOLERANCE_S,
    }


def normalize_scan_config(cfg: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(cfg, dict):
        raise ValueError("Scan config must be a mapping.")

    unknown = sorted(set(cfg.keys()) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ValueError(f"Unknown scan config field(s): {', '.join(unknown)}")

    normalized: dict[str, Any] = {}
    for key in sorted(cfg.keys()):
        value = cfg[key]
        if value is None:
            continue
        if key == "schema_version":
            normalized[key] = str(value).strip()
        elif key == "locator_mode":
            normalized[key] = _normalize_locator_mode(value)
        elif key == "extensions":
            normalized[key] = _normalize_extensions(value)
        elif key in {"recursive", "include_hashes"}:
            normalized[key] = _coerce_bool(value, key)
        elif key == "tolerance_s":
            normalized[key] = _coerce_non_negative_float(value, key)

    schema_version = normalized.get("schema_version")
    if schema_version is None:
        normalized["schema_version"] = SCAN_CONFIG_SCHEMA_VERSION
    elif schema_version != SCAN_CONFIG_SCHEMA_VERSION:
        raise ValueError(
            "Unsupported scan config schema_version: "
            f"{schema_version!r} (expected {SCAN_CONFIG_SCHEMA_VERSION!r})."
        )
    return normalized


def merge_scan_config(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with non-None ``overrides`` applied, fully normalized."""
    merged = dict(normalize_scan_config(base))
    for key in sorted(overrides.keys()):
        if overrides[key] is not None:
            merged[key] = overrides[key]
    return normalize_scan_config(merged)


def resolve_scan_config(cfg: dict[str, Any] | None = None) -> dict[str, Any]:
    """Fill every unset field with its default."""
    return merge_scan_config(default_scan_config(), cfg or {})


def load_scan_config(path: Path) -> dict[str, Any]:
    payload = load_yaml_object(path, label="Scan config")
    validate_payload_against_schema(
        payload,
        schema_path=schema_path("scan_config"),
        payload_name="Scan config",
    )
    return normalize_scan_config(payload)
