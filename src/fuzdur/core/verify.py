"""Check measured durations against a manifest of expected values.

A manifest is a YAML mapping::

    schema_version: "0.1.0"
    tolerance_s: 0.05
    cases:
      - path: c01_c01hellos_000241ff_1.fuz
        expected_duration_s: 1.06

Case paths are resolved relative to the manifest's directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fuzdur.core.scan_config import resolve_scan_config
from fuzdur.core.schema_validation import (
    load_yaml_object,
    validate_payload_against_schema,
)
from fuzdur.dsp.errors import FuzDurationError
from fuzdur.dsp.io import compute_duration_from_path
from fuzdur.resources import schema_path


def load_verify_manifest(path: Path) -> dict[str, Any]:
    payload = load_yaml_object(path, label="Verify manifest")
    validate_payload_against_schema(
        payload,
        schema_path=schema_path("verify_manifest"),
        payload_name="Verify manifest",
    )
    base_dir = path.resolve().parent
    cases = []
    for case in payload["cases"]:
        case_path = Path(case["path"])
        if not case_path.is_absolute():
            case_path = base_dir / case_path
        cases.append(
            {
                "path": case_path,
                "label": case["path"],
                "expected_duration_s": float(case["expected_duration_s"]),
                "locator_mode": case.get("locator_mode"),
            }
        )
    return {
        "tolerance_s": (
            float(payload["tolerance_s"]) if "tolerance_s" in payload else None
        ),
        "locator_mode": payload.get("locator_mode"),
        "cases": cases,
    }


def run_verify(
    manifest: dict[str, Any],
    *,
    tolerance_s: float | None = None,
    locator_mode: str | None = None,
    config: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Measure every case and report whether it falls inside the tolerance.

    Explicit arguments win over the manifest, and the manifest wins over
    the scan config (or its defaults when no config is given).
    """
    resolved = resolve_scan_config(config)
    tolerance = tolerance_s
    if tolerance is None:
        tolerance = manifest.get("tolerance_s")
    if tolerance is None:
        tolerance = resolved["tolerance_s"]
    default_mode = manifest.get("locator_mode") or resolved["locator_mode"]
    if tolerance < 0:
        raise ValueError("tolerance_s must be >= 0.")

    rows: list[dict[str, Any]] = []
    for case in manifest["cases"]:
        mode = locator_mode or case.get("locator_mode") or default_mode
        expected = case["expected_duration_s"]
        row: dict[str, Any] = {
            "path": case["label"],
            "expected_duration_s": expected,
            "locator_mode": mode,
        }
        try:
            actual = compute_duration_from_path(case["path"], mode=mode)
        except FuzDurationError as exc:
            row.update(passed=False, error_kind=exc.kind, error=exc.message)
            rows.append(row)
            continue

        delta = actual - expected
        row.update(
            duration_s=actual,
            delta_s=delta,
            passed=abs(delta) <= tolerance,
        )
        rows.append(row)
    return rows
