"""Probe every voice file under a directory and build a duration report."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

from fuzdur import __version__ as engine_version
from fuzdur.core.scan_config import resolve_scan_config
from fuzdur.core.schema_validation import validate_payload_against_schema
from fuzdur.dsp.errors import FuzDurationError, FuzIOError
from fuzdur.dsp.io import describe_buffer, sha256_file
from fuzdur.resources import schema_path

SCAN_REPORT_SCHEMA_VERSION = "0.1.0"


def iter_voice_files(root_dir: Path, extensions: list[str], recursive: bool) -> list[Path]:
    """Return matching files under ``root_dir`` in deterministic order."""
    if not root_dir.is_dir():
        raise ValueError(f"Scan root is not a directory: {root_dir}")
    pattern = "**/*" if recursive else "*"
    wanted = set(extensions)
    return sorted(
        (
            path
            for path in root_dir.glob(pattern)
            if path.is_file() and path.suffix.lower() in wanted
        ),
        key=lambda path: path.relative_to(root_dir).as_posix(),
    )


def _scan_file(path: Path, root_dir: Path, cfg: dict[str, Any]) -> dict[str, Any]:
    entry: dict[str, Any] = {"path": path.relative_to(root_dir).as_posix()}
    try:
        data = path.read_bytes()
    except OSError as exc:
        error = FuzIOError(f"Unable to open file '{path}': {exc}")
        entry.update(status="error", error_kind=error.kind, error=error.message)
        return entry

    try:
        if cfg["include_hashes"]:
            entry["sha256"] = sha256_file(path)
        metadata = describe_buffer(data, mode=cfg["locator_mode"])
    except FuzDurationError as exc:
        entry.update(status="error", error_kind=exc.kind, error=exc.message)
        return entry

    entry.update(
        status="ok",
        duration_s=metadata["duration_s"],
        channels=metadata["channels"],
        sample_rate_hz=metadata["sample_rate_hz"],
        bits_per_sample=metadata["bits_per_sample"],
        lip_bytes=metadata["lip_bytes"],
        packet_count=metadata["packet_count"],
    )
    return entry


def build_scan_report(root_dir: Path, cfg: dict[str, Any] | None = None) -> dict[str, Any]:
    resolved = resolve_scan_config(cfg)
    root = root_dir.resolve()
    files = [
        _scan_file(path, root, resolved)
        for path in iter_voice_files(root, resolved["extensions"], resolved["recursive"])
    ]

    ok_entries = [entry for entry in files if entry["status"] == "ok"]
    total_duration_s = math.fsum(entry["duration_s"] for entry in ok_entries)
    return {
        "schema_version": SCAN_REPORT_SCHEMA_VERSION,
        "engine_version": engine_version,
        "root_dir": root.as_posix(),
        "locator_mode": resolved["locator_mode"],
        "files": files,
        "summary": {
            "total": len(files),
            "ok": len(ok_entries),
            "error": len(files) - len(ok_entries),
            "total_duration_s": total_duration_s,
        },
    }


def validate_scan_report(report: dict[str, Any]) -> None:
    validate_payload_against_schema(
        report,
        schema_path=schema_path("scan_report"),
        payload_name="Scan report",
    )
