from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from fuzdur import __version__
from fuzdur.core.scan import build_scan_report, validate_scan_report
from fuzdur.core.scan_config import load_scan_config, merge_scan_config
from fuzdur.core.verify import load_verify_manifest, run_verify
from fuzdur.dsp.errors import FuzDurationError
from fuzdur.dsp.io import compute_duration_from_path, read_fuz_metadata
from fuzdur.dsp.locator import DEFAULT_LOCATOR_MODE, LOCATOR_MODES


def _json_text(payload: Any) -> str:
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


def _write_json_file(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_json_text(payload), encoding="utf-8")


def _add_mode_argument(parser: argparse.ArgumentParser, *, default: str | None) -> None:
    parser.add_argument(
        "--mode",
        choices=list(LOCATOR_MODES),
        default=default,
        help=(
            "How to find the RIFF stream: scan for the first RIFF signature, "
            "trust the FUZE preamble (prefixed), or pick by magic (auto)."
        ),
    )


def _run_duration(paths: list[str], mode: str, output_format: str) -> int:
    rows: list[dict[str, Any]] = []
    has_failure = False
    for raw_path in paths:
        try:
            duration_s = compute_duration_from_path(Path(raw_path), mode=mode)
        except FuzDurationError as exc:
            has_failure = True
            print(f"{raw_path}: {exc.kind}: {exc}", file=sys.stderr)
            rows.append({"path": raw_path, "error_kind": exc.kind, "error": exc.message})
            continue
        rows.append({"path": raw_path, "duration_s": duration_s})
        if output_format == "text":
            print(f"{raw_path}\t{duration_s:.6f}")

    if output_format == "json":
        print(_json_text({"files": rows}), end="")
    return 1 if has_failure else 0


def _run_info(path: str, mode: str) -> int:
    try:
        metadata = read_fuz_metadata(Path(path), mode=mode)
    except FuzDurationError as exc:
        print(f"{path}: {exc.kind}: {exc}", file=sys.stderr)
        return 1
    print(_json_text(metadata), end="")
    return 0


def _run_scan(args: argparse.Namespace) -> int:
    try:
        base = load_scan_config(Path(args.config)) if args.config else {}
        cfg = merge_scan_config(
            base,
            {
                "locator_mode": args.mode,
                "recursive": True if args.recursive else None,
                "include_hashes": True if args.hashes else None,
            },
        )
        report = build_scan_report(Path(args.root_dir), cfg)
        validate_scan_report(report)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.out:
        _write_json_file(Path(args.out), report)
    else:
        print(_json_text(report), end="")
    return 1 if args.strict and report["summary"]["error"] else 0


def _run_verify(args: argparse.Namespace) -> int:
    try:
        cfg = load_scan_config(Path(args.config)) if args.config else None
        manifest = load_verify_manifest(Path(args.manifest))
        rows = run_verify(
            manifest,
            tolerance_s=args.tolerance,
            locator_mode=args.mode,
            config=cfg,
        )
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    failures = 0
    for row in rows:
        if "error_kind" in row:
            status = "ERROR"
            detail = f"{row['error_kind']}: {row['error']}"
        else:
            status = "PASS" if row["passed"] else "FAIL"
            detail = (
                f"result={row['duration_s']:.3f} expected={row['expected_duration_s']:.3f} "
                f"delta={row['delta_s']:+.3f}"
            )
        if not row["passed"]:
            failures += 1
        print(f"{status}\t{row['path']}\t{detail}")

    print(f"{len(rows) - failures}/{len(rows)} passed")
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="fuzdur",
        description="Read xWMA voice file durations from their headers.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    duration_parser = subparsers.add_parser(
        "duration", help="Print the duration in seconds of one or more files."
    )
    duration_parser.add_argument("paths", nargs="+", help="FUZ or xWMA files.")
    _add_mode_argument(duration_parser, default=DEFAULT_LOCATOR_MODE)
    duration_parser.add_argument(
        "--format",
        dest="output_format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text).",
    )

    info_parser = subparsers.add_parser(
        "info", help="Print the decoded header metadata of a file as JSON."
    )
    info_parser.add_argument("path", help="FUZ or xWMA file.")
    _add_mode_argument(info_parser, default=DEFAULT_LOCATOR_MODE)

    scan_parser = subparsers.add_parser(
        "scan", help="Probe every voice file in a directory and write a report JSON."
    )
    scan_parser.add_argument("root_dir", help="Directory to scan.")
    scan_parser.add_argument(
        "--config",
        default=None,
        help="Optional scan config (YAML or JSON).",
    )
    _add_mode_argument(scan_parser, default=None)
    scan_parser.add_argument(
        "--recursive",
        action="store_true",
        help="Descend into subdirectories.",
    )
    scan_parser.add_argument(
        "--hashes",
        action="store_true",
        help="Include a SHA-256 digest for every file.",
    )
    scan_parser.add_argument("--out", default=None, help="Path to output report JSON.")
    scan_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when any file fails to parse.",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Compare measured durations with a manifest of expected values."
    )
    verify_parser.add_argument("manifest", help="Path to a verify manifest YAML.")
    verify_parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Override the manifest tolerance in seconds.",
    )
    verify_parser.add_argument(
        "--config",
        default=None,
        help="Optional scan config supplying tolerance_s and locator_mode defaults.",
    )
    _add_mode_argument(verify_parser, default=None)

    args = parser.parse_args(argv)

    if args.command == "duration":
        return _run_duration(args.paths, args.mode, args.output_format)
    if args.command == "info":
        return _run_info(args.path, args.mode)
    if args.command == "scan":
        return _run_scan(args)
    if args.command == "verify":
        return _run_verify(args)
    return 0
