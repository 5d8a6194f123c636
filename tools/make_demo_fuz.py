"""Generate deterministic demo FUZ and xWMA voice files."""

from __future__ import annotations

import argparse
import struct
from pathlib import Path
from typing import Sequence

WAVE_FORMAT_WMAUDIO2 = 0x0161


def build_xwma_riff(
    *,
    channels: int = 1,
    sample_rate: int = 22050,
    bits_per_sample: int = 16,
    packet_table: Sequence[int] = (0, 22050),
    format_code: int = WAVE_FORMAT_WMAUDIO2,
    byte_rate: int = 4000,
    block_align: int = 2230,
    payload: bytes = b"",
    form_type: bytes = b"XWMA",
    dpds_tag: bytes = b"dpds",
    dpds_size: int | None = None,
) -> bytes:
    """Return a RIFF/XWMA stream with adjacent fmt and dpds chunks.

    ``payload`` is appended as a ``data`` chunk; its bytes are never read
    when computing durations.
    """
    fmt_body = struct.pack(
        "<HHIIHHH",
        format_code,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        0,
    )
    table = struct.pack(f"<{len(packet_table)}I", *packet_table)
    declared = len(table) if dpds_size is None else dpds_size
    body = (
        form_type
        + b"fmt "
        + struct.pack("<I", 18)
        + fmt_body
        + dpds_tag
        + struct.pack("<I", declared)
        + table
        + b"data"
        + struct.pack("<I", len(payload))
        + payload
    )
    return b"RIFF" + struct.pack("<I", len(body)) + body


def build_fuz(riff: bytes, lip: bytes = b"", *, version: int = 1, magic: bytes = b"FUZE") -> bytes:
    """Wrap a RIFF stream in a FUZE preamble with an optional lip-sync prefix."""
    return magic + struct.pack("<II", version, len(lip)) + lip + riff


def demo_packet_table(duration_s: float, channels: int, sample_rate: int, bits: int) -> list[int]:
    """Cumulative decoded-byte table whose last entry matches ``duration_s``."""
    total = int(round(duration_s * sample_rate)) * channels * (bits // 8)
    steps = 4
    return [total * index // steps for index in range(1, steps + 1)]


DEMO_FILES: dict[str, dict[str, float | int]] = {
    "hello_mono.fuz": {"duration_s": 1.0, "channels": 1, "sample_rate": 22050, "lip": 64},
    "idle_stereo.fuz": {"duration_s": 2.5, "channels": 2, "sample_rate": 44100, "lip": 0},
    "quest_line.xwm": {"duration_s": 0.75, "channels": 1, "sample_rate": 44100, "lip": -1},
}


def make_demo_fuz(out_dir: Path) -> dict[str, float]:
    """Write the demo files and return their expected durations by name."""
    out_dir.mkdir(parents=True, exist_ok=True)
    expected: dict[str, float] = {}
    for name, entry in DEMO_FILES.items():
        channels = int(entry["channels"])
        sample_rate = int(entry["sample_rate"])
        riff = build_xwma_riff(
            channels=channels,
            sample_rate=sample_rate,
            packet_table=demo_packet_table(float(entry["duration_s"]), channels, sample_rate, 16),
            payload=bytes(range(32)),
        )
        lip_size = int(entry["lip"])
        if lip_size >= 0:
            data = build_fuz(riff, bytes((index * 7) & 0xFF for index in range(lip_size)))
        else:
            data = riff
        (out_dir / name).write_bytes(data)
        expected[name] = float(entry["duration_s"])
    return expected


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate deterministic demo voice files.")
    parser.add_argument("out_dir", help="Output directory for demo files.")
    args = parser.parse_args()

    make_demo_fuz(Path(args.out_dir))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
