from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

from fuzdur.dsp.duration import bytes_per_frame, duration_from_header
from fuzdur.dsp.errors import FuzDurationError, FuzIOError
from fuzdur.dsp.locator import DEFAULT_LOCATOR_MODE, locate_riff
from fuzdur.dsp.readers import BytesLike, resolve_length
from fuzdur.dsp.xwma import decode_xwma_header


@dataclass(frozen=True)
class DurationResult:
    """Duration or error kind for one input, never both."""

    duration_s: float | None = None
    error_kind: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None


def sha256_file(path: Path) -> str:
    """Return the SHA-256 hex digest for a file."""
    digest = hashlib.sha256()
    try:
        with path.open("rb") as handle:
            for chunk in iter(lambda: handle.read(1024 * 1024), b""):
                digest.update(chunk)
    except OSError as exc:
        raise FuzIOError(f"Failed to read file '{path}': {exc}") from exc
    return digest.hexdigest()


def _read_path_bytes(path: Path) -> bytes:
    try:
        with Path(path).open("rb") as handle:
            return handle.read()
    except OSError as exc:
        raise FuzIOError(f"Unable to open file '{path}': {exc}") from exc


def _read_stream_bytes(source: BinaryIO) -> bytes:
    try:
        payload = source.read()
    except OSError as exc:
        raise FuzIOError(f"Could not read stream: {exc}") from exc
    if not isinstance(payload, (bytes, bytearray)):
        raise FuzIOError(
            f"Stream returned {type(payload).__name__}; open it in binary mode."
        )
    return bytes(payload)


def compute_duration_from_buffer(
    data: BytesLike,
    length: int | None = None,
    *,
    mode: str = DEFAULT_LOCATOR_MODE,
) -> float:
    """Return the xWMA duration in seconds for an in-memory buffer."""
    limit = resolve_length(data, length)
    location = locate_riff(data, limit, mode=mode)
    header = decode_xwma_header(data, location.body_offset, limit)
    return duration_from_header(header)


def compute_duration_from_stream(
    source: BinaryIO,
    *,
    mode: str = DEFAULT_LOCATOR_MODE,
) -> float:
    """Read every remaining byte from a binary stream and return its duration."""
    return compute_duration_from_buffer(_read_stream_bytes(source), mode=mode)


def compute_duration_from_path(
    path: Path | str,
    *,
    mode: str = DEFAULT_LOCATOR_MODE,
) -> float:
    """Read a voice file from disk and return its duration."""
    return compute_duration_from_buffer(_read_path_bytes(Path(path)), mode=mode)


def probe_duration(
    data: BytesLike,
    length: int | None = None,
    *,
    mode: str = DEFAULT_LOCATOR_MODE,
) -> DurationResult:
    try:
        duration_s = compute_duration_from_buffer(data, length, mode=mode)
    except FuzDurationError as exc:
        return DurationResult(error_kind=exc.kind, error_message=exc.message)
    return DurationResult(duration_s=duration_s)


def describe_buffer(
    data: BytesLike,
    length: int | None = None,
    *,
    mode: str = DEFAULT_LOCATOR_MODE,
) -> dict[str, Any]:
    """Locate and decode the xWMA header and return its metadata."""
    limit = resolve_length(data, length)
    location = locate_riff(data, limit, mode=mode)
    header = decode_xwma_header(data, location.body_offset, limit)
    duration_s = duration_from_header(header)

    return {
        "container": "fuz" if location.lip_size is not None else "riff",
        "locator_mode": location.mode,
        "container_version": location.container_version,
        "lip_bytes": location.lip_size,
        "riff_offset": location.riff_offset,
        "riff_size": header.riff_size,
        "format_code": header.format_code,
        "channels": header.channel_count,
        "sample_rate_hz": header.samples_per_second,
        "bits_per_sample": header.bits_per_sample,
        "byte_rate": header.avg_bytes_per_second,
        "block_align": header.block_align,
        "packet_count": header.packet_count,
        "decoded_bytes": header.decoded_byte_count,
        "num_frames": header.decoded_byte_count // bytes_per_frame(header),
        "duration_s": duration_s,
    }


def read_fuz_metadata(path: Path | str, *, mode: str = DEFAULT_LOCATOR_MODE) -> dict[str, Any]:
    """Parse a voice file and return basic xWMA metadata."""
    return describe_buffer(_read_path_bytes(Path(path)), mode=mode)
