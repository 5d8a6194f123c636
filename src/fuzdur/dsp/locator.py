"""Find where the RIFF stream starts inside a voice file buffer.

Two strategies are supported. ``prefixed`` trusts the FUZE preamble: a
4-byte magic, a 4-byte container version and a 4-byte lip-sync length,
followed by that many bytes of lip data and then the RIFF stream.
``scan`` assumes nothing about the wrapper and returns the first
``RIFF`` signature in the buffer. ``auto`` picks ``prefixed`` when the
buffer starts with the FUZE magic and ``scan`` otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass

from fuzdur.dsp.errors import (
    NotContainerFormatError,
    OutOfBoundsError,
    SignatureNotFoundError,
)
from fuzdur.dsp.readers import BytesLike, ByteCursor, resolve_length

FUZ_MAGIC = b"FUZE"
FUZ_PREAMBLE_SIZE = 12
RIFF_TAG = b"RIFF"

LOCATOR_MODES: tuple[str, ...] = ("scan", "prefixed", "auto")
DEFAULT_LOCATOR_MODE = "scan"


@dataclass(frozen=True)
class RiffLocation:
    riff_offset: int
    mode: str
    lip_size: int | None = None
    container_version: int | None = None

    @property
    def body_offset(self) -> int:
        """Offset of the RIFF chunk-size field, just past the signature."""
        return self.riff_offset + len(RIFF_TAG)


def locate_prefixed(data: BytesLike, length: int | None = None) -> RiffLocation:
    cursor = ByteCursor(data, 0, length)
    magic = cursor.read_tag()
    if magic != FUZ_MAGIC:
        raise NotContainerFormatError(
            f"Not a FUZ file: expected magic {FUZ_MAGIC!r}, found {magic!r}.",
            offset=0,
        )
    container_version = cursor.read_u32()
    lip_size = cursor.read_u32()

    riff_offset = FUZ_PREAMBLE_SIZE + lip_size
    if riff_offset > cursor.length:
        raise OutOfBoundsError(
            f"Lip-sync prefix of {lip_size} bytes runs past the buffer end "
            f"(length {cursor.length}).",
            offset=riff_offset,
        )

    cursor.skip(lip_size, "lip-sync prefix")
    signature = cursor.read_tag()
    if signature != RIFF_TAG:
        raise SignatureNotFoundError(
            f"No RIFF section after the lip-sync prefix at offset {riff_offset}.",
            offset=riff_offset,
        )
    return RiffLocation(
        riff_offset=riff_offset,
        mode="prefixed",
        lip_size=lip_size,
        container_version=container_version,
    )


def locate_scan(data: BytesLike, length: int | None = None) -> RiffLocation:
    limit = resolve_length(data, length)
    haystack = data if isinstance(data, (bytes, bytearray)) else bytes(data)
    index = haystack.find(RIFF_TAG, 0, limit)
    if index < 0:
        raise SignatureNotFoundError(
            f"No RIFF signature found in {limit} bytes.",
        )
    return RiffLocation(riff_offset=index, mode="scan")


def locate_riff(
    data: BytesLike,
    length: int | None = None,
    *,
    mode: str = DEFAULT_LOCATOR_MODE,
) -> RiffLocation:
    if mode == "scan":
        return locate_scan(data, length)
    if mode == "prefixed":
        return locate_prefixed(data, length)
    if mode == "auto":
        limit = resolve_length(data, length)
        if limit >= len(FUZ_MAGIC) and bytes(data[: len(FUZ_MAGIC)]) == FUZ_MAGIC:
            return locate_prefixed(data, limit)
        return locate_scan(data, limit)
    raise ValueError(
        f"Unknown locator mode: {mode!r}. Known modes: {', '.join(LOCATOR_MODES)}"
    )
