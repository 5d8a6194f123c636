from __future__ import annotations

import struct
from typing import Union

from fuzdur.dsp.errors import OutOfBoundsError

BytesLike = Union[bytes, bytearray, memoryview]


def resolve_length(data: BytesLike, length: int | None) -> int:
    """Return the readable length, rejecting lengths the buffer cannot back."""
    available = len(data)
    if length is None:
        return available
    if isinstance(length, bool) or not isinstance(length, int):
        raise TypeError("length must be an integer.")
    if length < 0 or length > available:
        raise OutOfBoundsError(
            f"Declared length {length} is outside the buffer (size {available}).",
            offset=length,
        )
    return length


def _check_span(offset: int, width: int, length: int, what: str) -> None:
    if offset < 0 or offset + width > length:
        raise OutOfBoundsError(
            f"Not enough space in buffer for {what} at offset {offset} "
            f"(need {width} bytes, buffer length {length}).",
            offset=offset,
        )


def read_u16(data: BytesLike, offset: int, length: int | None = None) -> tuple[int, int]:
    """Read a little-endian u16 and return ``(value, offset + 2)``."""
    limit = resolve_length(data, length)
    _check_span(offset, 2, limit, "u16")
    (value,) = struct.unpack_from("<H", data, offset)
    return value, offset + 2


def read_u32(data: BytesLike, offset: int, length: int | None = None) -> tuple[int, int]:
    """Read a little-endian u32 as a low/high pair of u16 words."""
    limit = resolve_length(data, length)
    _check_span(offset, 4, limit, "u32")
    low, offset = read_u16(data, offset, limit)
    high, offset = read_u16(data, offset, limit)
    return low | (high << 16), offset


def read_tag(data: BytesLike, offset: int, length: int | None = None) -> tuple[bytes, int]:
    """Read a 4-byte chunk signature."""
    limit = resolve_length(data, length)
    _check_span(offset, 4, limit, "chunk tag")
    return bytes(data[offset : offset + 4]), offset + 4


class ByteCursor:
    """Forward-only read position over a borrowed buffer.

    Every read is bounds-checked against ``length`` before the offset
    moves, so a failed read leaves the cursor where it was.
    """

    def __init__(self, data: BytesLike, offset: int = 0, length: int | None = None) -> None:
        self._data = data
        self._length = resolve_length(data, length)
        if offset < 0 or offset > self._length:
            raise OutOfBoundsError(
                f"Start offset {offset} is outside the buffer (length {self._length}).",
                offset=offset,
            )
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def length(self) -> int:
        return self._length

    @property
    def remaining(self) -> int:
        return self._length - self._offset

    def read_u16(self) -> int:
        value, self._offset = read_u16(self._data, self._offset, self._length)
        return value

    def read_u32(self) -> int:
        value, self._offset = read_u32(self._data, self._offset, self._length)
        return value

    def read_tag(self) -> bytes:
        value, self._offset = read_tag(self._data, self._offset, self._length)
        return value

    def skip(self, count: int, what: str = "bytes") -> None:
        if count < 0:
            raise ValueError("skip count must be >= 0.")
        _check_span(self._offset, count, self._length, what)
        self._offset += count
