from __future__ import annotations

from dataclasses import dataclass

from fuzdur.dsp.errors import (
    InvalidPacketTableError,
    OutOfBoundsError,
    PacketTableMissingError,
    UnsupportedFormatError,
)
from fuzdur.dsp.readers import BytesLike, ByteCursor

XWMA_TAG = b"XWMA"
DPDS_TAG = b"dpds"
PACKET_ENTRY_SIZE = 4

WAVE_FORMAT_WMAUDIO2 = 0x0161


@dataclass(frozen=True)
class XwmaHeader:
    """Header fields of a RIFF/XWMA stream up to the end of the dpds chunk."""

    channel_count: int
    samples_per_second: int
    bits_per_sample: int
    packet_table_byte_length: int
    packet_table: tuple[int, ...]
    riff_size: int = 0
    format_code: int = 0
    avg_bytes_per_second: int = 0
    block_align: int = 0
    ext_size: int = 0

    @property
    def packet_count(self) -> int:
        return len(self.packet_table)

    @property
    def decoded_byte_count(self) -> int:
        """Cumulative decoded size recorded in the last dpds entry."""
        if not self.packet_table:
            raise InvalidPacketTableError("Packet table is empty.")
        return self.packet_table[-1]


def decode_xwma_header(
    data: BytesLike,
    body_offset: int,
    length: int | None = None,
) -> XwmaHeader:
    """Decode the XWMA header starting at the RIFF chunk-size field.

    The fmt and dpds chunks must be adjacent; any other chunk between
    them is reported as a missing packet table rather than skipped.
    """
    cursor = ByteCursor(data, body_offset, length)
    riff_size = cursor.read_u32()

    form_type = cursor.read_tag()
    if form_type != XWMA_TAG:
        raise UnsupportedFormatError(
            f"File type not XWMA: found {form_type!r}.",
            offset=cursor.offset - 4,
        )

    # fmt chunk id and declared size are not checked; the layout is fixed.
    cursor.read_tag()
    cursor.read_u32()

    format_code = cursor.read_u16()
    channel_count = cursor.read_u16()
    samples_per_second = cursor.read_u32()
    avg_bytes_per_second = cursor.read_u32()
    block_align = cursor.read_u16()
    bits_per_sample = cursor.read_u16()
    ext_size = cursor.read_u16()

    dpds_offset = cursor.offset
    dpds_tag = cursor.read_tag()
    if dpds_tag != DPDS_TAG:
        raise PacketTableMissingError(
            f"DPDS data not present: found {dpds_tag!r} at offset {dpds_offset}.",
            offset=dpds_offset,
        )

    table_byte_length = cursor.read_u32()
    if table_byte_length == 0:
        raise InvalidPacketTableError(
            "Packet table is empty (dpds size 0).",
            offset=dpds_offset,
        )
    if table_byte_length % PACKET_ENTRY_SIZE:
        raise InvalidPacketTableError(
            f"Packet table size {table_byte_length} is not a multiple of "
            f"{PACKET_ENTRY_SIZE}.",
            offset=dpds_offset,
        )
    if table_byte_length > cursor.remaining:
        raise OutOfBoundsError(
            f"Packet table of {table_byte_length} bytes runs past the buffer end "
            f"({cursor.remaining} bytes remaining).",
            offset=cursor.offset,
        )

    entry_count = table_byte_length // PACKET_ENTRY_SIZE
    packet_table = tuple(cursor.read_u32() for _ in range(entry_count))

    return XwmaHeader(
        channel_count=channel_count,
        samples_per_second=samples_per_second,
        bits_per_sample=bits_per_sample,
        packet_table_byte_length=table_byte_length,
        packet_table=packet_table,
        riff_size=riff_size,
        format_code=format_code,
        avg_bytes_per_second=avg_bytes_per_second,
        block_align=block_align,
        ext_size=ext_size,
    )
