from __future__ import annotations

from fuzdur.dsp.errors import DivisionByZeroError, InvalidPacketTableError
from fuzdur.dsp.xwma import XwmaHeader


def bytes_per_frame(header: XwmaHeader) -> int:
    return header.channel_count * (header.bits_per_sample // 8)


def duration_from_header(header: XwmaHeader) -> float:
    """Return the decoded duration in seconds from the last dpds entry."""
    if not header.packet_table:
        raise InvalidPacketTableError("Packet table is empty.")

    total_bytes = header.packet_table[-1]
    frame_bytes = bytes_per_frame(header)
    if frame_bytes == 0:
        raise DivisionByZeroError(
            f"Bytes per frame is 0 (channels={header.channel_count}, "
            f"bits_per_sample={header.bits_per_sample})."
        )
    if header.samples_per_second == 0:
        raise DivisionByZeroError("Sample rate is 0.")

    num_frames = total_bytes / frame_bytes
    return num_frames / header.samples_per_second
