"""Playback duration of xWMA voice files, read from their header alone."""

from fuzdur.dsp.errors import (
    DivisionByZeroError,
    FuzDurationError,
    FuzIOError,
    InvalidPacketTableError,
    NotContainerFormatError,
    OutOfBoundsError,
    PacketTableMissingError,
    SignatureNotFoundError,
    UnsupportedFormatError,
)
from fuzdur.dsp.io import (
    DurationResult,
    compute_duration_from_buffer,
    compute_duration_from_path,
    compute_duration_from_stream,
    describe_buffer,
    probe_duration,
    read_fuz_metadata,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DivisionByZeroError",
    "DurationResult",
    "FuzDurationError",
    "FuzIOError",
    "InvalidPacketTableError",
    "NotContainerFormatError",
    "OutOfBoundsError",
    "PacketTableMissingError",
    "SignatureNotFoundError",
    "UnsupportedFormatError",
    "compute_duration_from_buffer",
    "compute_duration_from_path",
    "compute_duration_from_stream",
    "describe_buffer",
    "probe_duration",
    "read_fuz_metadata",
]
