"""Error kinds raised while locating and decoding xWMA headers."""

from __future__ import annotations


class FuzDurationError(ValueError):
    """Base class for every failure raised by fuzdur.

    ``kind`` is a stable identifier for the failure category so callers
    and reports can branch on it without matching message text.
    """

    kind = "Error"

    def __init__(self, message: str = "", *, offset: int | None = None) -> None:
        self.message = message
        self.offset = offset
        super().__init__(message)


class FuzIOError(FuzDurationError):
    """The byte source could not be opened or fully read."""

    kind = "IoError"


class OutOfBoundsError(FuzDurationError):
    """A field read would run past the end of the buffer."""

    kind = "OutOfBounds"


class NotContainerFormatError(FuzDurationError):
    """The outer FUZE magic does not match."""

    kind = "NotContainerFormat"


class SignatureNotFoundError(FuzDurationError):
    """No RIFF signature where one was expected."""

    kind = "SignatureNotFound"


class UnsupportedFormatError(FuzDurationError):
    """The RIFF form type is not XWMA."""

    kind = "UnsupportedFormat"


class PacketTableMissingError(FuzDurationError):
    """The dpds chunk does not follow the fmt chunk."""

    kind = "PacketTableMissing"


class InvalidPacketTableError(FuzDurationError):
    """The dpds chunk is empty or not a whole number of entries."""

    kind = "InvalidPacketTable"


class DivisionByZeroError(FuzDurationError):
    """Channels, bits per sample or sample rate make the duration undefined."""

    kind = "DivisionByZero"


ERROR_KINDS: tuple[str, ...] = (
    FuzIOError.kind,
    OutOfBoundsError.kind,
    NotContainerFormatError.kind,
    SignatureNotFoundError.kind,
    UnsupportedFormatError.kind,
    PacketTableMissingError.kind,
    InvalidPacketTableError.kind,
    DivisionByZeroError.kind,
)
