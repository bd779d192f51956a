from __future__ import annotations


class ReplayError(ValueError):
    """Base class for every failure raised while reading or writing a replay."""


class UnexpectedEOFError(ReplayError):
    def __init__(self, what: str = "data") -> None:
        super().__init__(f"unexpected end of data while reading {what}")
        self.what = what


class InvalidStringMarkerError(ReplayError):
    def __init__(self, marker: int) -> None:
        super().__init__(f"invalid string marker: expected 0x00 or 0x0b, got {marker:#04x}")
        self.marker = int(marker)


class ReplayUnicodeError(ReplayError):
    pass


class ReplayParseError(ReplayError):
    pass


class ReplayCompressionError(ReplayError):
    pass


class PayloadDecodeError(ReplayError):
    pass


class ReplayFormatError(ReplayError):
    pass
