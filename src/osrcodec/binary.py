from __future__ import annotations

import sys
from typing import IO, Any

from construct import Construct, ConstructError, Int8ul, Int16ul, Int32ul, Int64sl, StreamError
from construct.core import stream_read, stream_write

from .errors import InvalidStringMarkerError, ReplayFormatError, ReplayUnicodeError, UnexpectedEOFError

STRING_ABSENT = 0x00
STRING_PRESENT = 0x0B

# 9 continuation bytes already cover 63 bits; a tenth one overflows a u64.
_ULEB128_MAX_SHIFT = 64

__all__ = [
    "Byte",
    "OsuString",
    "STRING_ABSENT",
    "STRING_PRESENT",
    "UInt16",
    "UInt32",
    "Int64",
    "Uleb128",
    "build_field",
    "parse_field",
]

Byte = Int8ul
UInt16 = Int16ul
UInt32 = Int32ul
Int64 = Int64sl


class _Uleb128(Construct):
    """Unsigned LEB128 varint with a hard cap on the number of groups."""

    def _parse(self, stream: IO[bytes], context: Any, path: str) -> int:
        result = 0
        shift = 0
        while True:
            byte = stream_read(stream, 1, path)[0]
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7
            if shift >= _ULEB128_MAX_SHIFT:
                raise ReplayFormatError("ULEB128 too long")

    def _build(self, obj: int, stream: IO[bytes], context: Any, path: str) -> int:
        value = int(obj)
        if value < 0:
            raise ReplayFormatError(f"ULEB128 cannot encode negative value {value}")
        out = bytearray()
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                out.append(byte | 0x80)
            else:
                out.append(byte)
                break
        stream_write(stream, bytes(out), len(out), path)
        return obj


class _OsuString(Construct):
    """osu! string: marker byte, then (if present) a ULEB128 byte length and UTF-8 data.

    Parses to `None` for the absent marker. Builds `None` and `""` as absent.
    """

    def _parse(self, stream: IO[bytes], context: Any, path: str) -> str | None:
        marker = stream_read(stream, 1, path)[0]
        if marker == STRING_ABSENT:
            return None
        if marker != STRING_PRESENT:
            raise InvalidStringMarkerError(marker)
        length = Uleb128._parsereport(stream, context, path)
        if length > sys.maxsize:
            raise StreamError(f"string length {length} exceeds any readable buffer", path=path)
        raw = stream_read(stream, length, path)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ReplayUnicodeError(f"string is not valid UTF-8: {exc}") from exc

    def _build(self, obj: str | None, stream: IO[bytes], context: Any, path: str) -> str | None:
        if not obj:
            stream_write(stream, bytes([STRING_ABSENT]), 1, path)
            return obj
        encoded = str(obj).encode("utf-8")
        stream_write(stream, bytes([STRING_PRESENT]), 1, path)
        Uleb128._build(len(encoded), stream, context, path)
        stream_write(stream, encoded, len(encoded), path)
        return obj


Uleb128 = _Uleb128()
OsuString = _OsuString()


def parse_field(con: Construct, stream: IO[bytes], what: str) -> Any:
    """Parse `con` from `stream`, reporting a short read as `UnexpectedEOFError`."""
    try:
        return con.parse_stream(stream)
    except StreamError as exc:
        raise UnexpectedEOFError(what) from exc
    except ConstructError as exc:
        raise ReplayFormatError(f"failed to parse {what}: {exc}") from exc


def build_field(con: Construct, obj: Any, what: str) -> bytes:
    try:
        return con.build(obj)
    except ConstructError as exc:
        raise ReplayFormatError(f"cannot encode {what}: {exc}") from exc
