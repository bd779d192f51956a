from __future__ import annotations

import io

import pytest

from osrcodec.binary import OsuString, Uleb128, build_field, parse_field
from osrcodec.errors import (
    InvalidStringMarkerError,
    ReplayError,
    ReplayFormatError,
    ReplayUnicodeError,
    UnexpectedEOFError,
)


def test_uleb128_encodes_small_and_multibyte_values() -> None:
    assert Uleb128.build(0) == b"\x00"
    assert Uleb128.build(127) == b"\x7f"
    assert Uleb128.build(300) == b"\xac\x02"
    assert Uleb128.parse(b"\xac\x02") == 300


def test_uleb128_rejects_runaway_continuation() -> None:
    with pytest.raises(ReplayFormatError, match="ULEB128 too long"):
        Uleb128.parse(b"\x80" * 10 + b"\x01")


def test_uleb128_rejects_negative_values() -> None:
    with pytest.raises(ReplayFormatError):
        Uleb128.build(-1)


def test_uleb128_short_read_is_eof() -> None:
    with pytest.raises(UnexpectedEOFError):
        parse_field(Uleb128, io.BytesIO(b"\x80\x80"), "length")


def test_osu_string_absent_and_present() -> None:
    assert OsuString.parse(b"\x00") is None
    assert OsuString.parse(b"\x0b\x00") == ""
    assert OsuString.parse(b"\x0b\x03abc") == "abc"
    # Length counts bytes, not characters.
    assert OsuString.parse(b"\x0b\x05na\xc3\xb1a") == "naña"
    assert OsuString.build("naña") == b"\x0b\x05na\xc3\xb1a"


def test_osu_string_build_writes_absent_marker_for_empty_values() -> None:
    assert OsuString.build(None) == b"\x00"
    assert OsuString.build("") == b"\x00"
    assert OsuString.build("abc") == b"\x0b\x03abc"


def test_osu_string_invalid_marker_carries_byte() -> None:
    with pytest.raises(InvalidStringMarkerError) as excinfo:
        OsuString.parse(b"\xff\x03abc")
    assert excinfo.value.marker == 0xFF
    assert "0xff" in str(excinfo.value)
    assert isinstance(excinfo.value, ReplayError)


def test_osu_string_rejects_invalid_utf8() -> None:
    with pytest.raises(ReplayUnicodeError):
        OsuString.parse(b"\x0b\x01\xff")


def test_osu_string_truncated_payload_reports_field() -> None:
    with pytest.raises(UnexpectedEOFError) as excinfo:
        parse_field(OsuString, io.BytesIO(b"\x0b\x05ab"), "username")
    assert excinfo.value.what == "username"
    assert "username" in str(excinfo.value)


def test_build_field_translates_range_errors() -> None:
    from osrcodec.binary import UInt16

    with pytest.raises(ReplayFormatError, match="max combo"):
        build_field(UInt16, 70_000, "max combo")
