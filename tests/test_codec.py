from __future__ import annotations

import datetime as dt
import io
import struct
from pathlib import Path

import pytest

from osrcodec import (
    GameMode,
    InvalidStringMarkerError,
    Key,
    KeyMania,
    LifeBarState,
    Mod,
    Replay,
    ReplayCompressionError,
    ReplayEventMania,
    ReplayEventOsu,
    ReplayFormatError,
    UnexpectedEOFError,
    dump,
    dumps,
    dumps_uncompressed,
    load,
    loads,
)
from osrcodec.timestamps import ReplayTimestampWarning, datetime_to_ticks

PLAYED = dt.datetime(2023, 11, 4, 18, 22, 7, 125000, tzinfo=dt.timezone.utc)

# mode (1) + game_version (4)
BEATMAP_HASH_OFFSET = 5


def _std_replay(**overrides) -> Replay:  # noqa: ANN003
    fields = dict(
        mode=GameMode.STD,
        game_version=20231104,
        beatmap_hash="d41d8cd98f00b204e9800998ecf8427e",
        username="mrekk",
        replay_hash="0cc175b9c0f1b6a831c399e269772661",
        count_300=1200,
        count_100=31,
        count_50=2,
        count_geki=240,
        count_katu=20,
        count_miss=1,
        score=98_765_432,
        max_combo=1873,
        perfect=False,
        mods=Mod.HIDDEN | Mod.DOUBLE_TIME,
        life_bar_graph=[LifeBarState(time=0, life=1.0), LifeBarState(time=1500, life=0.8)],
        timestamp=PLAYED,
        replay_data=[
            ReplayEventOsu(time_delta=0, x=256.0, y=-500.0),
            ReplayEventOsu(time_delta=16, x=100.5, y=200.25, keys=Key.M1 | Key.K1),
            ReplayEventOsu(time_delta=17, x=101.0, y=199.0, keys=Key.M1 | Key.K1),
            ReplayEventOsu(time_delta=16, x=110.75, y=180.0),
        ],
        replay_id=4_123_456_789_012,
        rng_seed=1_234_567,
    )
    fields.update(overrides)
    return Replay(**fields)


def test_replay_roundtrip() -> None:
    # The leading 256|-500 record is a skip frame and does not survive a decode.
    replay = _std_replay()
    decoded = loads(dumps(replay))

    expected = _std_replay(replay_data=replay.replay_data[1:])
    assert decoded == expected
    assert decoded.mods.acronyms == "HDDT"
    assert decoded.duration_ms == 49


def test_replay_roundtrip_is_byte_stable() -> None:
    replay = _std_replay(replay_data=_std_replay().replay_data[1:])
    raw = dumps(replay)
    assert dumps(loads(raw)) == raw


def test_mania_replay_roundtrip_without_optional_fields() -> None:
    replay = Replay(
        mode=GameMode.MANIA,
        game_version=20150101,
        username="",
        mods=Mod.KEY7,
        timestamp=PLAYED,
        replay_data=[
            ReplayEventMania(time_delta=5, keys=KeyMania.K1),
            ReplayEventMania(time_delta=40, keys=KeyMania(0)),
        ],
    )
    decoded = loads(dumps(replay))
    assert decoded == replay
    assert decoded.life_bar_graph is None
    assert decoded.rng_seed is None
    assert decoded.replay_id == 0
    assert decoded.username == ""


def test_empty_life_bar_decodes_as_none() -> None:
    replay = _std_replay(life_bar_graph=[])
    assert loads(dumps(replay)).life_bar_graph is None


def test_unknown_mode_byte_decodes_as_std() -> None:
    raw = bytearray(dumps(_std_replay()))
    raw[0] = 255
    decoded = loads(bytes(raw))
    assert decoded.mode is GameMode.STD
    assert len(decoded.replay_data) == 3


def test_invalid_string_marker() -> None:
    raw = bytearray(dumps(_std_replay()))
    assert raw[BEATMAP_HASH_OFFSET] == 0x0B
    raw[BEATMAP_HASH_OFFSET] = 0xFF
    with pytest.raises(InvalidStringMarkerError) as excinfo:
        loads(bytes(raw))
    assert excinfo.value.marker == 0xFF


def test_legacy_four_byte_replay_id() -> None:
    raw = dumps(_std_replay(replay_id=0xDEADBEEF))
    decoded = loads(raw[:-4])
    assert decoded.replay_id == 0xDEADBEEF


def test_replay_id_needs_at_least_four_bytes() -> None:
    raw = dumps(_std_replay())
    with pytest.raises(UnexpectedEOFError):
        loads(raw[:-6])


def test_trailing_bytes_after_replay_id_are_ignored() -> None:
    raw = dumps(_std_replay())
    assert loads(raw + b"\x01\x02\x03").replay_id == 4_123_456_789_012


def test_truncated_header_is_eof() -> None:
    raw = dumps(_std_replay())
    with pytest.raises(UnexpectedEOFError):
        loads(raw[:40])
    with pytest.raises(UnexpectedEOFError):
        loads(b"")


def test_truncated_frame_block_is_eof() -> None:
    raw = dumps(_std_replay())
    with pytest.raises(UnexpectedEOFError):
        loads(raw[:-20])


def test_uncompressed_variant_is_rejected() -> None:
    replay = _std_replay()
    raw = dumps_uncompressed(replay)
    assert b"16|100.5|200.25|5," in raw
    with pytest.raises(ReplayCompressionError):
        loads(raw)


def test_unrepresentable_timestamp() -> None:
    raw = dumps(_std_replay())
    stored = struct.pack("<q", datetime_to_ticks(PLAYED))
    assert raw.count(stored) == 1
    broken = raw.replace(stored, struct.pack("<q", -1))

    with pytest.warns(ReplayTimestampWarning):
        decoded = loads(broken)
    assert decoded.timestamp != PLAYED

    with pytest.raises(ReplayFormatError):
        loads(broken, strict_timestamps=True)


def test_encode_rejects_mismatched_event_mode() -> None:
    replay = _std_replay(mode=GameMode.TAIKO)
    with pytest.raises(ReplayFormatError, match="osu!std frame"):
        dumps(replay)


def test_encode_rejects_out_of_range_fields() -> None:
    with pytest.raises(ReplayFormatError):
        dumps(_std_replay(count_300=70_000))
    with pytest.raises(ReplayFormatError):
        dumps(_std_replay(score=-1))


def test_preset_choice_does_not_change_decoded_replay(monkeypatch: pytest.MonkeyPatch) -> None:
    replay = _std_replay()
    fast = dumps(replay, preset=0)
    monkeypatch.setenv("OSRCODEC_LZMA_PRESET", "9")
    assert loads(fast) == loads(dumps(replay))


def test_load_and_dump_paths_and_file_objects(tmp_path: Path) -> None:
    replay = _std_replay()
    path = tmp_path / "play.osr"
    dump(replay, path)
    from_path = load(path)
    from_str = load(str(path))
    assert from_path == from_str

    buf = io.BytesIO()
    dump(replay, buf)
    assert not buf.closed
    buf.seek(0)
    assert load(buf) == from_path


def test_load_missing_file_raises_oserror(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load(tmp_path / "missing.osr")


def test_naive_timestamp_is_stored_as_utc() -> None:
    naive = dt.datetime(2020, 1, 1, 12, 30)
    replay = _std_replay(timestamp=naive)
    assert replay.timestamp == naive.replace(tzinfo=dt.timezone.utc)
    assert loads(dumps(replay)) == _std_replay(timestamp=naive, replay_data=replay.replay_data[1:])
