"""Read and write complete `.osr` records.

Layout (little-endian):

    mode            u8
    game_version    u32
    beatmap_hash    osu! string
    username        osu! string
    replay_hash     osu! string
    count_300..miss 6 x u16   (300, 100, 50, geki, katu, miss)
    score           u32
    max_combo       u16
    perfect         u8
    mods            u32
    life_bar        osu! string   ("time|life," records)
    timestamp       i64           (100ns ticks since 0001-01-01)
    frames          u32 length + LZMA block ("w|x|y|z," records)
    replay_id       i64           (u32 in old replays)
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import IO, BinaryIO

from construct import Flag, GreedyBytes, Prefixed, StreamError, Struct

from .binary import Byte, Int64, OsuString, UInt16, UInt32, build_field, parse_field
from .compression import compress_frames, decompress_frames
from .config import PackOptions
from .errors import ReplayFormatError, UnexpectedEOFError
from .events import event_mode
from .flags import Mod
from .frames import dumps_frames, loads_frames
from .lifebar import dumps_life_bar, loads_life_bar
from .modes import GameMode
from .replay import Replay
from .timestamps import datetime_to_ticks, ticks_to_datetime

logger = logging.getLogger(__name__)

_HEADER = Struct(
    "mode" / Byte,
    "game_version" / UInt32,
    "beatmap_hash" / OsuString,
    "username" / OsuString,
    "replay_hash" / OsuString,
    "count_300" / UInt16,
    "count_100" / UInt16,
    "count_50" / UInt16,
    "count_geki" / UInt16,
    "count_katu" / UInt16,
    "count_miss" / UInt16,
    "score" / UInt32,
    "max_combo" / UInt16,
    "perfect" / Flag,
    "mods" / UInt32,
    "life_bar" / OsuString,
    "timestamp" / Int64,
)

_FRAME_BLOCK = Prefixed(UInt32, GreedyBytes)

_REPLAY_ID = Int64
_LEGACY_REPLAY_ID = UInt32


def _read_replay_id(stream: IO[bytes]) -> int:
    # Old replays end with a u32 id. Buffer what is left and try the i64 layout first.
    tail = stream.read(_REPLAY_ID.sizeof())
    try:
        return int(_REPLAY_ID.parse(tail))
    except StreamError:
        pass
    try:
        replay_id = int(_LEGACY_REPLAY_ID.parse(tail))
    except StreamError as exc:
        raise UnexpectedEOFError("replay id") from exc
    logger.debug("replay id read with legacy 32-bit width: %d", replay_id)
    return replay_id


def _read_replay(stream: IO[bytes], *, strict_timestamps: bool) -> Replay:
    header = parse_field(_HEADER, stream, "replay header")
    mode = GameMode.from_value(header.mode)
    if mode != header.mode:
        logger.debug("unknown game mode byte %d read as %s", header.mode, mode.name)

    life_bar_graph = loads_life_bar(header.life_bar)
    timestamp = ticks_to_datetime(header.timestamp, strict=strict_timestamps)

    block = parse_field(_FRAME_BLOCK, stream, "frame block")
    replay_data, rng_seed = loads_frames(decompress_frames(block), mode)

    replay_id = _read_replay_id(stream)

    return Replay(
        mode=mode,
        game_version=int(header.game_version),
        beatmap_hash=header.beatmap_hash or "",
        username=header.username or "",
        replay_hash=header.replay_hash or "",
        count_300=int(header.count_300),
        count_100=int(header.count_100),
        count_50=int(header.count_50),
        count_geki=int(header.count_geki),
        count_katu=int(header.count_katu),
        count_miss=int(header.count_miss),
        score=int(header.score),
        max_combo=int(header.max_combo),
        perfect=bool(header.perfect),
        mods=Mod(int(header.mods)),
        life_bar_graph=life_bar_graph,
        timestamp=timestamp,
        replay_data=replay_data,
        replay_id=int(replay_id),
        rng_seed=rng_seed,
    )


def loads(data: bytes, *, strict_timestamps: bool = False) -> Replay:
    """Decode a complete `.osr` record.

    With `strict_timestamps=True` an unrepresentable timestamp raises
    `ReplayFormatError` instead of being replaced by the current time.
    """
    return _read_replay(io.BytesIO(data), strict_timestamps=strict_timestamps)


def _open_binary(source: str | Path | BinaryIO, mode: str) -> tuple[BinaryIO, bool]:
    if hasattr(source, "read") or hasattr(source, "write"):
        return source, False  # type: ignore[return-value]
    return open(Path(source), mode), True


def load(source: str | Path | BinaryIO, *, strict_timestamps: bool = False) -> Replay:
    f, should_close = _open_binary(source, "rb")
    try:
        data = f.read()
    finally:
        if should_close:
            f.close()
    return loads(data, strict_timestamps=strict_timestamps)


def _check_modes(replay: Replay) -> GameMode:
    try:
        mode = GameMode(int(replay.mode))
    except ValueError as exc:
        raise ReplayFormatError(f"unsupported game mode: {replay.mode!r}") from exc
    for idx, event in enumerate(replay.replay_data):
        try:
            got = event_mode(event)
        except TypeError as exc:
            raise ReplayFormatError(f"replay event {idx}: {exc}") from exc
        if got != mode:
            raise ReplayFormatError(
                f"replay event {idx} is a {got.label} frame but the replay mode is {mode.label}"
            )
    return mode


def _write_replay(replay: Replay, options: PackOptions) -> bytes:
    mode = _check_modes(replay)

    header_raw = {
        "mode": int(mode),
        "game_version": int(replay.game_version),
        "beatmap_hash": replay.beatmap_hash,
        "username": replay.username,
        "replay_hash": replay.replay_hash,
        "count_300": int(replay.count_300),
        "count_100": int(replay.count_100),
        "count_50": int(replay.count_50),
        "count_geki": int(replay.count_geki),
        "count_katu": int(replay.count_katu),
        "count_miss": int(replay.count_miss),
        "score": int(replay.score),
        "max_combo": int(replay.max_combo),
        "perfect": bool(replay.perfect),
        "mods": int(replay.mods),
        "life_bar": dumps_life_bar(replay.life_bar_graph),
        "timestamp": datetime_to_ticks(replay.timestamp),
    }

    frames_text = dumps_frames(replay.replay_data, replay.rng_seed)
    if options.compress:
        block = compress_frames(frames_text, preset=options.preset)
    else:
        block = frames_text.encode("utf-8")

    out = bytearray()
    out += build_field(_HEADER, header_raw, "replay header")
    out += build_field(_FRAME_BLOCK, block, "frame block")
    out += build_field(_REPLAY_ID, int(replay.replay_id), "replay id")
    return bytes(out)


def dumps(replay: Replay, *, preset: int | None = None) -> bytes:
    """Encode `replay` as a `.osr` record.

    `preset` is the LZMA preset (0-9); defaults to `OSRCODEC_LZMA_PRESET` or 6.
    """
    options = PackOptions.from_env() if preset is None else PackOptions(preset=int(preset))
    return _write_replay(replay, options)


def dumps_uncompressed(replay: Replay) -> bytes:
    """Encode with the frame block stored as raw text instead of LZMA.

    Meant for inspecting frame data with a hex viewer; `loads` rejects the result.
    """
    return _write_replay(replay, PackOptions(compress=False))


def dump(replay: Replay, target: str | Path | BinaryIO, *, preset: int | None = None) -> None:
    data = dumps(replay, preset=preset)
    f, should_close = _open_binary(target, "wb")
    try:
        f.write(data)
    finally:
        if should_close:
            f.close()
