from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from ._text import I32_MAX, I32_MIN, U32_MAX, format_number, parse_float, parse_int
from .flags import Key, KeyMania, KeyTaiko
from .modes import GameMode


@dataclass(frozen=True, slots=True)
class ReplayEventOsu:
    time_delta: int
    x: float
    y: float
    keys: Key = Key(0)


@dataclass(frozen=True, slots=True)
class ReplayEventTaiko:
    time_delta: int
    x: int
    keys: KeyTaiko = KeyTaiko(0)


@dataclass(frozen=True, slots=True)
class ReplayEventCatch:
    time_delta: int
    x: float
    dashing: bool = False


@dataclass(frozen=True, slots=True)
class ReplayEventMania:
    time_delta: int
    keys: KeyMania = KeyMania(0)


ReplayEvent: TypeAlias = ReplayEventOsu | ReplayEventTaiko | ReplayEventCatch | ReplayEventMania

EVENT_TYPES: dict[GameMode, type] = {
    GameMode.STD: ReplayEventOsu,
    GameMode.TAIKO: ReplayEventTaiko,
    GameMode.CATCH: ReplayEventCatch,
    GameMode.MANIA: ReplayEventMania,
}


@dataclass(frozen=True, slots=True)
class LifeBarState:
    time: int
    life: float


def event_from_fields(mode: GameMode, time_delta: int, x: str, y: str, z: str) -> ReplayEvent:
    """Build the frame variant for `mode` from the three payload fields of a record.

    Field meaning by mode:
      STD:   x, y, key bits
      TAIKO: x (int), unused, key bits
      CATCH: x, unused, dashing (1 = dashing)
      MANIA: key bits, unused, unused
    """

    if mode == GameMode.STD:
        return ReplayEventOsu(
            time_delta=time_delta,
            x=parse_float(x, "x coordinate"),
            y=parse_float(y, "y coordinate"),
            keys=Key(parse_int(z, "keys", lo=0, hi=U32_MAX)),
        )
    if mode == GameMode.TAIKO:
        return ReplayEventTaiko(
            time_delta=time_delta,
            x=parse_int(x, "x coordinate", lo=I32_MIN, hi=I32_MAX),
            keys=KeyTaiko(parse_int(z, "keys", lo=0, hi=U32_MAX)),
        )
    if mode == GameMode.CATCH:
        return ReplayEventCatch(
            time_delta=time_delta,
            x=parse_float(x, "x coordinate"),
            dashing=parse_int(z, "keys", lo=0, hi=U32_MAX) == 1,
        )
    return ReplayEventMania(
        time_delta=time_delta,
        keys=KeyMania(parse_int(x, "keys", lo=0, hi=U32_MAX)),
    )


def event_to_fields(event: ReplayEvent) -> tuple[str, str, str]:
    if isinstance(event, ReplayEventOsu):
        return format_number(event.x), format_number(event.y), str(int(event.keys))
    if isinstance(event, ReplayEventTaiko):
        return str(int(event.x)), "0", str(int(event.keys))
    if isinstance(event, ReplayEventCatch):
        return format_number(event.x), "0", "1" if event.dashing else "0"
    if isinstance(event, ReplayEventMania):
        return str(int(event.keys)), "0", "0"
    raise TypeError(f"unsupported event type: {type(event).__name__}")


def event_mode(event: ReplayEvent) -> GameMode:
    for mode, event_type in EVENT_TYPES.items():
        if isinstance(event, event_type):
            return mode
    raise TypeError(f"unsupported event type: {type(event).__name__}")
