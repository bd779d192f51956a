from __future__ import annotations

from collections.abc import Sequence

from ._text import I32_MAX, I32_MIN, format_number, parse_float, parse_int
from .errors import ReplayParseError
from .events import LifeBarState


def dumps_life_bar(states: Sequence[LifeBarState] | None) -> str | None:
    """Encode the life bar curve; `None` stays `None` (written as an absent string)."""
    if states is None:
        return None
    return "".join(f"{int(state.time)}|{format_number(state.life)}," for state in states)


def loads_life_bar(text: str | None) -> list[LifeBarState] | None:
    if not text:
        return None

    if text.endswith(","):
        text = text[:-1]

    states: list[LifeBarState] = []
    for record in text.split(","):
        fields = record.split("|")
        if len(fields) != 2:
            raise ReplayParseError(f"invalid life bar state {record!r}: expected 'time|life'")
        time_raw, life_raw = fields
        states.append(
            LifeBarState(
                time=parse_int(time_raw, "life bar time", lo=I32_MIN, hi=I32_MAX),
                life=parse_float(life_raw, "life bar value"),
            )
        )
    return states
