from __future__ import annotations

from enum import IntEnum


class GameMode(IntEnum):
    STD = 0
    TAIKO = 1
    CATCH = 2
    MANIA = 3

    @classmethod
    def from_value(cls, value: int) -> GameMode:
        """Map a stored mode byte to a mode; unknown values are read as STD."""
        try:
            return cls(int(value))
        except ValueError:
            return cls.STD

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]


_MODE_LABELS = {
    GameMode.STD: "osu!std",
    GameMode.TAIKO: "osu!taiko",
    GameMode.CATCH: "osu!catch",
    GameMode.MANIA: "osu!mania",
}
