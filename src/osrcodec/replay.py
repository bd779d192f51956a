from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field

from .events import LifeBarState, ReplayEvent
from .flags import Mod
from .modes import GameMode


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass(slots=True)
class Replay:
    """A decoded `.osr` replay.

    Field order follows the on-disk layout. `replay_id` is 0 for unsubmitted
    plays and `rng_seed` is `None` for replays written before seeds were stored.
    """

    mode: GameMode
    game_version: int
    beatmap_hash: str = ""
    username: str = ""
    replay_hash: str = ""
    count_300: int = 0
    count_100: int = 0
    count_50: int = 0
    count_geki: int = 0
    count_katu: int = 0
    count_miss: int = 0
    score: int = 0
    max_combo: int = 0
    perfect: bool = False
    mods: Mod = Mod.NO_MOD
    life_bar_graph: list[LifeBarState] | None = None
    timestamp: dt.datetime = field(default_factory=_utc_now)
    replay_data: list[ReplayEvent] = field(default_factory=list)
    replay_id: int = 0
    rng_seed: int | None = None

    def __post_init__(self) -> None:
        # Naive timestamps are stored as UTC; make that explicit so decoding round-trips.
        if self.timestamp.tzinfo is None:
            self.timestamp = self.timestamp.replace(tzinfo=dt.timezone.utc)

    @property
    def event_count(self) -> int:
        return len(self.replay_data)

    @property
    def duration_ms(self) -> int:
        """Sum of all frame deltas, i.e. the time of the last frame."""
        return sum(int(event.time_delta) for event in self.replay_data)
