"""Text codec for the replay frame stream.

The decompressed frame block is a list of comma-terminated records, each of four
pipe-separated fields: `time_delta|x|y|z`. The meaning of x/y/z depends on the
game mode (see `events.event_from_fields`). Two record kinds are not frames:

- a final `-12345|0|0|<seed>` record carries the RNG seed of the play;
- lazer writes one or two `256|-500` placeholder frames at the start of a replay.

Records with the wrong number of fields are dropped, whereas a malformed number
in a kept record aborts the whole decode.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ._text import I32_MAX, I32_MIN, U32_MAX, parse_int, try_parse_float
from .events import ReplayEvent, event_from_fields, event_to_fields
from .modes import GameMode

RECORD_DELIMITER = ","
FIELD_DELIMITER = "|"
FIELDS_PER_RECORD = 4

SEED_SENTINEL_TIME = -12345

SKIP_FRAME_X = 256.0
SKIP_FRAME_Y = -500.0
SKIP_FRAME_WINDOW = 2

logger = logging.getLogger(__name__)


def dumps_frames(events: Iterable[ReplayEvent], rng_seed: int | None = None) -> str:
    parts: list[str] = []
    for event in events:
        x, y, z = event_to_fields(event)
        parts.append(f"{int(event.time_delta)}|{x}|{y}|{z},")
    if rng_seed is not None:
        parts.append(f"{SEED_SENTINEL_TIME}|0|0|{int(rng_seed)},")
    return "".join(parts)


def _seed_to_i32(value: int) -> int:
    # Seeds are written unsigned by some clients; store the signed 32-bit view.
    if value > I32_MAX:
        value -= 1 << 32
    return value


def loads_frames(text: str, mode: GameMode) -> tuple[list[ReplayEvent], int | None]:
    """Parse a frame stream into `(events, rng_seed)`."""

    if text.endswith(RECORD_DELIMITER):
        text = text[: -len(RECORD_DELIMITER)]
    if not text:
        return [], None

    records = text.split(RECORD_DELIMITER)
    last_index = len(records) - 1
    events: list[ReplayEvent] = []
    rng_seed: int | None = None
    dropped = 0
    skipped = 0

    for i, record in enumerate(records):
        fields = record.split(FIELD_DELIMITER)
        if len(fields) != FIELDS_PER_RECORD:
            dropped += 1
            continue
        w, x, y, z = fields

        time_delta = parse_int(w, "time_delta", lo=I32_MIN, hi=I32_MAX)
        # Field 4 must be numeric in every mode, seed and skip records included.
        last_field = parse_int(z, "keys", lo=I32_MIN, hi=U32_MAX)

        if time_delta == SEED_SENTINEL_TIME and i == last_index:
            rng_seed = _seed_to_i32(last_field)
            continue

        if i < SKIP_FRAME_WINDOW and try_parse_float(x) == SKIP_FRAME_X and try_parse_float(y) == SKIP_FRAME_Y:
            skipped += 1
            continue

        events.append(event_from_fields(mode, time_delta, x, y, z))

    if dropped or skipped:
        logger.debug(
            "frame stream: %d records, %d dropped (field count), %d skip frames",
            len(records),
            dropped,
            skipped,
        )
    return events, rng_seed
