from __future__ import annotations

import base64
import binascii

from .compression import decode_frames_text, decompress_frames
from .errors import PayloadDecodeError
from .events import ReplayEvent
from .frames import loads_frames
from .modes import GameMode


def parse_replay_data(
    payload: bytes | str,
    *,
    decoded: bool = False,
    decompressed: bool = False,
    mode: GameMode = GameMode.STD,
) -> list[ReplayEvent]:
    """Parse the frame data of a replay that is not wrapped in a full `.osr` record.

    This is what osu! API v1 `/get_replay` returns: the LZMA frame block,
    base64-encoded.

    Args:
        payload: The frame data.
        decoded: `payload` has already been base64-decoded.
        decompressed: `payload` has already been decompressed. Decompressed data
            is plain text, so base64 decoding is skipped too.
        mode: The game mode the frames belong to.

    Returns:
        The frames. A trailing RNG seed record is consumed but not returned.
    """

    data = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)

    if not decoded and not decompressed:
        try:
            data = base64.b64decode(data.strip(), validate=True)
        except binascii.Error as exc:
            raise PayloadDecodeError(f"base64 decode error: {exc}") from exc

    if decompressed:
        text = decode_frames_text(data)
    else:
        text = decompress_frames(data)

    events, _rng_seed = loads_frames(text, mode)
    return events
