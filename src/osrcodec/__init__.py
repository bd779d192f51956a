from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .api import parse_replay_data
from .codec import dump, dumps, dumps_uncompressed, load, loads
from .errors import (
    InvalidStringMarkerError,
    PayloadDecodeError,
    ReplayCompressionError,
    ReplayError,
    ReplayFormatError,
    ReplayParseError,
    ReplayUnicodeError,
    UnexpectedEOFError,
)
from .events import (
    LifeBarState,
    ReplayEvent,
    ReplayEventCatch,
    ReplayEventMania,
    ReplayEventOsu,
    ReplayEventTaiko,
)
from .flags import Key, KeyMania, KeyTaiko, Mod
from .modes import GameMode
from .replay import Replay

try:
    __version__ = version("osrcodec")
except PackageNotFoundError:  # pragma: no cover
    # Allow running from source (e.g. `PYTHONPATH=src`) without installed package metadata.
    __version__ = "0.0.0+dev"

__all__ = [
    "GameMode",
    "InvalidStringMarkerError",
    "Key",
    "KeyMania",
    "KeyTaiko",
    "LifeBarState",
    "Mod",
    "PayloadDecodeError",
    "Replay",
    "ReplayCompressionError",
    "ReplayError",
    "ReplayEvent",
    "ReplayEventCatch",
    "ReplayEventMania",
    "ReplayEventOsu",
    "ReplayEventTaiko",
    "ReplayFormatError",
    "ReplayParseError",
    "ReplayUnicodeError",
    "UnexpectedEOFError",
    "dump",
    "dumps",
    "dumps_uncompressed",
    "load",
    "loads",
    "parse_replay_data",
]
