from __future__ import annotations

import os
from dataclasses import dataclass

LZMA_PRESET_ENV = "OSRCODEC_LZMA_PRESET"
DEBUG_ENV = "OSRCODEC_DEBUG"

DEFAULT_LZMA_PRESET = 6
MIN_LZMA_PRESET = 0
MAX_LZMA_PRESET = 9


def resolve_lzma_preset(default_preset: int = DEFAULT_LZMA_PRESET) -> int:
    """Compression preset, overridable with `OSRCODEC_LZMA_PRESET`; bad values keep the default."""
    preset = _clamp_preset(default_preset)
    raw = os.environ.get(LZMA_PRESET_ENV)
    if raw is None:
        return preset
    try:
        return _clamp_preset(int(raw))
    except ValueError:
        return preset


def debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV) == "1"


def _clamp_preset(value: int) -> int:
    return min(MAX_LZMA_PRESET, max(MIN_LZMA_PRESET, int(value)))


@dataclass(frozen=True, slots=True)
class PackOptions:
    """How the frame block is written.

    `compress=False` produces the diagnostic raw-text layout that the standard
    decoder rejects.
    """

    preset: int = DEFAULT_LZMA_PRESET
    compress: bool = True

    @classmethod
    def from_env(cls, *, compress: bool = True) -> PackOptions:
        return cls(preset=resolve_lzma_preset(), compress=compress)
