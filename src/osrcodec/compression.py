from __future__ import annotations

import lzma

from .config import DEFAULT_LZMA_PRESET
from .errors import ReplayCompressionError, ReplayUnicodeError


def compress_frames(text: str, *, preset: int = DEFAULT_LZMA_PRESET) -> bytes:
    """LZMA-compress the frame text in the legacy "alone" container osu! writes."""
    try:
        return lzma.compress(text.encode("utf-8"), format=lzma.FORMAT_ALONE, preset=preset)
    except lzma.LZMAError as exc:
        raise ReplayCompressionError(f"LZMA compression failed: {exc}") from exc


def decompress_frames(blob: bytes) -> str:
    try:
        raw = lzma.decompress(blob, format=lzma.FORMAT_AUTO)
    except lzma.LZMAError as exc:
        raise ReplayCompressionError(f"LZMA decompression failed: {exc}") from exc
    return decode_frames_text(raw)


def decode_frames_text(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ReplayUnicodeError(f"frame data is not valid UTF-8: {exc}") from exc
