"""Conversion between .NET-style 100ns ticks and `datetime`.

Replays store the play time as `DateTime.Ticks`: the number of 100ns intervals
since 0001-01-01T00:00:00 UTC, written as a signed 64-bit integer.
"""

from __future__ import annotations

import datetime as dt
import logging
import warnings

from .errors import ReplayFormatError

TICKS_TO_UNIX_EPOCH = 621_355_968_000_000_000
TICKS_PER_SECOND = 10_000_000
TICKS_PER_MICROSECOND = 10

_UNIX_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)

logger = logging.getLogger(__name__)


class ReplayTimestampWarning(UserWarning):
    """A stored timestamp could not be represented and was replaced."""


def datetime_to_ticks(value: dt.datetime) -> int:
    """Encode `value` as ticks. Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    delta = value - _UNIX_EPOCH
    unix_seconds = delta.days * 86_400 + delta.seconds
    return TICKS_TO_UNIX_EPOCH + unix_seconds * TICKS_PER_SECOND + delta.microseconds * TICKS_PER_MICROSECOND


def ticks_to_datetime(ticks: int, *, strict: bool = False) -> dt.datetime:
    """Decode ticks into an aware UTC datetime.

    Sub-microsecond ticks are truncated. A tick value outside the range
    `datetime` can hold decodes to the current time and emits a
    `ReplayTimestampWarning`; with `strict=True` it raises `ReplayFormatError`.
    """
    ticks = int(ticks)
    unix_seconds, remainder = divmod(ticks - TICKS_TO_UNIX_EPOCH, TICKS_PER_SECOND)
    try:
        return _UNIX_EPOCH + dt.timedelta(
            seconds=unix_seconds,
            microseconds=remainder // TICKS_PER_MICROSECOND,
        )
    except OverflowError as exc:
        if strict:
            raise ReplayFormatError(f"timestamp {ticks} ticks is out of range") from exc

    now = dt.datetime.now(dt.timezone.utc)
    logger.warning("replay timestamp %d ticks is out of range; using current time", ticks)
    warnings.warn(
        f"Replay timestamp {ticks} ticks is not representable; substituted current time {now.isoformat()}.",
        category=ReplayTimestampWarning,
        stacklevel=2,
    )
    return now
