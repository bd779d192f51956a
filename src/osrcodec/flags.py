from __future__ import annotations

from enum import IntFlag


class _BitFlag(IntFlag):
    def contains(self, other: int) -> bool:
        """True when every bit of `other` is set (not merely any of them)."""
        other = int(other)
        return (int(self) & other) == other


class Mod(_BitFlag):
    NO_MOD = 0
    NO_FAIL = 1 << 0
    EASY = 1 << 1
    TOUCH_DEVICE = 1 << 2
    HIDDEN = 1 << 3
    HARD_ROCK = 1 << 4
    SUDDEN_DEATH = 1 << 5
    DOUBLE_TIME = 1 << 6
    RELAX = 1 << 7
    HALF_TIME = 1 << 8
    NIGHTCORE = 1 << 9
    FLASHLIGHT = 1 << 10
    AUTOPLAY = 1 << 11
    SPUN_OUT = 1 << 12
    AUTOPILOT = 1 << 13
    PERFECT = 1 << 14
    KEY4 = 1 << 15
    KEY5 = 1 << 16
    KEY6 = 1 << 17
    KEY7 = 1 << 18
    KEY8 = 1 << 19
    FADE_IN = 1 << 20
    RANDOM = 1 << 21
    CINEMA = 1 << 22
    TARGET = 1 << 23
    KEY9 = 1 << 24
    KEY_COOP = 1 << 25
    KEY1 = 1 << 26
    KEY3 = 1 << 27
    KEY2 = 1 << 28
    SCORE_V2 = 1 << 29
    MIRROR = 1 << 30

    @property
    def acronyms(self) -> str:
        """Short in-game notation, e.g. `HDHR`; `NM` when no mod is set."""
        value = int(self)
        if not value:
            return "NM"

        hidden = 0
        # NC and PF imply DT and SD; the client only shows the stronger mod.
        if value & Mod.NIGHTCORE:
            hidden |= Mod.DOUBLE_TIME
        if value & Mod.PERFECT:
            hidden |= Mod.SUDDEN_DEATH
        return "".join(
            acronym for bit, acronym in _MOD_ACRONYMS.items() if value & bit and not hidden & bit
        )


class Key(_BitFlag):
    M1 = 1 << 0
    M2 = 1 << 1
    K1 = 1 << 2
    K2 = 1 << 3
    SMOKE = 1 << 4


class KeyTaiko(_BitFlag):
    LEFT_DON = 1 << 0
    LEFT_KAT = 1 << 1
    RIGHT_DON = 1 << 2
    RIGHT_KAT = 1 << 3


class KeyMania(_BitFlag):
    K1 = 1 << 0
    K2 = 1 << 1
    K3 = 1 << 2
    K4 = 1 << 3
    K5 = 1 << 4
    K6 = 1 << 5
    K7 = 1 << 6
    K8 = 1 << 7
    K9 = 1 << 8
    K10 = 1 << 9
    K11 = 1 << 10
    K12 = 1 << 11
    K13 = 1 << 12
    K14 = 1 << 13
    K15 = 1 << 14
    K16 = 1 << 15
    K17 = 1 << 16
    K18 = 1 << 17

    @property
    def columns(self) -> tuple[int, ...]:
        """Zero-based indices of the pressed columns."""
        value = int(self)
        return tuple(idx for idx in range(18) if value & (1 << idx))


_MOD_ACRONYMS: dict[int, str] = {
    Mod.NO_FAIL: "NF",
    Mod.EASY: "EZ",
    Mod.TOUCH_DEVICE: "TD",
    Mod.HIDDEN: "HD",
    Mod.HARD_ROCK: "HR",
    Mod.SUDDEN_DEATH: "SD",
    Mod.DOUBLE_TIME: "DT",
    Mod.RELAX: "RX",
    Mod.HALF_TIME: "HT",
    Mod.NIGHTCORE: "NC",
    Mod.FLASHLIGHT: "FL",
    Mod.AUTOPLAY: "AU",
    Mod.SPUN_OUT: "SO",
    Mod.AUTOPILOT: "AP",
    Mod.PERFECT: "PF",
    Mod.KEY4: "4K",
    Mod.KEY5: "5K",
    Mod.KEY6: "6K",
    Mod.KEY7: "7K",
    Mod.KEY8: "8K",
    Mod.FADE_IN: "FI",
    Mod.RANDOM: "RN",
    Mod.CINEMA: "CN",
    Mod.TARGET: "TP",
    Mod.KEY9: "9K",
    Mod.KEY_COOP: "CO",
    Mod.KEY1: "1K",
    Mod.KEY3: "3K",
    Mod.KEY2: "2K",
    Mod.SCORE_V2: "V2",
    Mod.MIRROR: "MR",
}
