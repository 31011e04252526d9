# jyotish/core/zodiac.py
from __future__ import annotations

from dataclasses import dataclass

from jyotish.core.constants import (
    NAKSHATRAS,
    NAKSHATRA_SPAN_DEG,
    QUARTER_SPAN_DEG,
    SIGN_SPAN_DEG,
    ZODIAC_SIGNS,
    wrap_deg,
)

__all__ = ["ZodiacPlacement", "classify", "sign_index", "mansion_index"]


@dataclass(frozen=True)
class ZodiacPlacement:
    longitude: float       # sidereal, [0, 360)
    sign_index: int        # 0..11
    degree: float          # [0, 30)
    mansion_index: int     # 0..26
    quarter: int           # pada 1..4

    @property
    def sign(self) -> str:
        return ZODIAC_SIGNS[self.sign_index]

    @property
    def mansion(self) -> str:
        return NAKSHATRAS[self.mansion_index]

    @property
    def position_in_mansion(self) -> float:
        return self.longitude % NAKSHATRA_SPAN_DEG


def sign_index(sidereal_deg: float) -> int:
    return int(wrap_deg(sidereal_deg) // SIGN_SPAN_DEG) % 12


def mansion_index(sidereal_deg: float) -> int:
    return int(wrap_deg(sidereal_deg) // NAKSHATRA_SPAN_DEG) % 27


def classify(sidereal_deg: float) -> ZodiacPlacement:
    """Sign, degree-in-sign, nakshatra and pada of a sidereal longitude."""
    lon = wrap_deg(sidereal_deg)
    pos_in_mansion = lon % NAKSHATRA_SPAN_DEG
    # Clamp absorbs floating-point spill at the last pada boundary.
    quarter = min(max(int(pos_in_mansion // QUARTER_SPAN_DEG) + 1, 1), 4)
    return ZodiacPlacement(
        longitude=lon,
        sign_index=sign_index(lon),
        degree=lon % SIGN_SPAN_DEG,
        mansion_index=mansion_index(lon),
        quarter=quarter,
    )
