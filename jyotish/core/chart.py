# jyotish/core/chart.py
from __future__ import annotations

"""
Birth-chart assembler.

compute_birth_chart(birth, settings) runs the engine in dependency order:

    civil time → JD → ayanamsa
                   → 9 body longitudes → sidereal → sign/nakshatra → house
                   → ascendant (GMST/LST/obliquity) → sidereal → sign/nakshatra
                   → Moon → Vimshottari timeline

and returns a frozen BirthChart. Nothing here touches shared state; the
result is owned by whichever caller stores it.
"""

from dataclasses import dataclass, field
from datetime import date as date_, datetime, time as time_, timezone
from typing import Optional, Tuple
import logging
import uuid

from jyotish.core.astronomy import all_body_longitudes
from jyotish.core.ayanamsa import AYANAMSA_MODEL, lahiri_ayanamsa, to_sidereal
from jyotish.core.constants import ASCENDANT_NAME, ZODIAC_SIGNS
from jyotish.core.dasha import (
    DEFAULT_CYCLES,
    DEFAULT_MAX_PERIODS,
    PlanetaryPeriod,
    vimshottari_periods,
)
from jyotish.core.houses import (
    house_for_sign,
    is_polar_singular,
    tropical_ascendant,
    whole_sign_houses,
)
from jyotish.core.timescales import civil_to_day_count
from jyotish.core.zodiac import ZodiacPlacement, classify

__all__ = [
    "EngineSettings",
    "BirthInstant",
    "Body",
    "Ascendant",
    "House",
    "BirthChart",
    "compute_birth_chart",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSettings:
    apply_timezone_offset: bool = True
    dasha_cycles: int = DEFAULT_CYCLES
    dasha_max_periods: Optional[int] = DEFAULT_MAX_PERIODS


@dataclass(frozen=True)
class BirthInstant:
    date: date_
    time: time_
    latitude: float
    longitude: float
    timezone: str = "UTC"
    name: Optional[str] = None
    place: Optional[str] = None


@dataclass(frozen=True)
class Body:
    name: str
    placement: ZodiacPlacement
    house: int
    retrograde: bool


@dataclass(frozen=True)
class Ascendant:
    """Rising degree. Has no body identity and is not a Body."""
    placement: ZodiacPlacement
    tropical_longitude: float
    house: int = 1
    retrograde: bool = False
    name: str = ASCENDANT_NAME


@dataclass(frozen=True)
class House:
    number: int
    sign_index: int

    @property
    def sign(self) -> str:
        return ZODIAC_SIGNS[self.sign_index]

    @property
    def cusp_longitude(self) -> float:
        return self.sign_index * 30.0


@dataclass(frozen=True)
class BirthChart:
    id: str
    birth: BirthInstant
    ascendant: Ascendant
    bodies: Tuple[Body, ...]
    houses: Tuple[House, ...]
    periods: Tuple[PlanetaryPeriod, ...]
    ayanamsa: float
    ayanamsa_model: str
    calculated_at: datetime
    day_count: float
    timezone_applied: bool
    tz_offset_seconds: int
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def body(self, name: str) -> Body:
        for b in self.bodies:
            if b.name == name:
                return b
        raise KeyError(name)


def compute_birth_chart(
    birth: BirthInstant,
    settings: Optional[EngineSettings] = None,
    *,
    now: Optional[datetime] = None,
    chart_id: Optional[str] = None,
) -> BirthChart:
    cfg = settings or EngineSettings()
    warnings = []

    dc = civil_to_day_count(
        birth.date.isoformat(),
        birth.time.strftime("%H:%M:%S"),
        birth.timezone,
        apply_offset=cfg.apply_timezone_offset,
    )
    warnings.extend(dc.warnings)
    jd = dc.jd
    ayanamsa = lahiri_ayanamsa(jd)

    if is_polar_singular(birth.latitude):
        log.warning("ascendant evaluated at polar latitude %.6f; result is undefined", birth.latitude)
        warnings.append("ascendant_polar_singularity")

    asc_tropical = tropical_ascendant(jd, birth.latitude, birth.longitude)
    asc_placement = classify(to_sidereal(asc_tropical, ayanamsa))
    ascendant = Ascendant(placement=asc_placement, tropical_longitude=asc_tropical)

    bodies = []
    for name, pos in all_body_longitudes(jd).items():
        placement = classify(to_sidereal(pos.longitude, ayanamsa))
        bodies.append(Body(
            name=name,
            placement=placement,
            house=house_for_sign(placement.sign_index, asc_placement.sign_index),
            retrograde=pos.retrograde,
        ))

    houses = tuple(House(number=h, sign_index=s) for h, s, _ in whole_sign_houses(asc_placement.sign_index))

    moon = next(b for b in bodies if b.name == "Moon")
    periods = vimshottari_periods(
        moon.placement.longitude,
        dc.local,
        cycles=cfg.dasha_cycles,
        max_periods=cfg.dasha_max_periods,
    )

    chart = BirthChart(
        id=chart_id or str(uuid.uuid4()),
        birth=birth,
        ascendant=ascendant,
        bodies=tuple(bodies),
        houses=houses,
        periods=tuple(periods),
        ayanamsa=ayanamsa,
        ayanamsa_model=AYANAMSA_MODEL,
        calculated_at=now or datetime.now(timezone.utc),
        day_count=jd,
        timezone_applied=dc.offset_applied,
        tz_offset_seconds=dc.tz_offset_seconds,
        warnings=tuple(warnings),
    )
    log.debug(
        "chart %s: jd=%.6f ayanamsa=%.6f asc=%s %.4f periods=%d",
        chart.id, jd, ayanamsa, asc_placement.sign, asc_placement.degree, len(periods),
    )
    return chart
