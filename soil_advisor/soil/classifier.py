"""Soil type classification.

Two paths resolve a location to a ``SoilType``:

- ``classify_composition`` applies ordered texture thresholds to measured
  clay/sand/silt percentages. The first matching rule wins.
- ``classify_fallback`` is a deterministic hash of (longitude, latitude,
  depth) used when no composition is available. It is not a physical model;
  it only has to give varied and reproducible output.

``depth_band`` buckets a sampling depth into the bands composition providers
report on.
"""

import math
from typing import NamedTuple

from soil_advisor.soil.errors import InputValidationError
from soil_advisor.soil.models import SoilComposition, SoilType

FALLBACK_SOIL_TYPES: tuple[SoilType, ...] = (
    SoilType.CLAY,
    SoilType.SANDY,
    SoilType.LOAM,
    SoilType.SILT,
    SoilType.PEAT,
    SoilType.CHALKY,
)


class DepthBand(NamedTuple):
    """A depth interval (upper, lower], in cm."""

    top: int
    bottom: int

    @property
    def label(self) -> str:
        return f"{self.top}-{self.bottom}cm"

    def contains(self, depth: float) -> bool:
        return self.top < depth <= self.bottom


DEPTH_BANDS: tuple[DepthBand, ...] = (
    DepthBand(0, 5),
    DepthBand(5, 15),
    DepthBand(15, 30),
    DepthBand(30, 60),
    DepthBand(60, 100),
    DepthBand(100, 200),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (JavaScript Math.round)."""
    return math.floor(value + 0.5)


def classify_composition(clay: float, sand: float, silt: float) -> SoilType:
    """Classify soil texture from clay/sand/silt percentages.

    Args:
        clay: Clay percentage (0-100)
        sand: Sand percentage (0-100)
        silt: Silt percentage (0-100)

    Returns:
        SoilType of the first rule that matches
    """
    if clay >= 40:
        return SoilType.CLAY
    elif sand >= 50:
        return SoilType.SANDY
    elif silt >= 50:
        return SoilType.SILT
    elif clay >= 25 and sand >= 25 and silt >= 25:
        return SoilType.LOAM
    elif clay >= 25 and sand <= 45 and silt <= 45:
        return SoilType.CLAY_LOAM
    # The two rules below never fire after the sand/silt >= 50 checks.
    elif sand >= 70 and clay <= 15:
        return SoilType.SANDY_LOAM
    elif silt >= 70 and clay <= 15:
        return SoilType.SILTY_LOAM
    else:
        return SoilType.LOAM


def fallback_score(longitude: float, latitude: float, depth: float) -> int:
    """Hash a location into a non-negative integer.

    score = round(|sin(lat * 0.1) * 100 + cos(lon * 0.15) * 100 + tan(depth * 0.05) * 50|)

    ``math.tan`` is finite for every finite float (pi/2 is not representable),
    so values near the poles of tan pass through as large finite numbers.
    Should the sum still overflow to a non-finite value the tan term is
    dropped.
    """
    lat_term = math.sin(latitude * 0.1) * 100
    lon_term = math.cos(longitude * 0.15) * 100
    depth_term = math.tan(depth * 0.05) * 50

    total = lat_term + lon_term + depth_term
    if not math.isfinite(total):
        total = lat_term + lon_term

    return round_half_up(abs(total))


def classify_fallback(longitude: float, latitude: float, depth: float) -> SoilType:
    """Pick one of the six primary soil types from the location hash."""
    index = fallback_score(longitude, latitude, depth) % len(FALLBACK_SOIL_TYPES)
    return FALLBACK_SOIL_TYPES[index]


def classify(
    longitude: float,
    latitude: float,
    depth: float,
    composition: SoilComposition | None = None,
) -> SoilType:
    """Classify a location, preferring composition data when supplied."""
    if composition is not None:
        return classify_composition(
            composition.clay, composition.sand, composition.silt
        )
    return classify_fallback(longitude, latitude, depth)


def depth_band(depth: float) -> DepthBand:
    """Map a sampling depth in cm to its band.

    Depths beyond the deepest band are clamped to it.

    Raises:
        InputValidationError: If depth is not a positive number
    """
    if not depth > 0:
        raise InputValidationError([f"depth: must be greater than 0, got {depth}"])

    for band in DEPTH_BANDS:
        if depth <= band.bottom:
            return band
    return DEPTH_BANDS[-1]
