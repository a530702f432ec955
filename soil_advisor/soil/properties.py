"""Soil property catalog.

Every soil type has one canonical description. Properties are reported in
one of two modes:

- composition mode, when a provider returned measured values for the
  location, reports those values plus a derived water retention rating;
- fallback mode, when only the soil type is known, reports a static profile
  per type whose numeric values vary slightly (and deterministically) with
  the sampling location.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

from soil_advisor.soil.classifier import round_half_up
from soil_advisor.soil.errors import UnknownSoilTypeError
from soil_advisor.soil.models import (
    SampleLocation,
    SoilComposition,
    SoilProperty,
    SoilType,
)

InputTerm = Literal["longitude", "latitude", "depth", "area"]


@dataclass(frozen=True)
class PropertyRule:
    """A fallback property computed as ``base + fmod(term * factor, spread)``.

    ``fmod`` keeps the sign of the dividend, so negative coordinates pull the
    value below ``base``; the result always lies within ``base ± spread``.
    The ``area`` term is ``longitude * latitude``.
    """

    name: str
    base: float
    spread: float
    term: InputTerm
    factor: float
    unit: str
    description: str
    integer: bool = False

    def evaluate(self, location: SampleLocation) -> float | int:
        if self.term == "area":
            raw = location.longitude * location.latitude
        else:
            raw = getattr(location, self.term)

        value = self.base + math.fmod(raw * self.factor, self.spread)
        return round_half_up(value) if self.integer else value


@dataclass(frozen=True)
class SoilProfile:
    """Static fallback property table for one soil type."""

    rules: tuple[PropertyRule, ...]
    water_retention: str
    water_retention_note: str

    def properties(self, location: SampleLocation) -> tuple[SoilProperty, ...]:
        computed = [
            SoilProperty(
                name=rule.name,
                value=rule.evaluate(location),
                unit=rule.unit,
                description=rule.description,
            )
            for rule in self.rules
        ]
        computed.append(
            SoilProperty(
                name="Water Retention",
                value=self.water_retention,
                description=self.water_retention_note,
            )
        )
        return tuple(computed)


def _profile(
    ph: tuple[float, float, str],
    organic_matter: tuple[float, float, str],
    nitrogen: tuple[float, float, str],
    phosphorus: tuple[float, float, str],
    potassium: tuple[float, float, str],
    water_retention: tuple[str, str],
    organic_matter_factor: float = 0.01,
    nitrogen_factor: float = 0.001,
    potassium_factor: float = 0.5,
) -> SoilProfile:
    return SoilProfile(
        rules=(
            PropertyRule("pH Level", ph[0], ph[1], "longitude", 0.01, "pH", ph[2]),
            PropertyRule(
                "Organic Matter",
                organic_matter[0],
                organic_matter[1],
                "latitude",
                organic_matter_factor,
                "%",
                organic_matter[2],
            ),
            PropertyRule(
                "Nitrogen",
                nitrogen[0],
                nitrogen[1],
                "depth",
                nitrogen_factor,
                "%",
                nitrogen[2],
            ),
            PropertyRule(
                "Phosphorus",
                phosphorus[0],
                phosphorus[1],
                "area",
                0.001,
                "ppm",
                phosphorus[2],
                integer=True,
            ),
            PropertyRule(
                "Potassium",
                potassium[0],
                potassium[1],
                "depth",
                potassium_factor,
                "ppm",
                potassium[2],
                integer=True,
            ),
        ),
        water_retention=water_retention[0],
        water_retention_note=water_retention[1],
    )


DESCRIPTIONS: Mapping[SoilType, str] = MappingProxyType(
    {
        SoilType.CLAY: (
            "Clay soil is characterized by fine particles that stick together when "
            "wet, forming a heavy and dense texture. It retains water and nutrients "
            "well but can be difficult to work with."
        ),
        SoilType.SANDY: (
            "Sandy soil consists of larger particles that allow for good drainage "
            "but poor nutrient retention. It warms up quickly in spring but can dry "
            "out rapidly in hot weather."
        ),
        SoilType.LOAM: (
            "Loam is considered ideal for growing most plants. It has a balanced "
            "mixture of sand, silt, and clay particles, providing good drainage "
            "while retaining adequate moisture and nutrients."
        ),
        SoilType.SILT: (
            "Silt soil has medium-sized particles that hold water well but can "
            "become compacted. It is fertile and easy to work with when properly "
            "managed."
        ),
        SoilType.PEAT: (
            "Peat soil is high in organic matter and tends to be acidic. It holds "
            "moisture very well but may require amendments for optimal growing "
            "conditions for many plants."
        ),
        SoilType.CHALKY: (
            "Chalky soil is alkaline and typically contains calcium carbonate or "
            "lime. It drains well but can cause nutrient deficiencies in plants "
            "that prefer acidic conditions."
        ),
        SoilType.CLAY_LOAM: (
            "Clay loam combines the nutrient-richness of clay with better drainage. "
            "It's fertile while being less difficult to work with than heavy clay."
        ),
        SoilType.SANDY_LOAM: (
            "Sandy loam provides good drainage with better water and nutrient "
            "retention than pure sandy soil. It's easy to work with and warms "
            "quickly in spring."
        ),
        SoilType.SILTY_LOAM: (
            "Silty loam combines the fertility and water retention of silt with "
            "improved drainage and structure. It's generally fertile and easy to "
            "work with."
        ),
    }
)

GENERIC_DESCRIPTION = (
    "This soil has a balanced composition with moderate fertility and water "
    "retention properties."
)

PROFILES: Mapping[SoilType, SoilProfile] = MappingProxyType(
    {
        SoilType.CLAY: _profile(
            ph=(7.5, 0.5, "Slightly alkaline"),
            organic_matter=(2.5, 1.0, "Moderate"),
            nitrogen=(0.15, 0.1, "Moderate"),
            phosphorus=(12, 5, "Medium"),
            potassium=(180, 20, "High"),
            water_retention=("High", "Holds water well"),
        ),
        SoilType.SANDY: _profile(
            ph=(6.0, 0.5, "Slightly acidic"),
            organic_matter=(1.0, 0.8, "Low"),
            nitrogen=(0.08, 0.05, "Low"),
            phosphorus=(8, 4, "Low"),
            potassium=(90, 15, "Medium"),
            water_retention=("Low", "Drains quickly"),
            potassium_factor=0.4,
        ),
        SoilType.LOAM: _profile(
            ph=(6.8, 0.3, "Neutral"),
            organic_matter=(4.0, 1.2, "High"),
            nitrogen=(0.25, 0.08, "High"),
            phosphorus=(20, 6, "High"),
            potassium=(200, 25, "High"),
            water_retention=("Moderate", "Good balance"),
            potassium_factor=0.6,
        ),
        SoilType.SILT: _profile(
            ph=(6.5, 0.4, "Slightly acidic"),
            organic_matter=(3.0, 1.1, "Moderate"),
            nitrogen=(0.18, 0.07, "Moderate"),
            phosphorus=(15, 5, "Medium"),
            potassium=(150, 20, "Medium"),
            water_retention=("Moderate to High", "Holds water well"),
        ),
        SoilType.PEAT: _profile(
            ph=(4.5, 0.6, "Acidic"),
            organic_matter=(20.0, 5.0, "Very High"),
            nitrogen=(0.3, 0.1, "High"),
            phosphorus=(5, 3, "Low"),
            potassium=(60, 15, "Low"),
            water_retention=("Very High", "Can become waterlogged"),
            organic_matter_factor=0.02,
            nitrogen_factor=0.002,
            potassium_factor=0.3,
        ),
        SoilType.CHALKY: _profile(
            ph=(8.0, 0.4, "Alkaline"),
            organic_matter=(1.5, 0.7, "Low"),
            nitrogen=(0.1, 0.04, "Low"),
            phosphorus=(10, 4, "Medium"),
            potassium=(120, 18, "Medium"),
            water_retention=("Low", "Drains quickly"),
            potassium_factor=0.4,
        ),
    }
)

GENERIC_PROFILE = _profile(
    ph=(7.0, 0.3, "Neutral"),
    organic_matter=(2.0, 0.9, "Moderate"),
    nitrogen=(0.15, 0.06, "Moderate"),
    phosphorus=(12, 5, "Medium"),
    potassium=(150, 20, "Medium"),
    water_retention=("Moderate", "Average drainage"),
)


def get_description(soil_type: SoilType | str) -> str:
    """Strict description lookup.

    Raises:
        UnknownSoilTypeError: If the soil type has no description
    """
    parsed = SoilType.parse(soil_type)
    try:
        return DESCRIPTIONS[parsed]
    except KeyError:
        raise UnknownSoilTypeError(str(soil_type)) from None


def get_soil_profile(soil_type: SoilType | str) -> SoilProfile:
    """Strict fallback profile lookup.

    Raises:
        UnknownSoilTypeError: If the soil type has no fallback profile
    """
    parsed = SoilType.parse(soil_type)
    try:
        return PROFILES[parsed]
    except KeyError:
        raise UnknownSoilTypeError(str(soil_type)) from None


def describe(soil_type: SoilType | str) -> str:
    """Canonical description paragraph, generic for unknown types."""
    try:
        return get_description(soil_type)
    except UnknownSoilTypeError:
        return GENERIC_DESCRIPTION


def _level(value: float, high: float, moderate: float) -> str:
    if value > high:
        return "High"
    if value > moderate:
        return "Moderate"
    return "Low"


def _ph_description(ph: float) -> str:
    if ph > 7:
        return "Alkaline"
    if ph < 7:
        return "Acidic"
    return "Neutral"


def water_retention(clay: float, sand: float) -> tuple[str, str]:
    """Qualitative water retention rating from texture."""
    if clay > 35:
        return "High", "Holds water well"
    if sand > 50:
        return "Low", "Drains quickly"
    return "Moderate", "Average drainage"


def composition_properties(composition: SoilComposition) -> tuple[SoilProperty, ...]:
    """Report measured composition values, skipping any the provider lacked."""
    props = [
        SoilProperty(
            name="Clay Content",
            value=composition.clay,
            unit="%",
            description="Percentage of clay particles",
        ),
        SoilProperty(
            name="Sand Content",
            value=composition.sand,
            unit="%",
            description="Percentage of sand particles",
        ),
        SoilProperty(
            name="Silt Content",
            value=composition.silt,
            unit="%",
            description="Percentage of silt particles",
        ),
    ]

    if composition.ph is not None:
        props.append(
            SoilProperty(
                name="pH Level",
                value=composition.ph,
                unit="pH",
                description=_ph_description(composition.ph),
            )
        )
    if composition.organic_carbon is not None:
        props.append(
            SoilProperty(
                name="Organic Matter",
                value=composition.organic_carbon,
                unit="g/kg",
                description=_level(composition.organic_carbon, 30, 15),
            )
        )
    if composition.nitrogen is not None:
        props.append(
            SoilProperty(
                name="Nitrogen",
                value=composition.nitrogen,
                unit="g/kg",
                description=_level(composition.nitrogen, 2, 1),
            )
        )
    if composition.bulk_density is not None:
        props.append(
            SoilProperty(
                name="Bulk Density",
                value=composition.bulk_density,
                unit="kg/dm³",
                description="Soil compaction indicator",
            )
        )
    if composition.cec is not None:
        props.append(
            SoilProperty(
                name="CEC",
                value=composition.cec,
                unit="cmol/kg",
                description="Cation Exchange Capacity - nutrient retention ability",
            )
        )

    rating, note = water_retention(composition.clay, composition.sand)
    props.append(SoilProperty(name="Water Retention", value=rating, description=note))
    return tuple(props)


def fallback_properties(
    soil_type: SoilType | str, location: SampleLocation
) -> tuple[SoilProperty, ...]:
    """Static profile for the soil type, varied by the sampling location."""
    try:
        profile = get_soil_profile(soil_type)
    except UnknownSoilTypeError:
        profile = GENERIC_PROFILE
    return profile.properties(location)


def describe_properties(
    soil_type: SoilType | str,
    composition: SoilComposition | None = None,
    location: SampleLocation | None = None,
) -> tuple[str, tuple[SoilProperty, ...]]:
    """Description and ordered property list for a soil type.

    Args:
        soil_type: Resolved soil type (labels are parsed leniently)
        composition: Measured composition; selects composition mode
        location: Sampling location; required in fallback mode

    Returns:
        (description, properties)

    Raises:
        ValueError: If neither composition nor location is given
    """
    description = describe(soil_type)

    if composition is not None:
        return description, composition_properties(composition)

    if location is None:
        raise ValueError("A sampling location is required without composition data")

    return description, fallback_properties(soil_type, location)
