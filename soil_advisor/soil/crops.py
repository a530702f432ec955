"""Crop advisory catalog.

Recommendations depend on the soil type label only. Each of the six primary
soil types has a fixed five-crop list; every other label gets the generic
list.
"""

from collections.abc import Mapping
from types import MappingProxyType

from soil_advisor.soil.errors import UnknownSoilTypeError
from soil_advisor.soil.models import Crop, CropRecommendations, SoilType, Suitability

HIGH = Suitability.HIGH
MEDIUM = Suitability.MEDIUM


def _advice(crops: list[tuple[str, Suitability, str]], notes: str) -> CropRecommendations:
    return CropRecommendations(
        recommended_crops=tuple(
            Crop(name=name, suitability=suitability, description=description)
            for name, suitability, description in crops
        ),
        notes=notes,
    )


CROP_CATALOG: Mapping[SoilType, CropRecommendations] = MappingProxyType(
    {
        SoilType.CLAY: _advice(
            [
                ("Broccoli", HIGH, "Thrives in moisture-retentive clay soils"),
                ("Cabbage", HIGH, "Does well in heavy, nutrient-rich soils"),
                (
                    "Brussels Sprouts",
                    HIGH,
                    "Prefers clay soils with good moisture retention",
                ),
                (
                    "Summer Squash",
                    MEDIUM,
                    "Can grow well with proper drainage improvements",
                ),
                ("Beans", MEDIUM, "Can help improve clay soil structure over time"),
            ],
            "Clay soils benefit from regular addition of organic matter to improve "
            "structure and drainage. Consider raised beds for better results.",
        ),
        SoilType.SANDY: _advice(
            [
                ("Carrots", HIGH, "Grow straight and clean in loose sandy soil"),
                ("Potatoes", HIGH, "Easy to harvest in sandy soils"),
                ("Radishes", HIGH, "Quick-growing root vegetables ideal for sandy soil"),
                ("Lettuce", MEDIUM, "Requires consistent watering due to quick drainage"),
                ("Strawberries", MEDIUM, "Enjoy the good drainage of sandy soils"),
            ],
            "Sandy soils will benefit from regular additions of compost to improve "
            "water and nutrient retention. More frequent watering is typically "
            "required.",
        ),
        SoilType.LOAM: _advice(
            [
                ("Tomatoes", HIGH, "Ideal conditions for tomato growth"),
                ("Corn", HIGH, "Thrives in nutrient-rich, well-draining loam"),
                ("Squash", HIGH, "Excellent for all types of squash"),
                ("Peppers", HIGH, "Perfect balance of drainage and moisture retention"),
                ("Most Vegetables", HIGH, "Loam is optimal for most garden vegetables"),
            ],
            "Loam soil is considered ideal for most crops. Maintain its quality with "
            "regular additions of organic matter.",
        ),
        SoilType.SILT: _advice(
            [
                ("Leafy Greens", HIGH, "Thrive in moisture-retentive silt soil"),
                ("Vine Crops", HIGH, "Do well in the fertile conditions of silt"),
                ("Root Vegetables", MEDIUM, "Good growth with proper management"),
                ("Onions", MEDIUM, "Grow well with adequate drainage"),
                ("Perennial Herbs", MEDIUM, "Can establish well in silt soils"),
            ],
            "Silt soils are naturally fertile but can benefit from additions that "
            "improve structure and prevent compaction.",
        ),
        SoilType.PEAT: _advice(
            [
                ("Blueberries", HIGH, "Thrive in acidic, moisture-rich peat soil"),
                ("Cranberries", HIGH, "Ideal acidic and wet conditions"),
                ("Lingonberries", HIGH, "Perfect for these acid-loving plants"),
                ("Rhododendrons", HIGH, "Ornamental shrubs that prefer acidic soil"),
                ("Azaleas", HIGH, "Flourish in acidic peat conditions"),
            ],
            "Peat soils are excellent for acid-loving plants but may need drainage "
            "improvements for some crops. Consider sustainability concerns with peat "
            "usage.",
        ),
        SoilType.CHALKY: _advice(
            [
                ("Lavender", HIGH, "Thrives in alkaline, free-draining soil"),
                ("Spinach", HIGH, "Tolerates alkaline conditions well"),
                ("Beets", HIGH, "Prefer slightly alkaline soil conditions"),
                ("Cabbage Family", MEDIUM, "Can adapt to chalky soils with amendments"),
                ("Sweet Corn", MEDIUM, "Can perform adequately with proper nutrients"),
            ],
            "Chalky soils may need addition of organic matter to improve water "
            "retention. Consider using acidifying fertilizers for plants that prefer "
            "lower pH.",
        ),
    }
)

GENERIC_RECOMMENDATIONS = _advice(
    [
        (
            "Mixed Vegetables",
            MEDIUM,
            "Various vegetables can be grown with appropriate amendments",
        ),
        ("Cover Crops", HIGH, "Consider cover crops to improve soil quality"),
        (
            "Native Plants",
            HIGH,
            "Local native plants often adapt well to regional soil conditions",
        ),
    ],
    "Consider testing your soil further to determine the best crops for your "
    "specific conditions.",
)


def get_crop_profile(soil_type: SoilType | str) -> CropRecommendations:
    """Strict catalog lookup.

    Raises:
        UnknownSoilTypeError: If the soil type has no dedicated crop list
    """
    parsed = SoilType.parse(soil_type)
    try:
        return CROP_CATALOG[parsed]
    except KeyError:
        raise UnknownSoilTypeError(str(soil_type)) from None


def recommend(soil_type: SoilType | str) -> CropRecommendations:
    """Crop recommendations for a soil type, generic for unknown labels."""
    try:
        return get_crop_profile(soil_type)
    except UnknownSoilTypeError:
        return GENERIC_RECOMMENDATIONS


def supported_soil_types() -> list[SoilType]:
    """Soil types with a dedicated crop list, in catalog order."""
    return list(CROP_CATALOG)
