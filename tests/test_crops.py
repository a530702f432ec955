"""Tests for the crop advisory catalog."""

import pytest

from soil_advisor.soil.crops import (
    CROP_CATALOG,
    GENERIC_RECOMMENDATIONS,
    get_crop_profile,
    recommend,
    supported_soil_types,
)
from soil_advisor.soil.errors import UnknownSoilTypeError
from soil_advisor.soil.models import SoilType, Suitability

PRIMARY_TYPES = [
    SoilType.CLAY,
    SoilType.SANDY,
    SoilType.LOAM,
    SoilType.SILT,
    SoilType.PEAT,
    SoilType.CHALKY,
]


class TestRecommend:
    def test_loam(self):
        advice = recommend("Loam")
        crops = {crop.name: crop.suitability for crop in advice.recommended_crops}

        assert len(advice.recommended_crops) == 5
        assert crops["Tomatoes"] == Suitability.HIGH
        assert crops["Corn"] == Suitability.HIGH
        assert crops["Most Vegetables"] == Suitability.HIGH
        assert "organic matter" in advice.notes

    @pytest.mark.parametrize("soil_type", PRIMARY_TYPES)
    def test_primary_types_have_five_crops_and_notes(self, soil_type):
        advice = recommend(soil_type)
        assert len(advice.recommended_crops) == 5
        assert advice.notes
        assert advice is not GENERIC_RECOMMENDATIONS

    def test_order_preserved(self):
        names = [crop.name for crop in recommend(SoilType.CLAY).recommended_crops]
        assert names == [
            "Broccoli",
            "Cabbage",
            "Brussels Sprouts",
            "Summer Squash",
            "Beans",
        ]

    def test_pure(self):
        first = recommend("Peat")
        second = recommend("Peat")
        assert first == second
        assert first.model_dump() == second.model_dump()

    @pytest.mark.parametrize(
        "label",
        ["Rocky", "Unknown", SoilType.UNKNOWN, SoilType.CLAY_LOAM, "Sandy Loam", ""],
    )
    def test_unrecognized_labels_get_generic_advice(self, label):
        advice = recommend(label)
        assert advice == GENERIC_RECOMMENDATIONS
        assert [crop.name for crop in advice.recommended_crops] == [
            "Mixed Vegetables",
            "Cover Crops",
            "Native Plants",
        ]
        assert advice.notes.startswith("Consider testing your soil further")

    def test_labels_are_parsed_leniently(self):
        assert recommend("chalky") is CROP_CATALOG[SoilType.CHALKY]


class TestStrictLookup:
    def test_known(self):
        assert get_crop_profile(SoilType.SILT) is CROP_CATALOG[SoilType.SILT]

    def test_unknown_raises(self):
        with pytest.raises(UnknownSoilTypeError) as exc_info:
            get_crop_profile("Rocky")
        assert "Rocky" in str(exc_info.value)
        assert isinstance(exc_info.value, KeyError)

    def test_supported_soil_types(self):
        assert supported_soil_types() == PRIMARY_TYPES
