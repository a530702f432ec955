"""Pydantic models for soil analysis and crop advice."""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from soil_advisor.soil.errors import InputValidationError


class SoilType(str, Enum):
    """Soil texture classes the analysis can resolve to."""

    CLAY = "Clay"
    SANDY = "Sandy"
    LOAM = "Loam"
    SILT = "Silt"
    PEAT = "Peat"
    CHALKY = "Chalky"
    CLAY_LOAM = "Clay Loam"
    SANDY_LOAM = "Sandy Loam"
    SILTY_LOAM = "Silty Loam"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, label: "str | SoilType | None") -> "SoilType":
        """Resolve a free-text label, returning UNKNOWN when nothing matches.

        Matching ignores case, spaces, hyphens and underscores, and accepts
        both display values ("Clay Loam") and member names ("CLAY_LOAM").
        """
        if isinstance(label, SoilType):
            return label
        if not label:
            return cls.UNKNOWN

        key = _squash(str(label))
        for member in cls:
            if key in (_squash(member.value), _squash(member.name)):
                return member
        return cls.UNKNOWN


def _squash(text: str) -> str:
    return re.sub(r"[\s_\-]+", "", text).lower()


class Suitability(str, Enum):
    """How well a crop matches a soil type."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnalysisSource(str, Enum):
    """Where the soil type of an analysis came from."""

    SOILGRIDS = "soilgrids"
    FALLBACK = "fallback"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )


class SoilProperty(_FrozenModel):
    """A single reported soil property; list order is display order."""

    name: str
    value: float | str
    unit: str | None = None
    description: str | None = None


class SampleLocation(_FrozenModel):
    """Where and how deep the sample was taken."""

    longitude: float
    latitude: float
    depth: float = Field(description="Sampling depth in cm")


class SoilComposition(_FrozenModel):
    """Measured or predicted composition at a location and depth band."""

    clay: float = Field(ge=0.0, le=100.0, description="Clay content (%)")
    sand: float = Field(ge=0.0, le=100.0, description="Sand content (%)")
    silt: float = Field(ge=0.0, le=100.0, description="Silt content (%)")
    ph: float | None = Field(None, ge=0.0, le=14.0, description="pH in water")
    organic_carbon: float | None = Field(
        None, ge=0.0, description="Soil organic carbon (g/kg)"
    )
    nitrogen: float | None = Field(None, ge=0.0, description="Total nitrogen (g/kg)")
    bulk_density: float | None = Field(
        None, ge=0.0, description="Bulk density of the fine earth (kg/dm³)"
    )
    cec: float | None = Field(
        None, ge=0.0, description="Cation exchange capacity (cmol(c)/kg)"
    )
    depth_band: str | None = Field(None, description="Depth band, e.g. '15-30cm'")


class SoilAnalysisResult(_FrozenModel):
    """Outcome of analysing one sampling location."""

    soil_type: SoilType
    properties: tuple[SoilProperty, ...] = ()
    description: str
    location: SampleLocation | None = None
    source: AnalysisSource = AnalysisSource.FALLBACK
    composition: SoilComposition | None = None

    def get_property(self, name: str) -> SoilProperty | None:
        """Look up a property by its display name."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


class Crop(_FrozenModel):
    """A recommended crop and how well it suits the soil."""

    name: str
    suitability: Suitability
    description: str


class CropRecommendations(_FrozenModel):
    """Ordered crop list plus growing notes for one soil type."""

    recommended_crops: tuple[Crop, ...]
    notes: str | None = None


class SoilFormData(_FrozenModel):
    """Validated analysis request."""

    model_config = ConfigDict(allow_inf_nan=False)

    longitude: float = Field(ge=-180.0, le=180.0)
    latitude: float = Field(ge=-90.0, le=90.0)
    depth: float = Field(gt=0.0, le=200.0, description="Sampling depth in cm")

    @classmethod
    def validate_input(
        cls, longitude: float, latitude: float, depth: float
    ) -> "SoilFormData":
        """Build a request, raising InputValidationError for any bad field."""
        try:
            return cls(longitude=longitude, latitude=latitude, depth=depth)
        except ValidationError as e:
            messages = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise InputValidationError(messages) from e

    def to_location(self) -> SampleLocation:
        return SampleLocation(
            longitude=self.longitude, latitude=self.latitude, depth=self.depth
        )
