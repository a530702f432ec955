"""Soil analysis and crop advice.

Provides:
- Soil type classification from texture composition or a location hash
- Soil property descriptions (measured or per-type profiles)
- Crop recommendations per soil type
- ISRIC SoilGrids composition lookup with automatic fallback
"""

from soil_advisor.soil.errors import (
    DataSourceError,
    InputValidationError,
    SoilAdvisorError,
    UnknownSoilTypeError,
)
from soil_advisor.soil.models import (
    CropRecommendations,
    SoilAnalysisResult,
    SoilType,
)
from soil_advisor.soil.service import SoilAnalysisService

__all__ = [
    "CropRecommendations",
    "DataSourceError",
    "InputValidationError",
    "SoilAdvisorError",
    "SoilAnalysisResult",
    "SoilAnalysisService",
    "SoilType",
    "UnknownSoilTypeError",
]
