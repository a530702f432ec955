"""Soil composition data providers."""

from soil_advisor.soil.providers.base import CompositionProviderBase
from soil_advisor.soil.providers.soilgrids import SoilGridsProvider

__all__ = ["CompositionProviderBase", "SoilGridsProvider"]
