"""Soil analysis service orchestration."""

import concurrent.futures

from soil_advisor.config import get_settings
from soil_advisor.logging_config import get_logger
from soil_advisor.soil import crops, properties
from soil_advisor.soil.classifier import classify
from soil_advisor.soil.errors import DataSourceError
from soil_advisor.soil.models import (
    AnalysisSource,
    CropRecommendations,
    SoilAnalysisResult,
    SoilComposition,
    SoilFormData,
    SoilType,
)
from soil_advisor.soil.providers.base import CompositionProviderBase
from soil_advisor.soil.providers.soilgrids import SoilGridsProvider

logger = get_logger(__name__)


class SoilAnalysisService:
    """Classifies a sampling location and looks up its properties and crops.

    A composition provider is tried first; if it is disabled or fails for any
    reason the location hash classifier is used instead, so a valid request
    always produces a result.
    """

    def __init__(
        self,
        provider: CompositionProviderBase | None = None,
        use_remote: bool = True,
    ):
        self.provider = provider if provider is not None else SoilGridsProvider()
        self.use_remote = use_remote
        logger.debug(
            f"Initialized SoilAnalysisService (provider={self.provider.name}, "
            f"remote={'on' if use_remote else 'off'})"
        )

    @classmethod
    def from_config(cls, use_remote: bool | None = None) -> "SoilAnalysisService":
        """Create a service from application settings."""
        settings = get_settings().soilgrids
        provider = SoilGridsProvider.from_config(settings)
        remote = settings.enabled if use_remote is None else (use_remote and settings.enabled)
        return cls(provider=provider, use_remote=remote)

    def analyze(self, longitude: float, latitude: float, depth: float) -> SoilAnalysisResult:
        """Analyze the soil at a location.

        Args:
            longitude: Longitude in decimal degrees [-180, 180]
            latitude: Latitude in decimal degrees [-90, 90]
            depth: Sampling depth in cm (0, 200]

        Returns:
            SoilAnalysisResult for the location

        Raises:
            InputValidationError: If any input is out of range
        """
        form = SoilFormData.validate_input(longitude, latitude, depth)
        composition = self._fetch_composition(form)
        soil_type = classify(form.longitude, form.latitude, form.depth, composition)
        return self._build_result(form, soil_type, composition)

    def recommend_crops(self, soil_type: SoilType | str) -> CropRecommendations:
        """Crop recommendations for a soil type label."""
        parsed = SoilType.parse(soil_type)
        if parsed is SoilType.UNKNOWN:
            logger.info(f"No crop list for soil type {soil_type!r}, using generic advice")
        return crops.recommend(parsed)

    def analyze_with_recommendations(
        self, longitude: float, latitude: float, depth: float
    ) -> tuple[SoilAnalysisResult, CropRecommendations]:
        """Analyze a location and recommend crops for the resolved soil type.

        The property and crop lookups both depend only on the classification,
        so they run side by side.
        """
        form = SoilFormData.validate_input(longitude, latitude, depth)
        composition = self._fetch_composition(form)
        soil_type = classify(form.longitude, form.latitude, form.depth, composition)

        with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
            result_future = executor.submit(
                self._build_result, form, soil_type, composition
            )
            crops_future = executor.submit(self.recommend_crops, soil_type)
            return result_future.result(), crops_future.result()

    def get_provider_status(self) -> dict[str, dict]:
        """Report whether the composition provider is enabled and reachable."""
        available = self.use_remote and self.provider.is_available()
        return {
            self.provider.key: {
                "name": self.provider.name,
                "enabled": self.use_remote,
                "available": available,
                "coverage": self.provider.coverage_description,
            }
        }

    def _fetch_composition(self, form: SoilFormData) -> SoilComposition | None:
        if not self.use_remote:
            logger.debug("Remote composition lookup disabled, using fallback classifier")
            return None

        try:
            return self.provider.get_composition(form.longitude, form.latitude, form.depth)
        except DataSourceError as e:
            logger.warning(f"Composition lookup failed, using fallback classifier: {e}")
            return None

    def _build_result(
        self,
        form: SoilFormData,
        soil_type: SoilType,
        composition: SoilComposition | None,
    ) -> SoilAnalysisResult:
        location = form.to_location()
        description, props = properties.describe_properties(
            soil_type, composition=composition, location=location
        )
        source = AnalysisSource.SOILGRIDS if composition is not None else AnalysisSource.FALLBACK

        logger.info(
            f"Classified ({form.latitude}, {form.longitude}) at {form.depth}cm "
            f"as {soil_type.value} [{source.value}]"
        )
        return SoilAnalysisResult(
            soil_type=soil_type,
            properties=props,
            description=description,
            location=location,
            source=source,
            composition=composition,
        )
