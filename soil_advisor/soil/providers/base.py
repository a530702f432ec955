"""Abstract base class for soil composition providers."""

from abc import ABC, abstractmethod

from soil_advisor.soil.models import SoilComposition


class CompositionProviderBase(ABC):
    """Abstract base class for soil composition providers.

    Providers report failures of any kind as ``DataSourceError`` so the
    service can fall back without knowing provider internals.
    """

    @abstractmethod
    def get_composition(
        self, longitude: float, latitude: float, depth: float
    ) -> SoilComposition:
        """Retrieve soil composition for a location and sampling depth.

        Args:
            longitude: Longitude in decimal degrees
            latitude: Latitude in decimal degrees
            depth: Sampling depth in cm

        Returns:
            SoilComposition for the depth band containing ``depth``

        Raises:
            ValueError: If coordinates are invalid
            DataSourceError: If the provider cannot supply usable data
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is currently reachable."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for identification and logging."""
        pass

    @property
    def key(self) -> str:
        """Short identifier for status reports, e.g. "soilgrids"."""
        return type(self).__name__.removesuffix("Provider").lower()

    @property
    @abstractmethod
    def coverage_description(self) -> str:
        """Description of geographic and data coverage."""
        pass

    def validate_coordinates(self, latitude: float, longitude: float) -> None:
        """Validate coordinate inputs.

        Raises:
            ValueError: If coordinates are invalid
        """
        if not (-90 <= latitude <= 90):
            raise ValueError(f"Latitude must be between -90 and 90, got {latitude}")

        if not (-180 <= longitude <= 180):
            raise ValueError(f"Longitude must be between -180 and 180, got {longitude}")
