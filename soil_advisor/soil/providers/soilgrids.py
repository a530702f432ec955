"""ISRIC SoilGrids provider for soil texture and chemistry."""

import math
from typing import Any

import requests
from pydantic import ValidationError

from soil_advisor.config import ProviderConfig
from soil_advisor.http_cache import canonicalize_coords, get_session
from soil_advisor.logging_config import get_logger
from soil_advisor.soil.classifier import depth_band
from soil_advisor.soil.errors import DataSourceError
from soil_advisor.soil.models import SoilComposition
from soil_advisor.soil.providers.base import CompositionProviderBase

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "https://rest.isric.org/soilgrids/v2.0/properties/query"
DEFAULT_PROPERTIES = ("clay", "sand", "silt", "phh2o", "soc", "nitrogen", "bdod", "cec")

# SoilGrids publishes scaled integers; divide by d_factor for conventional
# units. Used when a layer omits its unit_measure block.
D_FACTORS = {
    "clay": 10,  # g/kg -> %
    "sand": 10,  # g/kg -> %
    "silt": 10,  # g/kg -> %
    "phh2o": 10,  # pH*10 -> pH
    "soc": 10,  # dg/kg -> g/kg
    "nitrogen": 100,  # cg/kg -> g/kg
    "bdod": 100,  # cg/cm³ -> kg/dm³
    "cec": 10,  # mmol(c)/kg -> cmol(c)/kg
}

# SoilGrids property code -> SoilComposition field
FIELD_NAMES = {
    "clay": "clay",
    "sand": "sand",
    "silt": "silt",
    "phh2o": "ph",
    "soc": "organic_carbon",
    "nitrogen": "nitrogen",
    "bdod": "bulk_density",
    "cec": "cec",
}

TEXTURE_PROPERTIES = ("clay", "sand", "silt")


class SoilGridsProvider(CompositionProviderBase):
    """ISRIC SoilGrids REST provider.

    Queries the point ``properties/query`` endpoint for the depth band that
    contains the sampling depth and converts the per-band mean values into a
    ``SoilComposition``.

    API Documentation: https://rest.isric.org/soilgrids/v2.0/docs
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 10.0,
        properties: tuple[str, ...] | list[str] = DEFAULT_PROPERTIES,
        value_statistic: str = "mean",
        session: requests.Session | None = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.properties = tuple(properties)
        self.value_statistic = value_statistic
        self._session = session

        missing = [p for p in TEXTURE_PROPERTIES if p not in self.properties]
        if missing:
            raise ValueError(f"SoilGrids properties must include {missing}")

    @classmethod
    def from_config(
        cls, config: ProviderConfig, session: requests.Session | None = None
    ) -> "SoilGridsProvider":
        """Build a provider from its configuration block."""
        return cls(
            endpoint=config.endpoint,
            timeout=config.timeout_s,
            properties=config.properties or DEFAULT_PROPERTIES,
            value_statistic=config.value_statistic,
            session=session,
        )

    @property
    def session(self) -> requests.Session:
        # Resolved lazily so tests can swap the shared session
        return self._session if self._session is not None else get_session()

    @property
    def name(self) -> str:
        return "ISRIC SoilGrids"

    @property
    def coverage_description(self) -> str:
        return "Global coverage at 250m resolution - texture and soil chemistry, 0-200cm"

    def is_available(self) -> bool:
        """Check if the SoilGrids REST service answers a minimal query."""
        params = [("lat", 0), ("lon", 0), ("property", "clay"), ("depth", "0-5cm")]
        try:
            response = self.session.get(self.endpoint, params=params, timeout=5)
        except requests.RequestException as e:
            logger.debug(f"SoilGrids availability check failed: {e}")
            return False
        return response.status_code == 200

    def get_composition(
        self, longitude: float, latitude: float, depth: float
    ) -> SoilComposition:
        """Get SoilGrids composition for the depth band containing ``depth``."""
        self.validate_coordinates(latitude, longitude)
        band = depth_band(depth).label

        payload = self._query(longitude, latitude, band)
        values = self._extract_band_values(payload, band)

        missing = [p for p in TEXTURE_PROPERTIES if values.get(p) is None]
        if missing:
            raise DataSourceError(
                f"no {', '.join(missing)} data for {band} at ({latitude}, {longitude})",
                provider=self.name,
            )

        fields: dict[str, Any] = {
            FIELD_NAMES[prop]: value
            for prop, value in values.items()
            if prop in FIELD_NAMES and value is not None
        }
        try:
            composition = SoilComposition(depth_band=band, **fields)
        except ValidationError as e:
            raise DataSourceError(
                f"implausible values in response: {e}", provider=self.name
            ) from e

        logger.info(
            f"Retrieved SoilGrids composition for ({latitude}, {longitude}) at {band}: "
            f"clay={composition.clay}% sand={composition.sand}% silt={composition.silt}%"
        )
        return composition

    def _query(self, longitude: float, latitude: float, band: str) -> dict:
        params: list[tuple[str, Any]] = [("lon", longitude), ("lat", latitude)]
        params += [("property", prop) for prop in self.properties]
        params += [("depth", band), ("value", self.value_statistic)]
        params = canonicalize_coords(params)

        logger.debug(f"Querying SoilGrids at ({latitude}, {longitude}) for {band}")

        try:
            response = self.session.get(
                self.endpoint, params=params, timeout=self.timeout
            )
        except requests.Timeout as e:
            raise DataSourceError(
                f"timed out after {self.timeout}s", provider=self.name
            ) from e
        except requests.RequestException as e:
            raise DataSourceError(f"request failed: {e}", provider=self.name) from e

        if not response.ok:
            raise DataSourceError(
                f"HTTP {response.status_code} {response.reason}", provider=self.name
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise DataSourceError(
                "response body is not valid JSON", provider=self.name
            ) from e

        if getattr(response, "from_cache", False):
            logger.debug("SoilGrids response served from cache")

        if not isinstance(payload, dict):
            raise DataSourceError("unexpected response structure", provider=self.name)
        return payload

    def _extract_band_values(self, payload: dict, band: str) -> dict[str, float | None]:
        """Pull the scaled statistic for each layer at ``band``."""
        try:
            layers = payload["properties"]["layers"]
        except (KeyError, TypeError) as e:
            raise DataSourceError(
                "response has no properties.layers", provider=self.name
            ) from e

        if not isinstance(layers, list):
            raise DataSourceError("properties.layers is not a list", provider=self.name)

        values: dict[str, float | None] = {}
        for layer in layers:
            try:
                prop = layer["name"]
                entry = next(
                    (d for d in layer["depths"] if d.get("label") == band), None
                )
                if entry is None:
                    continue
                raw = (entry.get("values") or {}).get(self.value_statistic)
                unit_measure = layer.get("unit_measure") or {}
                d_factor = unit_measure.get("d_factor") or D_FACTORS.get(prop, 1)
            except (KeyError, TypeError, AttributeError):
                logger.debug(f"Skipping malformed SoilGrids layer: {layer!r}")
                continue

            if raw is None:
                values[prop] = None
                continue

            try:
                scaled = float(raw) / float(d_factor)
            except (TypeError, ValueError) as e:
                raise DataSourceError(
                    f"non-numeric {prop} value {raw!r}", provider=self.name
                ) from e
            except (OverflowError, ZeroDivisionError) as e:
                raise DataSourceError(
                    f"unscalable {prop} value {raw!r} / {d_factor!r}", provider=self.name
                ) from e

            if not math.isfinite(scaled):
                raise DataSourceError(
                    f"non-finite {prop} value {raw!r}", provider=self.name
                )
            values[prop] = round(scaled, 2)

        return values
