"""Error taxonomy for soil analysis.

Only ``InputValidationError`` ever reaches a caller of the service; data
source failures and unknown soil types are absorbed by falling back.
"""


class SoilAdvisorError(Exception):
    """Base class for soil-advisor errors."""


class InputValidationError(SoilAdvisorError, ValueError):
    """Longitude, latitude or depth outside the accepted range."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class DataSourceError(SoilAdvisorError):
    """A composition provider could not supply usable data."""

    def __init__(self, message: str, provider: str | None = None):
        self.provider = provider
        prefix = f"{provider}: " if provider else ""
        super().__init__(f"{prefix}{message}")


class UnknownSoilTypeError(SoilAdvisorError, KeyError):
    """A soil type label has no entry in a catalog."""

    def __init__(self, soil_type: str):
        self.soil_type = soil_type
        super().__init__(soil_type)

    def __str__(self) -> str:
        return f"No catalog entry for soil type {self.soil_type!r}"
