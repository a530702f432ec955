"""Tests for soil analysis service orchestration."""

import logging
from unittest.mock import Mock

import pytest
import requests

from soil_advisor.soil import InputValidationError, SoilAnalysisService, SoilType
from soil_advisor.soil.errors import DataSourceError
from soil_advisor.soil.models import AnalysisSource, SoilComposition
from soil_advisor.soil.providers.base import CompositionProviderBase
from soil_advisor.soil.providers.soilgrids import SoilGridsProvider


class StaticProvider(CompositionProviderBase):
    """Provider that returns a fixed composition or raises a fixed error."""

    def __init__(self, composition=None, error=None):
        self.composition = composition
        self.error = error
        self.calls = []

    @property
    def name(self) -> str:
        return "Static"

    @property
    def coverage_description(self) -> str:
        return "Test fixture"

    def is_available(self) -> bool:
        return self.error is None

    def get_composition(self, longitude, latitude, depth):
        self.calls.append((longitude, latitude, depth))
        if self.error is not None:
            raise self.error
        return self.composition


@pytest.fixture
def offline_session():
    session = Mock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("network unreachable")
    return session


class TestFallbackPath:
    def test_end_to_end_without_composition_source(self, offline_session):
        service = SoilAnalysisService(provider=SoilGridsProvider(session=offline_session))

        result = service.analyze(-74.006, 40.713, 30)

        assert result.soil_type == SoilType.CHALKY
        assert result.source == AnalysisSource.FALLBACK
        assert result.composition is None
        assert result.description.startswith("Chalky soil")
        assert result.location.depth == 30
        assert abs(result.get_property("pH Level").value - 8.0) <= 0.4
        assert abs(result.get_property("Organic Matter").value - 1.5) <= 0.7
        assert abs(result.get_property("Nitrogen").value - 0.1) <= 0.04

        advice = service.recommend_crops(result.soil_type)
        assert len(advice.recommended_crops) == 5
        assert advice.recommended_crops[0].name == "Lavender"
        assert advice.notes.startswith("Chalky soils")

    def test_failure_is_logged_not_raised(self, caplog):
        provider = StaticProvider(error=DataSourceError("boom", provider="Static"))
        service = SoilAnalysisService(provider=provider)

        with caplog.at_level(logging.WARNING):
            result = service.analyze(0, 0, 0.0001)

        assert result.soil_type == SoilType.PEAT
        assert "using fallback classifier" in caplog.text
        assert "boom" in caplog.text

    def test_oversized_soilgrids_value_falls_back(self, soilgrids_payload, caplog):
        soilgrids_payload["properties"]["layers"][0]["depths"][1]["values"]["mean"] = 10**400
        session = Mock(spec=requests.Session)
        response = Mock(ok=True, status_code=200, from_cache=False)
        response.json.return_value = soilgrids_payload
        session.get.return_value = response
        service = SoilAnalysisService(provider=SoilGridsProvider(session=session))

        with caplog.at_level(logging.WARNING):
            result = service.analyze(-74.006, 40.713, 30)

        assert result.source == AnalysisSource.FALLBACK
        assert result.soil_type == SoilType.CHALKY
        assert "using fallback classifier" in caplog.text

    def test_remote_disabled_skips_provider(self):
        provider = StaticProvider(composition=SoilComposition(clay=50, sand=20, silt=30))
        service = SoilAnalysisService(provider=provider, use_remote=False)

        result = service.analyze(-74.006, 40.713, 30)

        assert provider.calls == []
        assert result.source == AnalysisSource.FALLBACK
        assert result.soil_type == SoilType.CHALKY

    def test_repeatable(self):
        service = SoilAnalysisService(use_remote=False)
        assert service.analyze(12.5, -8.25, 75) == service.analyze(12.5, -8.25, 75)


class TestCompositionPath:
    def test_uses_provider_composition(self):
        composition = SoilComposition(clay=45, sand=20, silt=35, ph=7.8, depth_band="15-30cm")
        provider = StaticProvider(composition=composition)
        service = SoilAnalysisService(provider=provider)

        result = service.analyze(-74.006, 40.713, 30)

        assert provider.calls == [(-74.006, 40.713, 30)]
        assert result.soil_type == SoilType.CLAY
        assert result.source == AnalysisSource.SOILGRIDS
        assert result.composition == composition
        assert result.properties[0].name == "Clay Content"
        assert result.get_property("Water Retention").value == "High"

    def test_soilgrids_response(self, soilgrids_payload):
        session = Mock(spec=requests.Session)
        response = Mock(ok=True, status_code=200, from_cache=False)
        response.json.return_value = soilgrids_payload
        session.get.return_value = response
        service = SoilAnalysisService(provider=SoilGridsProvider(session=session))

        result = service.analyze(-74.006, 40.713, 30)

        assert result.soil_type == SoilType.LOAM
        assert result.get_property("Clay Content").value == pytest.approx(25.3)


class TestValidation:
    @pytest.mark.parametrize(
        "longitude,latitude,depth",
        [
            (-180.0001, 0, 10),
            (180.0001, 0, 10),
            (0, 90.5, 10),
            (0, 0, 0),
            (0, 0, 200.0001),
        ],
    )
    def test_rejected_before_classification(self, longitude, latitude, depth):
        provider = StaticProvider(composition=SoilComposition(clay=50, sand=20, silt=30))
        service = SoilAnalysisService(provider=provider)

        with pytest.raises(InputValidationError):
            service.analyze(longitude, latitude, depth)
        assert provider.calls == []

    @pytest.mark.parametrize("longitude", [-180, 180])
    def test_boundaries_accepted(self, longitude):
        result = SoilAnalysisService(use_remote=False).analyze(longitude, 0, 200)
        assert result.soil_type in set(SoilType)


class TestRecommendations:
    def test_unknown_label(self):
        advice = SoilAnalysisService(use_remote=False).recommend_crops("Rocky")
        assert len(advice.recommended_crops) == 3

    def test_analyze_with_recommendations(self):
        service = SoilAnalysisService(
            provider=StaticProvider(composition=SoilComposition(clay=10, sand=20, silt=70))
        )

        result, advice = service.analyze_with_recommendations(5, 45, 10)

        assert result.soil_type == SoilType.SILT
        assert advice == service.recommend_crops(SoilType.SILT)
        assert advice.recommended_crops[0].name == "Leafy Greens"


class TestConfiguration:
    def test_from_config_defaults(self):
        service = SoilAnalysisService.from_config()
        assert service.use_remote is True
        assert isinstance(service.provider, SoilGridsProvider)
        assert service.provider.timeout == 10.0

    def test_env_can_disable_remote(self, monkeypatch):
        monkeypatch.setenv("SOILGRIDS_ENABLED", "false")
        assert SoilAnalysisService.from_config().use_remote is False

    def test_explicit_offline(self):
        assert SoilAnalysisService.from_config(use_remote=False).use_remote is False

    def test_provider_status(self):
        service = SoilAnalysisService(provider=StaticProvider(composition=None))
        status = service.get_provider_status()["static"]
        assert status == {
            "name": "Static",
            "enabled": True,
            "available": True,
            "coverage": "Test fixture",
        }

        offline = SoilAnalysisService(provider=StaticProvider(), use_remote=False)
        assert offline.get_provider_status()["static"]["available"] is False

    def test_provider_status_keyed_by_provider(self, offline_session):
        service = SoilAnalysisService(
            provider=SoilGridsProvider(session=offline_session), use_remote=False
        )
        assert list(service.get_provider_status()) == ["soilgrids"]
