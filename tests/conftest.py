"""
pytest configuration for soil-advisor tests.

Isolates the shared HTTP cache, cached settings and root logging handlers so
tests cannot leak state into each other.
"""

import logging

import pytest
import requests_cache

import soil_advisor.http_cache as hc
from soil_advisor.config import clear_settings_cache


@pytest.fixture(autouse=True)
def _route_all_test_cache_to_tmp(tmp_path):
    """Route all test cache to temp directory to preserve existing cache."""
    hc.reset_session()

    test_session = requests_cache.CachedSession(
        cache_name=str(tmp_path / "test_cache"),
        backend="sqlite",
        cache_control=True,
        allowable_codes=(200,),
    )
    hc.set_session_for_tests(test_session)

    yield

    hc.reset_session()


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Drop cached settings and provider env overrides around each test."""
    for var in ("SOILGRIDS_ENDPOINT", "SOILGRIDS_TIMEOUT", "SOILGRIDS_ENABLED"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo handler changes made by setup_logging (e.g. via CLI commands)."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in original_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in original_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(original_level)


def soilgrids_layer(
    name: str, mean: float | None, band: str = "15-30cm", d_factor: int | None = 10
) -> dict:
    """Build one SoilGrids properties/query layer."""
    layer: dict = {
        "name": name,
        "depths": [
            {
                "range": {"top_depth": 0, "bottom_depth": 5, "unit_depth": "cm"},
                "label": "0-5cm",
                "values": {"mean": 1},
            },
            {
                "range": {"unit_depth": "cm"},
                "label": band,
                "values": {"mean": mean},
            },
        ],
    }
    if d_factor is not None:
        layer["unit_measure"] = {"d_factor": d_factor, "mapped_units": "", "target_units": ""}
    return layer


@pytest.fixture
def soilgrids_payload():
    """A SoilGrids response for a loam at 15-30cm."""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [-74.006, 40.713]},
        "properties": {
            "layers": [
                soilgrids_layer("clay", 253),
                soilgrids_layer("sand", 412),
                soilgrids_layer("silt", 335),
                soilgrids_layer("phh2o", 62),
                soilgrids_layer("soc", 180),
                soilgrids_layer("nitrogen", 210, d_factor=100),
                soilgrids_layer("bdod", 130, d_factor=100),
                soilgrids_layer("cec", 150),
            ]
        },
        "query_time_s": 0.42,
    }


@pytest.fixture
def make_layer():
    """Factory for individual SoilGrids layers."""
    return soilgrids_layer
