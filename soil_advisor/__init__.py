"""Soil Advisor: soil type classification and crop advice for a sampling location."""

__version__ = "0.1.0"
