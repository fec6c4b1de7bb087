"""Weatherism: current weather for your location or a searched city."""

__version__ = "0.1.0"
