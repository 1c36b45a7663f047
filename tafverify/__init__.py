"""METAR/TAF decoding and forecast verification."""

__version__ = "0.1.0"
