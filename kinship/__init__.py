"""Kinship network: reciprocal relationship resolution and graph upkeep."""

__version__ = "0.1.0"
