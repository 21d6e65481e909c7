"""Perceptual hash-search client."""

from .client import DEFAULT_ENDPOINT, FuzzySearchClient

__all__ = [
    "DEFAULT_ENDPOINT",
    "FuzzySearchClient",
]
