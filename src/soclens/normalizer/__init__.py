"""Normalization layer for raw SOC log documents.

Every raw document of unknown shape passes through LogNormalizer once;
downstream code reads the canonical NormalizedLog fields directly.
"""

from soclens.normalizer.log import LogNormalizer, normalize, normalize_all

__all__ = [
    "LogNormalizer",
    "normalize",
    "normalize_all",
]
