"""Per-institution statement extractors and the registry that selects them."""

from .base import Extractor
from .registry import (
    EXTRACTORS,
    GENERIC,
    available_sources,
    detect_extractor,
    get_extractor,
    select_extractor,
)

__all__ = [
    "EXTRACTORS",
    "GENERIC",
    "Extractor",
    "available_sources",
    "detect_extractor",
    "get_extractor",
    "select_extractor",
]
