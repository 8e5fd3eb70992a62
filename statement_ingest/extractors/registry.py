"""Extractor registry: explicit selection or keyword auto-detection.

Detection order matters. Wallet exports mention the user's bank ("Paid by
HDFC Bank 4230") and bank narrations carry other banks' IFSC codes
("PUNB0...", "SBIN..."), so the more specific layouts are probed first and
the loosest identify tests (PNB, SBI) last.
"""

from __future__ import annotations

from ..logging_setup import get_logger
from .base import Extractor
from .generic import GENERIC
from .hdfc import HDFC, HDFC_SIMPLE
from .hdfc_credit_card import HDFC_CREDIT_CARD
from .icici import ICICI
from .pnb import PNB
from .sbi import SBI
from .wallets import GPAY, PHONEPE

logger = get_logger(__name__)

EXTRACTORS: tuple[Extractor, ...] = (
    HDFC_CREDIT_CARD,
    GPAY,
    PHONEPE,
    ICICI,
    HDFC,
    HDFC_SIMPLE,
    PNB,
    SBI,
)

_BY_KEY: dict[str, Extractor] = {e.key: e for e in (*EXTRACTORS, GENERIC)}


def _normalize_key(key: str) -> str:
    return key.strip().lower()


def get_extractor(key: str) -> Extractor | None:
    """Return the extractor registered under ``key`` (case-insensitive)."""

    return _BY_KEY.get(_normalize_key(key))


def available_sources() -> list[tuple[str, str]]:
    """``(key, name)`` pairs in detection order, generic fallback last."""

    return [(e.key, e.name) for e in (*EXTRACTORS, GENERIC)]


def detect_extractor(text: str) -> Extractor:
    for extractor in EXTRACTORS:
        if extractor.identify(text):
            return extractor
    return GENERIC


def select_extractor(text: str, explicit_key: str | None = None) -> Extractor:
    """Pick the extractor for ``text``.

    A registered ``explicit_key`` always wins. An unknown key is logged and
    ignored, after which the first extractor whose ``identify`` accepts the
    text is returned, falling back to the generic extractor.
    """

    if explicit_key and explicit_key.strip():
        chosen = get_extractor(explicit_key)
        if chosen is not None:
            logger.info("Using extractor %s (explicit)", chosen.key)
            return chosen
        logger.warning("Unknown statement source %r; falling back to auto-detection", explicit_key)

    chosen = detect_extractor(text)
    logger.info("Using extractor %s (detected)", chosen.key)
    return chosen


__all__ = [
    "EXTRACTORS",
    "GENERIC",
    "available_sources",
    "detect_extractor",
    "get_extractor",
    "select_extractor",
]
