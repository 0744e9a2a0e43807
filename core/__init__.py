"""Core business logic for Care-Bot."""

from core.context import (
    IntentType,
    Intent,
    CatalogEntry,
    PriceEntry,
    ModelMatch,
    SearchResult,
    StepKey,
    ReplyType,
    Reply,
)
from core.catalog import CatalogService, StaticCatalog
from core.intent import IntentClassifier
from core.faq import FaqResolver
from core.price_index import PriceIndex
from core.drilldown import PriceDrillDown

__all__ = [
    "IntentType",
    "Intent",
    "CatalogEntry",
    "PriceEntry",
    "ModelMatch",
    "SearchResult",
    "StepKey",
    "ReplyType",
    "Reply",
    "CatalogService",
    "StaticCatalog",
    "IntentClassifier",
    "FaqResolver",
    "PriceIndex",
    "PriceDrillDown",
]
