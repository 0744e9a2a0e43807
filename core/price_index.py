"""
Price catalog index for Care-Bot.

Matches a user-typed model code against the price table with a cascading
strategy, first tier with any hits wins:
- Tier 1: Exact full-code match
- Tier 2: Base-code match (dotted revision suffix removed)
- Tier 3: Partial match, only when it stays within a few base models

Matches are grouped into one ModelMatch per query, deduplicated by care plan.
"""

import re
from typing import List, Optional

from core.catalog import CatalogService
from core.context import ModelMatch, PriceEntry
from core.structured_logging import get_logger

_logger = get_logger("core.price_index")

MIN_QUERY_LENGTH = 3
MAX_PARTIAL_BASE_MODELS = 5

_WHITESPACE = re.compile(r'\s+')
_NON_MODEL_CHARS = re.compile(r'[^A-Z0-9\-]')


def normalize_model(text: str) -> str:
    """
    Normalize a model code for comparison.

    Upper-cases, drops whitespace and keeps only letters, digits and hyphens.

    Example:
        >>> normalize_model("a720 wa.akor")
        "A720WAAKOR"
    """
    return _NON_MODEL_CHARS.sub('', _WHITESPACE.sub('', text.upper()))


def extract_base_model(full_code: str) -> str:
    """
    Strip a trailing dotted suffix from a full model code.

    Example:
        >>> extract_base_model("A720WA.AKOR")
        "A720WA"
    """
    code = full_code.upper().strip()
    dot_index = code.rfind('.')
    if dot_index > 0:
        code = code[:dot_index]
    return code


def group_by_model(items: List[PriceEntry]) -> ModelMatch:
    """
    Wrap matched rows as one ModelMatch.

    The first row supplies the model code and product name; rows repeating
    a care_combined value are dropped (first occurrence wins).
    """
    first = items[0]
    seen = set()
    unique = []
    for item in items:
        if item.care_combined in seen:
            continue
        seen.add(item.care_combined)
        unique.append(item)
    return ModelMatch(model_full=first.model_full, product=first.product, care_types=unique)


class PriceIndex:
    """
    Model-code lookups over the price catalog.

    Example:
        index = PriceIndex(catalog)
        match = index.search_price("A720WA")
        entry = index.get_price_by_model_and_care("A720WA", "방문관리")
    """

    def __init__(self, catalog: CatalogService):
        self.catalog = catalog

    @property
    def price_as_of(self) -> str:
        return self.catalog.price_as_of

    def search_price(self, model_query: str) -> Optional[ModelMatch]:
        """
        Find the price rows for a model code.

        Args:
            model_query: Model code as typed by the user

        Returns:
            ModelMatch for the first tier with hits, or None when the query
            is shorter than MIN_QUERY_LENGTH after normalization or no tier
            matches.
        """
        query = normalize_model(model_query)
        if len(query) < MIN_QUERY_LENGTH:
            return None

        data = self.catalog.price_entries

        # Tier 1: exact full code
        exact = [item for item in data if normalize_model(item.model_full) == query]
        if exact:
            self._log_match(model_query, "exact", exact)
            return group_by_model(exact)

        # Tier 2: base code equal / containing / contained
        base_matches = []
        for item in data:
            base = normalize_model(extract_base_model(item.model_full))
            if base == query or query in base or base in query:
                base_matches.append(item)
        if base_matches:
            self._log_match(model_query, "base", base_matches)
            return group_by_model(base_matches)

        # Tier 3: partial, bounded fan-out
        partial = []
        for item in data:
            full = normalize_model(item.model_full)
            base = normalize_model(extract_base_model(item.model_full))
            if query in full or query in base:
                partial.append(item)
        if partial:
            base_models = {extract_base_model(item.model_full) for item in partial}
            if len(base_models) <= MAX_PARTIAL_BASE_MODELS:
                self._log_match(model_query, "partial", partial)
                return group_by_model(partial)
            _logger.debug(
                f"Partial model match too broad: {len(base_models)} models",
                extra={"event": "price_match_too_broad", "user_query": model_query}
            )

        return None

    def get_price_by_model_and_care(self, model_query: str, care_label: str) -> Optional[PriceEntry]:
        """
        First price row matching both a model code and a care plan.

        The model matches when its full or base code equals or contains the
        query; the care plan matches when care_type equals the label or
        care_combined contains it. Rows are checked in load order and the
        first hit is returned.
        """
        query = normalize_model(model_query)
        care = care_label.strip()
        if len(query) < MIN_QUERY_LENGTH or not care:
            return None

        for item in self.catalog.price_entries:
            full = normalize_model(item.model_full)
            base = normalize_model(extract_base_model(item.model_full))
            model_match = query in full or query in base
            care_match = item.care_type == care or care in item.care_combined
            if model_match and care_match:
                return item
        return None

    def _log_match(self, model_query: str, tier: str, items: List[PriceEntry]) -> None:
        _logger.debug(
            f"Price match ({tier}): {len(items)} rows",
            extra={
                "event": "price_match",
                "user_query": model_query,
                "model": items[0].model_full,
            }
        )
