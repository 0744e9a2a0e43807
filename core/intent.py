"""
Intent classification for Care-Bot.

Decides which handler answers an utterance. Rules are exact-match lookups
against the static menu catalog, checked in a fixed priority order, with
the step delimiter and model-code heuristic ahead of the FAQ fallback.
"""

from typing import Optional

from config.menus import (
    CARD_DETAIL_MENU, CARD_TOPIC_KEYWORDS, CATEGORY_KEYWORDS, MENU_KEYWORDS, SPECIAL_MAPPINGS,
)
from config.patterns import has_step_delimiter, looks_like_model_name
from core.context import Intent, IntentType
from core.structured_logging import get_logger

# Module-level logger
_logger = get_logger("core.intent")


class IntentClassifier:
    """
    Classifies one utterance into a routing intent.

    Priority order:
    1. MAIN_MENU - Empty input or menu keyword
    2. CATEGORY_MENU - Category keyword
    3. SPECIAL_ANSWER - Special mapping (결합할인, 선납)
    4. CARD_MENU - Card company name
    5. CARD_TOPIC - Card topic keyword
    6. FAQ_SEARCH - Exact catalog question or menu keyword (button round-trip)
    7. PRICE_STEP - Contains the step delimiter
    8. MODEL_LOOKUP - Looks like a model code
    9. FAQ_SEARCH - Fallback

    Example:
        classifier = IntentClassifier(faq_resolver)
        intent = classifier.classify("롯데카드")
        # Returns: Intent(type=CARD_MENU, confidence=1.0, payload="롯데카드")
    """

    def __init__(self, faq=None):
        """
        Args:
            faq: Optional FaqResolver used to recognise exact catalog
                questions before the price heuristics run
        """
        self.faq = faq

    def classify(self, utterance: Optional[str]) -> Intent:
        """
        Classify an utterance.

        Args:
            utterance: Raw user text (may be None or blank)

        Returns:
            Intent with type, confidence, reasoning and handler payload
        """
        text = (utterance or '').strip()

        _logger.debug(
            "Classifying intent",
            extra={"event": "intent_classify_start", "user_query": text}
        )

        # Priority 1: Main menu
        if not text:
            return Intent(
                type=IntentType.MAIN_MENU,
                confidence=1.0,
                reasoning="Empty utterance"
            )
        if text in MENU_KEYWORDS:
            return Intent(
                type=IntentType.MAIN_MENU,
                confidence=1.0,
                reasoning="Menu keyword"
            )

        # Priority 2: Category menu
        if text in CATEGORY_KEYWORDS:
            return Intent(
                type=IntentType.CATEGORY_MENU,
                confidence=1.0,
                reasoning="Category keyword",
                payload=CATEGORY_KEYWORDS[text]
            )

        # Priority 3: Special mappings
        if text in SPECIAL_MAPPINGS:
            return Intent(
                type=IntentType.SPECIAL_ANSWER,
                confidence=1.0,
                reasoning="Special mapping",
                payload=text
            )

        # Priority 4-5: Partner card flows
        if text in CARD_DETAIL_MENU:
            return Intent(
                type=IntentType.CARD_MENU,
                confidence=1.0,
                reasoning="Card company name",
                payload=text
            )
        if text in CARD_TOPIC_KEYWORDS:
            return Intent(
                type=IntentType.CARD_TOPIC,
                confidence=1.0,
                reasoning="Card topic without company",
                payload=CARD_TOPIC_KEYWORDS[text]
            )

        # Priority 6: Button round-trips go straight to the catalog
        if self._is_catalog_lookup(text):
            return Intent(
                type=IntentType.FAQ_SEARCH,
                confidence=1.0,
                reasoning="Exact catalog question or menu keyword",
                payload=text
            )

        # Priority 7-8: Price lookups
        if has_step_delimiter(text):
            return Intent(
                type=IntentType.PRICE_STEP,
                confidence=0.95,
                reasoning="Drill-down step key",
                payload=text
            )
        if looks_like_model_name(text):
            return Intent(
                type=IntentType.MODEL_LOOKUP,
                confidence=0.8,
                reasoning="Looks like a model code",
                payload=text
            )

        # Fallback: keyword search
        return Intent(
            type=IntentType.FAQ_SEARCH,
            confidence=0.5,
            reasoning="Free-text question",
            payload=text
        )

    # === Detection Methods ===

    def _is_catalog_lookup(self, text: str) -> bool:
        """Check if text is a catalog question or menu-entry keyword."""
        if self.faq is None:
            return False
        return (
            self.faq.find_by_question(text) is not None
            or self.faq.find_menu_by_keyword(text) is not None
        )
