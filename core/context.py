"""
Core data models for Care-Bot.

Defines the routing intent, the catalog records, transient search/match
values, the decoded drill-down step key and the reply variants produced
for each utterance.
These are pure Python dataclasses with no external dependencies.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from config.patterns import STEP_DELIMITER


class IntentType(Enum):
    """
    Routing decisions for one utterance, in priority order.

    1. MAIN_MENU - Empty input or a menu keyword
    2. CATEGORY_MENU - A category name from the main menu
    3. SPECIAL_ANSWER - Fixed answer with fixed follow-ups
    4. CARD_MENU - A partner card company name
    5. CARD_TOPIC - A card topic without a company ("실적제외")
    6. PRICE_STEP - Encoded drill-down step key
    7. MODEL_LOOKUP - Something that looks like a model code
    8. FAQ_SEARCH - Everything else
    """
    MAIN_MENU = "main_menu"
    CATEGORY_MENU = "category_menu"
    SPECIAL_ANSWER = "special_answer"
    CARD_MENU = "card_menu"
    CARD_TOPIC = "card_topic"
    PRICE_STEP = "price_step"
    MODEL_LOOKUP = "model_lookup"
    FAQ_SEARCH = "faq_search"


@dataclass
class Intent:
    """
    Routing decision with metadata.

    Attributes:
        type: Intent classification
        confidence: Confidence score (0.0-1.0)
        reasoning: Why this intent was selected
        payload: Lookup key for the handler (category, card name, ...)
    """
    type: IntentType
    confidence: float
    reasoning: str
    payload: Optional[str] = None

    def __str__(self) -> str:
        return f"Intent({self.type.value}, confidence={self.confidence:.2f})"


class EntryType(Enum):
    """Catalog entry kinds. MENU entries never take part in scoring."""
    MENU = "menu"
    MENU_WITH_ANSWER = "menu_with_answer"
    ANSWER = "answer"


@dataclass(frozen=True)
class QuickButton:
    """Suggested follow-up: display label and the text sent when tapped."""
    label: str
    text: str


@dataclass(frozen=True)
class CatalogEntry:
    """
    One FAQ or menu record.

    Attributes:
        type: Entry kind (menu, menu_with_answer, answer)
        category: Catalog category (e.g. "계약")
        question: Canonical trigger phrase, also the payload of buttons
        keywords: Trigger keywords, in catalog order
        answer: Answer text
        url: Optional link appended to the answer
        url_label: Label shown before the link
        quick_buttons: Suggested follow-ups configured for the entry
    """
    type: EntryType
    category: str
    question: str
    keywords: List[str]
    answer: str
    url: Optional[str] = None
    url_label: Optional[str] = None
    quick_buttons: List[QuickButton] = field(default_factory=list)

    @property
    def is_menu(self) -> bool:
        return self.type == EntryType.MENU


@dataclass(frozen=True)
class PriceEntry:
    """
    One subscription price row for a model and care plan.

    Attributes:
        model_full: Full catalog code, possibly with a dotted suffix
        product: Display name
        care_type: First care axis (e.g. "방문관리")
        care_detail: Second care axis
        visit_cycle: Third care axis
        care_combined: Composite of the three axes, unique within a model
        price3y..price6y: Monthly fee per contract length
        activation: One-time activation fee
        prepay30_lump/prepay30_monthly: 30% prepayment amount and monthly fee
        prepay50_lump/prepay50_monthly: 50% prepayment amount and monthly fee
    """
    model_full: str
    product: str
    care_type: str = ""
    care_detail: str = ""
    visit_cycle: str = ""
    care_combined: str = ""
    price3y: Optional[int] = None
    price4y: Optional[int] = None
    price5y: Optional[int] = None
    price6y: Optional[int] = None
    activation: Optional[int] = None
    prepay30_lump: Optional[int] = None
    prepay30_monthly: Optional[int] = None
    prepay50_lump: Optional[int] = None
    prepay50_monthly: Optional[int] = None


@dataclass
class ModelMatch:
    """Price entries for one matched model, deduplicated by care plan."""
    model_full: str
    product: str
    care_types: List[PriceEntry]


@dataclass
class SearchResult:
    """A scored FAQ candidate."""
    entry: CatalogEntry
    score: int


class CareAxis(Enum):
    """
    Care plan axes in drill-down order.

    The value is the PriceEntry / StepKey attribute name.
    """
    CARE_TYPE = "care_type"
    CARE_DETAIL = "care_detail"
    VISIT_CYCLE = "visit_cycle"


CARE_AXES = [CareAxis.CARE_TYPE, CareAxis.CARE_DETAIL, CareAxis.VISIT_CYCLE]


@dataclass(frozen=True)
class StepKey:
    """
    Decoded drill-down payload: model plus the care axes chosen so far.

    None means the axis is not chosen yet; an empty string means it was
    chosen but the data has no value for it.
    """
    model: str
    care_type: Optional[str] = None
    care_detail: Optional[str] = None
    visit_cycle: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> "StepKey":
        """
        Decode "model[::careType[::careDetail[::visitCycle]]]".

        Positions present in the string count as chosen, even when blank.
        Anything after the fourth segment is ignored.
        """
        parts = [part.strip() for part in raw.split(STEP_DELIMITER)]
        parts += [None] * (4 - len(parts))
        model, care_type, care_detail, visit_cycle = parts[:4]
        return cls(model or "", care_type, care_detail, visit_cycle)

    def get(self, axis: CareAxis) -> Optional[str]:
        return getattr(self, axis.value)

    def with_axis(self, axis: CareAxis, value: str) -> "StepKey":
        return replace(self, **{axis.value: value})

    def encode(self) -> str:
        """Encode back to the wire form, stopping at the first unchosen axis."""
        parts = [self.model]
        for axis in CARE_AXES:
            value = self.get(axis)
            if value is None:
                break
            parts.append(value)
        return STEP_DELIMITER.join(parts)

    def chosen_values(self) -> List[str]:
        """Non-blank chosen axis values, in axis order."""
        return [v for v in (self.get(axis) for axis in CARE_AXES) if v]


# =============================================================================
# Reply variants
# =============================================================================

class ReplyType(Enum):
    """Every reply the bot can produce. The formatter handles each one."""
    MAIN_MENU = "main_menu"
    CATEGORY_MENU = "category_menu"
    CARD_MENU = "card_menu"
    CARD_TOPIC_MENU = "card_topic_menu"
    DIRECT_ANSWER = "direct_answer"
    DISAMBIGUATION = "disambiguation"
    PRICE_ANSWER = "price_answer"
    PRICE_PROMPT = "price_prompt"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class Reply:
    """Base reply. Subclasses fix `type` and carry their own payload."""
    type: ReplyType = field(init=False)

    def log_fields(self) -> Dict[str, Any]:
        """Fields describing this reply for conversation logs."""
        return {}


@dataclass
class MainMenu(Reply):
    type: ReplyType = field(default=ReplyType.MAIN_MENU, init=False)


@dataclass
class CategoryMenu(Reply):
    category: str = ""
    type: ReplyType = field(default=ReplyType.CATEGORY_MENU, init=False)

    def log_fields(self) -> Dict[str, Any]:
        return {"category": self.category}


@dataclass
class CardMenu(Reply):
    card_name: str = ""
    type: ReplyType = field(default=ReplyType.CARD_MENU, init=False)

    def log_fields(self) -> Dict[str, Any]:
        return {"category": self.card_name}


@dataclass
class CardTopicMenu(Reply):
    topic: str = ""
    type: ReplyType = field(default=ReplyType.CARD_TOPIC_MENU, init=False)

    def log_fields(self) -> Dict[str, Any]:
        return {"category": self.topic}


@dataclass
class DirectAnswer(Reply):
    """
    Answer with one catalog entry.

    Attributes:
        entry: The chosen entry
        related: Full ranked result list (used for related-question buttons)
        buttons: Fixed follow-ups that replace the computed ones
    """
    entry: Optional[CatalogEntry] = None
    related: List[SearchResult] = field(default_factory=list)
    buttons: Optional[List[QuickButton]] = None
    type: ReplyType = field(default=ReplyType.DIRECT_ANSWER, init=False)

    def log_fields(self) -> Dict[str, Any]:
        return {
            "matched_question": self.entry.question if self.entry else None,
            "top_score": self.related[0].score if self.related else None,
        }


@dataclass
class Disambiguation(Reply):
    query: str = ""
    candidates: List[SearchResult] = field(default_factory=list)
    type: ReplyType = field(default=ReplyType.DISAMBIGUATION, init=False)

    def log_fields(self) -> Dict[str, Any]:
        return {
            "matched_question": "|".join(c.entry.question for c in self.candidates),
            "top_score": self.candidates[0].score if self.candidates else None,
        }


@dataclass
class PriceAnswer(Reply):
    entry: Optional[PriceEntry] = None
    as_of: str = ""
    type: ReplyType = field(default=ReplyType.PRICE_ANSWER, init=False)

    def log_fields(self) -> Dict[str, Any]:
        return {"model": self.entry.model_full if self.entry else None}


@dataclass
class PricePrompt(Reply):
    """
    Ask the user to choose a value for the next care axis.

    Attributes:
        axis: Axis being asked for
        match: Matched model
        step: Step key chosen so far
        options: (label, payload step key) pairs
    """
    axis: CareAxis = CareAxis.CARE_TYPE
    match: Optional[ModelMatch] = None
    step: Optional[StepKey] = None
    options: List[QuickButton] = field(default_factory=list)
    type: ReplyType = field(default=ReplyType.PRICE_PROMPT, init=False)

    def log_fields(self) -> Dict[str, Any]:
        return {"model": self.match.model_full if self.match else None}


@dataclass
class NotFound(Reply):
    query: str = ""
    type: ReplyType = field(default=ReplyType.NOT_FOUND, init=False)


@dataclass
class ErrorReply(Reply):
    type: ReplyType = field(default=ReplyType.ERROR, init=False)
