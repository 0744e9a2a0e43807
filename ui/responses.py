"""
Response formatting for Care-Bot.

Renders every reply variant to display text plus quick-reply buttons, and
wraps the result in the chat platform's skill response envelope.
"""

from typing import Callable, Dict, List, Optional, Tuple

from config.menus import (
    BENEFIT_LABEL, CARD_DETAIL_MENU, CATEGORY_MENUS, ERROR_TEXT, HOME_LABEL, HOME_TEXT,
    MAIN_MENU_BUTTONS, MAIN_MENU_TEXT, NOT_FOUND_BUTTONS, NOT_FOUND_TEXT, PRICE_OTHER_MODEL_BUTTON,
    card_name_for_question,
)
from core.catalog import truncate_label
from core.context import (
    CareAxis, CardMenu, CardTopicMenu, CategoryMenu, DirectAnswer, Disambiguation, PriceAnswer,
    PriceEntry, PricePrompt, QuickButton, Reply, ReplyType,
)

SKILL_VERSION = '2.0'
MAX_ENTRY_BUTTONS = 5
MAX_RELATED_BUTTONS = 2
RELATED_LABEL_LIMIT = 12
RELATED_MIN_SCORE = 5
DEFAULT_URL_LABEL = '상세보기'

Rendered = Tuple[str, List[QuickButton]]

HOME_BUTTON = QuickButton(label=HOME_LABEL, text=HOME_TEXT)
OTHER_CARDS_BUTTON = QuickButton(label='💳 다른 카드사', text='제휴카드')


def _buttons(items: List[dict]) -> List[QuickButton]:
    return [QuickButton(label=item['label'], text=item['text']) for item in items]


# =============================================================================
# Price formatting
# =============================================================================

def format_price(price: Optional[int]) -> str:
    """
    Format a won amount.

    Example:
        >>> format_price(39900)
        "39,900원"
        >>> format_price(None)
        "-"
    """
    if not price:
        return '-'
    return f"{price:,}원"


def format_price_response(entry: PriceEntry, as_of: str = '') -> str:
    """
    Format the price table for one model and care plan.

    Only tiers with a value are listed, longest contract first. Prepayment
    lines appear only when both the lump sum and the monthly fee exist.
    """
    lines = [
        f"📦 {entry.product} | {entry.model_full}",
        f"🔧 케어십: {entry.care_combined}",
    ]
    if as_of:
        lines.append(f"📅 {as_of} 기준")
    lines.append('')

    lines.append('💰 월 구독료 (기본요금)')
    for years, price in (
        (6, entry.price6y), (5, entry.price5y), (4, entry.price4y), (3, entry.price3y),
    ):
        if price:
            lines.append(f"  • {years}년: {format_price(price)}")

    if entry.activation:
        lines.append('')
        lines.append(f"⚡ 활성화 금액: {format_price(entry.activation)}")

    if entry.prepay30_monthly or entry.prepay50_monthly:
        lines.append('')
        lines.append('📋 선납 시')
        for rate, lump, monthly in (
            (30, entry.prepay30_lump, entry.prepay30_monthly),
            (50, entry.prepay50_lump, entry.prepay50_monthly),
        ):
            if lump and monthly:
                lines.append(f"  • {rate}%: 선납금 {format_price(lump)} / 월 {format_price(monthly)}")

    return '\n'.join(lines)


# =============================================================================
# Reply rendering
# =============================================================================

class ResponseFormatter:
    """
    Renders replies for display.

    Every ReplyType has exactly one renderer; a reply type without one is a
    programming error and raises at construction time.

    Example:
        formatter = ResponseFormatter()
        text, buttons = formatter.render(reply)
        envelope = formatter.to_envelope(reply)
    """

    def __init__(self):
        """Build the renderer table."""
        self._renderers: Dict[ReplyType, Callable[[Reply], Rendered]] = {
            ReplyType.MAIN_MENU: self._render_main_menu,
            ReplyType.CATEGORY_MENU: self._render_category_menu,
            ReplyType.CARD_MENU: self._render_card_menu,
            ReplyType.CARD_TOPIC_MENU: self._render_card_topic_menu,
            ReplyType.DIRECT_ANSWER: self._render_direct_answer,
            ReplyType.DISAMBIGUATION: self._render_disambiguation,
            ReplyType.PRICE_ANSWER: self._render_price_answer,
            ReplyType.PRICE_PROMPT: self._render_price_prompt,
            ReplyType.NOT_FOUND: self._render_not_found,
            ReplyType.ERROR: self._render_error,
        }
        missing = [t.value for t in ReplyType if t not in self._renderers]
        if missing:
            raise ValueError(f"No renderer for reply types: {missing}")

    def render(self, reply: Reply) -> Rendered:
        """
        Render a reply.

        Returns:
            (text, quick-reply buttons)
        """
        return self._renderers[reply.type](reply)

    def to_envelope(self, reply: Reply) -> dict:
        """Render a reply as a skill response envelope."""
        text, buttons = self.render(reply)
        return build_envelope(text, buttons)

    # === Menus ===

    def _render_main_menu(self, reply: Reply) -> Rendered:
        return MAIN_MENU_TEXT, _buttons(MAIN_MENU_BUTTONS)

    def _render_category_menu(self, reply: CategoryMenu) -> Rendered:
        menu = CATEGORY_MENUS.get(reply.category)
        if menu is None:
            return self._render_main_menu(reply)
        return menu['title'], _buttons(menu['items']) + [HOME_BUTTON]

    def _render_card_menu(self, reply: CardMenu) -> Rendered:
        items = CARD_DETAIL_MENU.get(reply.card_name, [])
        text = f"💳 {reply.card_name} — 어떤 정보가 궁금하세요?"
        return text, _buttons(items) + [OTHER_CARDS_BUTTON, HOME_BUTTON]

    def _render_card_topic_menu(self, reply: CardTopicMenu) -> Rendered:
        text = f"💳 {reply.topic} — 어떤 카드사를 확인하시겠어요?"
        buttons = [QuickButton(label=name, text=name) for name in CARD_DETAIL_MENU]
        return text, buttons + [HOME_BUTTON]

    # === FAQ ===

    def _render_direct_answer(self, reply: DirectAnswer) -> Rendered:
        entry = reply.entry
        text = entry.answer
        if entry.url:
            text += f"\n\n🔗 {entry.url_label or DEFAULT_URL_LABEL}: {entry.url}"

        if reply.buttons is not None:
            buttons = list(reply.buttons)
        else:
            card_name = card_name_for_question(entry.question)
            if card_name:
                buttons = self._card_answer_buttons(card_name, entry.question)
            elif entry.quick_buttons:
                buttons = entry.quick_buttons[:MAX_ENTRY_BUTTONS]
            else:
                buttons = self._related_buttons(reply)

        return text, buttons + [HOME_BUTTON]

    def _card_answer_buttons(self, card_name: str, question: str) -> List[QuickButton]:
        """Follow-ups after a card detail answer."""
        buttons = []
        for item in CARD_DETAIL_MENU[card_name]:
            if item['label'] == BENEFIT_LABEL and item['text'] != question:
                buttons.append(QuickButton(label=f"{card_name} 혜택", text=item['text']))
        buttons.append(QuickButton(label=f"💳 {card_name} 다른 메뉴", text=card_name))
        buttons.append(OTHER_CARDS_BUTTON)
        return buttons

    def _related_buttons(self, reply: DirectAnswer) -> List[QuickButton]:
        """Next-ranked questions after the answered one."""
        others = [r for r in reply.related if r.entry.question != reply.entry.question]
        buttons = []
        for result in others[:MAX_RELATED_BUTTONS]:
            if result.score > RELATED_MIN_SCORE:
                question = result.entry.question
                label = f"🔍 {truncate_label(question, RELATED_LABEL_LIMIT)}"
                buttons.append(QuickButton(label=label, text=question))
        return buttons

    def _render_disambiguation(self, reply: Disambiguation) -> Rendered:
        text = f'🔍 "{reply.query}" 관련 항목이 여러 개 있어요.\n어떤 내용이 궁금하세요?'
        buttons = [
            QuickButton(label=truncate_label(c.entry.question), text=c.entry.question)
            for c in reply.candidates
        ]
        return text, buttons + [HOME_BUTTON]

    def _render_not_found(self, reply: Reply) -> Rendered:
        return NOT_FOUND_TEXT, _buttons(NOT_FOUND_BUTTONS) + [HOME_BUTTON]

    # === Price ===

    def _render_price_answer(self, reply: PriceAnswer) -> Rendered:
        text = format_price_response(reply.entry, reply.as_of)
        other_model = QuickButton(**PRICE_OTHER_MODEL_BUTTON)
        return text, [HOME_BUTTON, other_model]

    def _render_price_prompt(self, reply: PricePrompt) -> Rendered:
        match = reply.match
        step = reply.step
        lines = [f"📦 {match.product} | {match.model_full}"]
        if reply.axis == CareAxis.CARE_TYPE:
            lines.append('')
            lines.append('케어십 유형을 선택해주세요!')
        elif reply.axis == CareAxis.CARE_DETAIL:
            lines.append(f"🔧 케어십: {step.care_type}")
            lines.append('')
            lines.append('세부 유형을 선택해주세요!')
        else:
            chosen = ' > '.join(v for v in (step.care_type, step.care_detail) if v)
            lines.append(f"🔧 케어십: {chosen}")
            lines.append('')
            lines.append('방문주기를 선택해주세요!')
        return '\n'.join(lines), list(reply.options) + [HOME_BUTTON]

    # === Errors ===

    def _render_error(self, reply: Reply) -> Rendered:
        return ERROR_TEXT, [HOME_BUTTON]


# =============================================================================
# Envelope
# =============================================================================

def build_envelope(text: str, buttons: Optional[List[QuickButton]] = None) -> dict:
    """
    Wrap text and buttons in the skill response envelope.

    quickReplies is omitted when there are no buttons.

    Example:
        >>> build_envelope("안녕하세요", [])
        {"version": "2.0", "template": {"outputs": [{"simpleText": {"text": "안녕하세요"}}]}}
    """
    template = {'outputs': [{'simpleText': {'text': text}}]}
    if buttons:
        template['quickReplies'] = [
            {'messageText': b.text, 'action': 'message', 'label': b.label}
            for b in buttons
        ]
    return {'version': SKILL_VERSION, 'template': template}


# Singleton instance
_response_formatter = ResponseFormatter()


def get_response_formatter() -> ResponseFormatter:
    """
    Get the response formatter instance.

    Returns:
        ResponseFormatter instance

    Example:
        >>> formatter = get_response_formatter()
        >>> envelope = formatter.to_envelope(MainMenu())
    """
    return _response_formatter
