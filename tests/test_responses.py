"""
Tests for reply rendering and the skill response envelope.
"""

import pytest

from config.menus import (
    CARD_DETAIL_MENU, ERROR_TEXT, HOME_LABEL, HOME_TEXT, MAIN_MENU_TEXT, NOT_FOUND_TEXT,
)
from core.context import (
    CareAxis, CardMenu, CardTopicMenu, CatalogEntry, CategoryMenu, DirectAnswer, Disambiguation,
    EntryType, ErrorReply, MainMenu, ModelMatch, NotFound, PriceAnswer, PriceEntry, PricePrompt,
    QuickButton, ReplyType, SearchResult, StepKey,
)
from ui.responses import (
    HOME_BUTTON, OTHER_CARDS_BUTTON, ResponseFormatter, build_envelope, format_price,
    format_price_response, get_response_formatter,
)


def make_entry(question, answer="답변", quick_buttons=None, url=None, url_label=None):
    return CatalogEntry(
        type=EntryType.ANSWER,
        category="계약",
        question=question,
        keywords=[question],
        answer=answer,
        url=url,
        url_label=url_label,
        quick_buttons=quick_buttons or [],
    )


@pytest.fixture
def formatter():
    return ResponseFormatter()


@pytest.fixture
def vacuum():
    return PriceEntry(
        model_full="A720WA.AKOR",
        product="코드제로 청소기",
        care_type="방문관리",
        care_detail="스탠다드",
        visit_cycle="6개월",
        care_combined="방문관리 스탠다드 6개월",
        price3y=42900,
        price4y=37900,
        price5y=34900,
        price6y=32900,
    )


# === PRICE FORMATTING ===

class TestFormatPrice:

    def test_thousands_separator(self):
        assert format_price(39900) == "39,900원"

    def test_missing(self):
        assert format_price(None) == "-"

    def test_zero(self):
        assert format_price(0) == "-"


class TestFormatPriceResponse:
    """Price table layout."""

    def test_three_year_only(self):
        entry = PriceEntry(
            model_full="A720WA.AKOR",
            product="청소기",
            care_type="자가관리",
            care_combined="자가관리",
            price3y=35900,
        )
        assert format_price_response(entry) == (
            "📦 청소기 | A720WA.AKOR\n"
            "🔧 케어십: 자가관리\n"
            "\n"
            "💰 월 구독료 (기본요금)\n"
            "  • 3년: 35,900원"
        )

    def test_longest_contract_first(self, vacuum):
        text = format_price_response(vacuum)
        assert text.index("6년: 32,900원") < text.index("3년: 42,900원")

    def test_as_of_line(self, vacuum):
        assert "📅 2026-01-05 기준" in format_price_response(vacuum, "2026-01-05")

    def test_no_as_of_line_without_date(self, vacuum):
        assert "기준" not in format_price_response(vacuum)

    def test_activation(self):
        entry = PriceEntry(model_full="M1", product="p", price3y=1000, activation=100000)
        assert "⚡ 활성화 금액: 100,000원" in format_price_response(entry)

    def test_prepay_needs_lump_and_monthly(self):
        entry = PriceEntry(
            model_full="M1",
            product="p",
            price3y=1000,
            prepay30_lump=710000,
            prepay30_monthly=23000,
            prepay50_monthly=16400,
        )
        text = format_price_response(entry)
        assert "📋 선납 시" in text
        assert "30%: 선납금 710,000원 / 월 23,000원" in text
        assert "50%" not in text

    def test_no_prepay_section(self, vacuum):
        assert "선납" not in format_price_response(vacuum)


# === MENUS ===

class TestMenus:

    def test_main_menu(self, formatter):
        text, buttons = formatter.render(MainMenu())
        assert text == MAIN_MENU_TEXT
        assert [b.text for b in buttons] == ["계약", "제휴카드", "케어서비스", "가격표", "기타"]
        assert HOME_BUTTON not in buttons

    def test_category_menu(self, formatter):
        text, buttons = formatter.render(CategoryMenu(category="기타"))
        assert text.startswith("❓ 기타 문의")
        assert [b.text for b in buttons] == ["배송변경", "LG 고객센터", "간편조회", HOME_TEXT]

    def test_price_category_has_only_home(self, formatter):
        text, buttons = formatter.render(CategoryMenu(category="가격표"))
        assert "모델명을 직접 입력해주세요" in text
        assert buttons == [HOME_BUTTON]

    def test_unknown_category_shows_main_menu(self, formatter):
        text, _ = formatter.render(CategoryMenu(category="없는메뉴"))
        assert text == MAIN_MENU_TEXT

    def test_card_menu(self, formatter):
        text, buttons = formatter.render(CardMenu(card_name="롯데카드"))
        assert text == "💳 롯데카드 — 어떤 정보가 궁금하세요?"
        assert buttons[0].text == "롯데카드 혜액"
        assert buttons[-2:] == [OTHER_CARDS_BUTTON, HOME_BUTTON]

    def test_card_topic_menu(self, formatter):
        text, buttons = formatter.render(CardTopicMenu(topic="실적제외"))
        assert text == "💳 실적제외 — 어떤 카드사를 확인하시겠어요?"
        assert [b.text for b in buttons[:-1]] == list(CARD_DETAIL_MENU)
        assert buttons[-1] == HOME_BUTTON


# === FAQ ANSWERS ===

class TestDirectAnswer:
    """Answer text and follow-up button priority."""

    def test_answer_text(self, formatter):
        text, buttons = formatter.render(DirectAnswer(entry=make_entry("해약금", "해약금 안내")))
        assert text == "해약금 안내"
        assert buttons == [HOME_BUTTON]

    def test_url_line(self, formatter):
        entry = make_entry("간편조회", "조회 안내", url="https://www.lge.co.kr", url_label="바로가기")
        text, _ = formatter.render(DirectAnswer(entry=entry))
        assert text == "조회 안내\n\n🔗 바로가기: https://www.lge.co.kr"

    def test_url_default_label(self, formatter):
        entry = make_entry("간편조회", "조회 안내", url="https://www.lge.co.kr")
        text, _ = formatter.render(DirectAnswer(entry=entry))
        assert text.endswith("🔗 상세보기: https://www.lge.co.kr")

    def test_fixed_buttons_first(self, formatter):
        fixed = [QuickButton(label="선납할인", text="선납 할인율")]
        entry = make_entry("결합할인율", quick_buttons=[QuickButton(label="x", text="y")])
        _, buttons = formatter.render(DirectAnswer(entry=entry, buttons=fixed))
        assert buttons == fixed + [HOME_BUTTON]

    def test_card_answer_buttons(self, formatter):
        _, buttons = formatter.render(DirectAnswer(entry=make_entry("롯데카드 실적제외")))
        assert [(b.label, b.text) for b in buttons] == [
            ("롯데카드 혜택", "롯데카드 혜액"),
            ("💳 롯데카드 다른 메뉴", "롯데카드"),
            (OTHER_CARDS_BUTTON.label, OTHER_CARDS_BUTTON.text),
            (HOME_LABEL, HOME_TEXT),
        ]

    def test_card_benefit_answer_has_no_benefit_button(self, formatter):
        _, buttons = formatter.render(DirectAnswer(entry=make_entry("롯데카드 혜액")))
        assert buttons[0].text == "롯데카드"

    def test_entry_quick_buttons_capped(self, formatter):
        quick = [QuickButton(label=str(n), text=str(n)) for n in range(7)]
        _, buttons = formatter.render(DirectAnswer(entry=make_entry("해약금", quick_buttons=quick)))
        assert buttons == quick[:5] + [HOME_BUTTON]

    def test_related_buttons(self, formatter):
        entry = make_entry("해약금")
        related = [
            SearchResult(entry=entry, score=120),
            SearchResult(entry=make_entry("구독해약을 원할 때 절차 안내"), score=12),
            SearchResult(entry=make_entry("위약금"), score=4),
        ]
        _, buttons = formatter.render(DirectAnswer(entry=entry, related=related))
        assert [(b.label, b.text) for b in buttons] == [
            ("🔍 구독해약을 원할 때 절..", "구독해약을 원할 때 절차 안내"),
            (HOME_LABEL, HOME_TEXT),
        ]


class TestDisambiguationAndNotFound:

    def test_disambiguation(self, formatter):
        candidates = [
            SearchResult(entry=make_entry("배송 분실"), score=25),
            SearchResult(entry=make_entry("배송 일정 변경과 설치일 안내"), score=25),
        ]
        text, buttons = formatter.render(Disambiguation(query="배송", candidates=candidates))
        assert text == '🔍 "배송" 관련 항목이 여러 개 있어요.\n어떤 내용이 궁금하세요?'
        assert buttons[0].label == "배송 분실"
        assert buttons[1].label == "배송 일정 변경과 설치일 .."
        assert buttons[1].text == "배송 일정 변경과 설치일 안내"
        assert buttons[-1] == HOME_BUTTON

    def test_not_found(self, formatter):
        text, buttons = formatter.render(NotFound(query="날씨"))
        assert text == NOT_FOUND_TEXT
        assert [b.text for b in buttons] == ["간편조회", "제휴카드", "LG 고객센터", HOME_TEXT]


# === PRICE REPLIES ===

class TestPriceReplies:

    def test_price_answer(self, formatter, vacuum):
        text, buttons = formatter.render(PriceAnswer(entry=vacuum, as_of="2026-01-05"))
        assert text.startswith("📦 코드제로 청소기 | A720WA.AKOR")
        assert [b.text for b in buttons] == [HOME_TEXT, "가격표"]

    def test_care_type_prompt(self, formatter, vacuum):
        match = ModelMatch(model_full="A720WA.AKOR", product="코드제로 청소기", care_types=[vacuum])
        options = [QuickButton(label="방문관리", text="A720WA::방문관리")]
        reply = PricePrompt(axis=CareAxis.CARE_TYPE, match=match, step=StepKey("A720WA"), options=options)
        text, buttons = formatter.render(reply)
        assert text == "📦 코드제로 청소기 | A720WA.AKOR\n\n케어십 유형을 선택해주세요!"
        assert buttons == options + [HOME_BUTTON]

    def test_care_detail_prompt(self, formatter, vacuum):
        match = ModelMatch(model_full="A720WA.AKOR", product="코드제로 청소기", care_types=[vacuum])
        reply = PricePrompt(axis=CareAxis.CARE_DETAIL, match=match, step=StepKey("A720WA", "방문관리"))
        text, _ = formatter.render(reply)
        assert text == "📦 코드제로 청소기 | A720WA.AKOR\n🔧 케어십: 방문관리\n\n세부 유형을 선택해주세요!"

    def test_visit_cycle_prompt(self, formatter, vacuum):
        match = ModelMatch(model_full="A720WA.AKOR", product="코드제로 청소기", care_types=[vacuum])
        reply = PricePrompt(
            axis=CareAxis.VISIT_CYCLE, match=match, step=StepKey("A720WA", "방문관리", "스탠다드"),
        )
        text, _ = formatter.render(reply)
        assert "🔧 케어십: 방문관리 > 스탠다드" in text
        assert text.endswith("방문주기를 선택해주세요!")

    def test_visit_cycle_prompt_blank_detail(self, formatter, vacuum):
        match = ModelMatch(model_full="X100", product="p", care_types=[vacuum])
        reply = PricePrompt(axis=CareAxis.VISIT_CYCLE, match=match, step=StepKey("X100", "자가관리", ""))
        text, _ = formatter.render(reply)
        assert "🔧 케어십: 자가관리\n" in text


# === DISPATCH AND ENVELOPE ===

class TestDispatch:

    def test_every_reply_type_renders(self, formatter, vacuum):
        match = ModelMatch(model_full="A720WA.AKOR", product="p", care_types=[vacuum])
        replies = [
            MainMenu(),
            CategoryMenu(category="계약"),
            CardMenu(card_name="국민카드"),
            CardTopicMenu(topic="실적확인"),
            DirectAnswer(entry=make_entry("해약금")),
            Disambiguation(query="q", candidates=[SearchResult(entry=make_entry("a"), score=1)]),
            PriceAnswer(entry=vacuum),
            PricePrompt(match=match, step=StepKey("A720WA")),
            NotFound(query="q"),
            ErrorReply(),
        ]
        assert {r.type for r in replies} == set(ReplyType)
        for reply in replies:
            text, buttons = formatter.render(reply)
            assert text
            assert buttons

    def test_error_reply(self, formatter):
        assert formatter.render(ErrorReply()) == (ERROR_TEXT, [HOME_BUTTON])

    def test_shared_formatter(self):
        assert get_response_formatter() is get_response_formatter()


class TestEnvelope:
    """Skill response envelope."""

    def test_text_only(self):
        assert build_envelope("안녕하세요", []) == {
            "version": "2.0",
            "template": {"outputs": [{"simpleText": {"text": "안녕하세요"}}]},
        }

    def test_quick_replies(self):
        envelope = build_envelope("본문", [HOME_BUTTON])
        assert envelope["template"]["quickReplies"] == [
            {"messageText": HOME_TEXT, "action": "message", "label": HOME_LABEL},
        ]

    def test_formatter_envelope(self, formatter):
        envelope = formatter.to_envelope(ErrorReply())
        assert envelope["template"]["outputs"][0]["simpleText"]["text"] == ERROR_TEXT
        assert len(envelope["template"]["quickReplies"]) == 1
