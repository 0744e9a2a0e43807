"""
Static menu catalog for Care-Bot.

Menu text, category buttons, partner-card flows and special mappings.
Pure configuration data: the formatter and intent classifier read it,
nothing here is computed.
"""

HOME_TEXT = '처음으로'
HOME_LABEL = '🏠 처음으로'

# Utterances that always return the main menu
MENU_KEYWORDS = {'처음으로', '홈', '메인', '메뉴', '시작', '도움말'}

MAIN_MENU_TEXT = (
    '안녕하세요! 😊 LG전자 구독 상담 도우미입니다.\n\n'
    '궁금한 내용을 키워드로 입력하거나\n아래 메뉴를 선택해주세요!\n\n'
    '💡 예시:\n'
    '• "미납" → 미납 정책 안내\n'
    '• "롯데카드 혜택" → 카드 혜택\n'
    '• "해약금" → 해약금 안내\n'
    '• "A720WA" → 구독료 조회'
)

MAIN_MENU_BUTTONS = [
    {'label': '📋 계약 안내', 'text': '계약'},
    {'label': '💳 제휴카드', 'text': '제휴카드'},
    {'label': '🔧 케어서비스', 'text': '케어서비스'},
    {'label': '💰 가격 조회', 'text': '가격표'},
    {'label': '❓ 기타 문의', 'text': '기타'},
]

# Utterance -> category menu key
CATEGORY_KEYWORDS = {
    '계약': '계약',
    '계약 안내': '계약',
    '판촉': '제휴카드',
    '제휴카드': '제휴카드',
    '케어서비스': '케어서비스',
    '케어': '케어서비스',
    '가격표': '가격표',
    '가격 조회': '가격표',
    '가격조회': '가격표',
    '기타': '기타',
    '기타 문의': '기타',
}

CATEGORY_MENUS = {
    '계약': {
        'title': '📋 계약 관련 어떤 내용이 궁금하세요?',
        'items': [
            {'label': '미납 정책', 'text': '미납/납부자 변경'},
            {'label': '해약금', 'text': '해약금'},
            {'label': '명의변경', 'text': '명의변경'},
            {'label': '결합할인', 'text': '결합할인율'},
            {'label': '해지', 'text': '구독해약'},
            {'label': '선납', 'text': '선납 할인율'},
            {'label': '일시불 전환', 'text': '일시불 전환'},
            {'label': '이사 시', 'text': '이삿짐센터'},
            {'label': '해외 이민', 'text': '해외 이민'},
        ],
    },
    '제휴카드': {
        'title': '💳 어떤 카드사의 정보를 확인하시겠어요?',
        'items': [
            {'label': '국민카드', 'text': '국민카드'},
            {'label': '롯데카드', 'text': '롯데카드'},
            {'label': '신한카드', 'text': '신한카드'},
            {'label': '우리카드', 'text': '우리카드'},
        ],
    },
    '케어서비스': {
        'title': '🔧 케어서비스 관련 어떤 내용이 궁금하세요?',
        'items': [
            {'label': '케어서비스 안내', 'text': '케어서비스 안내'},
            {'label': '배송 분실', 'text': '배송 분실'},
        ],
    },
    '가격표': {
        'title': (
            '💰 가격 조회\n\n모델명을 직접 입력해주세요!\n\n'
            '💡 예시:\n• A720WA\n• OLED55B4KW\n• AI927BA'
        ),
        'items': [],
    },
    '기타': {
        'title': '❓ 기타 문의 — 아래에서 선택하세요',
        'items': [
            {'label': '배송변경', 'text': '배송변경'},
            {'label': '고객센터', 'text': 'LG 고객센터'},
            {'label': '사이트 주소', 'text': '간편조회'},
        ],
    },
}

# Card company -> detail menu. The "text" of each item is the catalog
# question the button resolves to.
BENEFIT_LABEL = '혜택/할인'

CARD_DETAIL_MENU = {
    '국민카드': [
        {'label': BENEFIT_LABEL, 'text': '국민카드 할인'},
        {'label': '실적확인', 'text': '국민카드 실적확인'},
        {'label': '실적제외', 'text': '국민카드 실적제외'},
    ],
    '롯데카드': [
        {'label': BENEFIT_LABEL, 'text': '롯데카드 혜액'},
        {'label': '실적확인', 'text': '롯데카드 실적 확인'},
        {'label': '실적제외', 'text': '롯데카드 실적제외'},
    ],
    '신한카드': [
        {'label': BENEFIT_LABEL, 'text': '신한카드 할인'},
        {'label': '실적확인', 'text': '신한카드 실적확인'},
        {'label': '실적제외', 'text': '신한카드 실적제외'},
        {'label': '프로모션', 'text': '신한카드 프로모션'},
    ],
    '우리카드': [
        {'label': BENEFIT_LABEL, 'text': '우리카드 할인'},
        {'label': '실적확인', 'text': '우리카드 실적확인'},
        {'label': '실적제외', 'text': '우리카드 실적제외 항목'},
    ],
}

# Utterance -> topic label for the "which card company?" prompt
CARD_TOPIC_KEYWORDS = {
    '혜택': BENEFIT_LABEL,
    '할인': BENEFIT_LABEL,
    '카드 혜택': BENEFIT_LABEL,
    '카드 할인': BENEFIT_LABEL,
    '실적제외': '실적제외',
    '실적확인': '실적확인',
}

# Utterance -> (FAQ query to answer with, fixed follow-up buttons)
SPECIAL_MAPPINGS = {
    '결합할인': {
        'query': '결합할인율',
        'buttons': [
            {'label': '결합할인 해지', 'text': '결합할인 해지'},
            {'label': '선납할인', 'text': '선납 할인율'},
        ],
    },
    '선납': {
        'query': '선납 할인율',
        'buttons': [
            {'label': '선납금 결제', 'text': '선납 할부'},
            {'label': '선납금 결제 명의', 'text': '선납금 명의'},
            {'label': '선납금 실적', 'text': '선납금 실적'},
        ],
    },
}

NOT_FOUND_TEXT = (
    '😅 입력하신 내용에 대한 답변을 찾지 못했어요.\n\n'
    '💡 이렇게 질문해보세요!\n'
    '• 키워드로 검색: "해약금", "미납", "결합할인"\n'
    '• 카드사 혜택: "롯데카드 혜택", "신한카드 실적"\n'
    '• 구독료 조회: 모델명 입력 (예: A720WA)\n\n'
    '아래 버튼을 눌러보셔도 좋아요!'
)

NOT_FOUND_BUTTONS = [
    {'label': '🔗 사이트 주소', 'text': '간편조회'},
    {'label': '💳 제휴카드', 'text': '제휴카드'},
    {'label': '📞 고객센터', 'text': 'LG 고객센터'},
]

ERROR_TEXT = '죄송합니다. 일시적인 오류가 발생했습니다. 잠시 후 다시 시도해주세요.'

PRICE_OTHER_MODEL_BUTTON = {'label': '💰 다른 모델 조회', 'text': '가격표'}


def card_name_for_question(question: str):
    """Return the card company whose detail menu links to this question."""
    for card_name, items in CARD_DETAIL_MENU.items():
        for item in items:
            if item['text'] == question:
                return card_name
    return None
