"""
Synonym and colloquialism mappings for query understanding.

Every FAQ query is rewritten with these mappings before scoring so that
counsellor shorthand, typos and natural question phrasings land on the
canonical terms used in the catalog keywords.
"""

# Contract terms
CONTRACT_SYNONYMS = {
    "취소금": "해약금",
    "취소비용": "해약금",
    "패널티": "해약금",
    "해약비": "해약금",
    "중도해지금": "해약금",
    "취소": "해지",
    "구독취소": "해지",
    "그만": "해지",
    "안할래": "해지",
    "이름변경": "명의변경",
    "명의이전": "명의변경",
    "명의이관": "명의변경",
    "묶음할인": "결합할인",
    "다중할인": "결합할인",
    "2대할인": "결합할인",
    "두대할인": "결합할인",
    "선불": "선납",
    "미리납부": "선납",
    "연체": "미납",
    "밀림": "미납",
    "밀린요금": "미납",
    "미납금": "미납",
    "체납": "미납",
    "안냄": "미납",
    "완납": "일시불",
    "한번에": "일시불",
}

# Payment / fee terms
PAYMENT_SYNONYMS = {
    "카변": "결제변경",
    "결제수단변경": "결제변경",
    "결제방법": "결제변경",
    "월요금": "요금",
    "월납": "요금",
    "납부금": "요금",
    "월구독료": "구독료",
}

# Care service terms
CARE_SYNONYMS = {
    "방관": "방문관리",
    "방문케어": "방문관리",
    "자관": "자가관리",
    "자가케어": "자가관리",
    "셀프관리": "자가관리",
    "관리서비스": "케어서비스",
    "방문서비스": "케어서비스",
    "필터교체": "소모품",
    "교체주기": "소모품",
    "케어쉽": "케어십",
}

# Partner card terms
CARD_SYNONYMS = {
    "KB카드": "국민카드",
    "할인카드": "제휴카드",
    "실적빠지는": "실적제외",
    "제외항목": "실적제외",
    "빠지는거": "실적제외",
    "실적조회": "실적확인",
    "자동할인": "청구할인",
    "빠지는금액": "청구할인",
}

# Delivery and support
SUPPORT_SYNONYMS = {
    "배달": "배송",
    "언제오나": "배송",
    "언제와": "배송",
    "콜센터": "고객센터",
    "상담원": "고객센터",
    "상담사연결": "고객센터",
}

# Product nicknames
PRODUCT_SYNONYMS = {
    "에어콘": "에어컨",
    "냉방기": "에어컨",
    "식세": "식기세척기",
    "냉장": "냉장고",
    "김냉": "김치냉장고",
    "공청": "공기청정기",
    "정수": "정수기",
}

# Common typos
TYPO_CORRECTIONS = {
    "혜액": "혜택",
    "핏엔맥스": "핏앤맥스",
    "핏엔맥": "핏앤맥",
}

# Natural question phrasings
PHRASE_SYNONYMS = {
    "돈 내야": "해약금",
    "얼마나 내야": "해약금",
    "카드 바꾸": "결제변경",
    "카드 변경": "결제변경",
    "넘길 수": "명의변경",
    "넘기고 싶": "명의변경",
    "두 대": "결합할인",
    "두대": "결합할인",
    "여러대": "결합할인",
    "밀린": "미납",
    "안냈": "미납",
    "못냈": "미납",
    "한번에 내": "일시불",
    "한꺼번에": "일시불",
    "바꾸고 싶": "변경",
    "바꿀 수": "변경",
}

# Combined synonyms dictionary
SYNONYMS = {
    **CONTRACT_SYNONYMS,
    **PAYMENT_SYNONYMS,
    **CARE_SYNONYMS,
    **CARD_SYNONYMS,
    **SUPPORT_SYNONYMS,
    **PRODUCT_SYNONYMS,
    **TYPO_CORRECTIONS,
    **PHRASE_SYNONYMS,
}

# Longest phrase first so "한번에 내" is rewritten before "한번에" can shadow it.
_ORDERED_SYNONYMS = sorted(
    ((key.lower(), value) for key, value in SYNONYMS.items()),
    key=lambda pair: len(pair[0]),
    reverse=True,
)


def normalize(text: str) -> str:
    """
    Rewrite surface variants in a query to their canonical terms.

    Keys are visited once each, longest first. A replacement is visible to
    the keys that come after it but is never re-scanned against keys that
    were already visited, so the result is not guaranteed to be idempotent.

    Args:
        text: User query text

    Returns:
        Lower-cased text with synonyms replaced

    Example:
        >>> normalize("패널티 얼마에요")
        "해약금 얼마에요"
    """
    result = text.lower()
    for synonym, canonical in _ORDERED_SYNONYMS:
        if synonym in result:
            result = result.replace(synonym, canonical)
    return result
