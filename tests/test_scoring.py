"""
Tests for keyword scoring.

Scores are computed on already-normalized queries, so these tests call
the scorer directly with lower-case text.
"""

import pytest

from core.context import CatalogEntry, EntryType
from core.scoring import KeywordScorer, ScoringConfig


def make_entry(question, keywords):
    return CatalogEntry(
        type=EntryType.ANSWER,
        category="계약",
        question=question,
        keywords=keywords,
        answer=f"{question} 답변",
    )


@pytest.fixture
def scorer():
    return KeywordScorer()


@pytest.fixture
def cancellation_fee():
    return make_entry("해약금", ["해약금", "위약금", "중도해지"])


class TestExactMatches:
    """Exact question and keyword matches."""

    def test_exact_question_and_keyword(self, scorer, cancellation_fee):
        # 100 for the question plus 20 for the equal keyword
        assert scorer.score("해약금", cancellation_fee) == 120

    def test_exact_keyword_only(self, scorer):
        entry = make_entry("구독해약", ["해지"])
        assert scorer.score("해지", entry) == 20

    def test_keyword_compared_case_insensitively(self, scorer):
        entry = make_entry("LG 고객센터", ["LG 고객센터"])
        assert scorer.score("lg 고객센터", entry) == 120


class TestSubstringMatches:
    """Keyword found inside a longer query."""

    def test_substring_scores_below_exact(self, scorer, cancellation_fee):
        partial = scorer.score("해약금 얼마예요", cancellation_fee)
        assert 0 < partial < scorer.score("해약금", cancellation_fee)

    def test_substring_with_question_containment(self, scorer, cancellation_fee):
        # keyword 10 + len("해약금"), question contained 8
        assert scorer.score("해약금 얼마예요", cancellation_fee) == 21

    def test_generic_keyword_gets_flat_score(self, scorer):
        entry = make_entry("국민카드 할인", ["할인"])
        assert scorer.score("카드 할인 문의", entry) == ScoringConfig().generic_substring

    def test_keyword_contains_query(self, scorer, cancellation_fee):
        assert scorer.score("위약", cancellation_fee) == ScoringConfig().keyword_contains_query


class TestTokenFallback:

    def test_stripped_token_inside_keyword(self, scorer):
        entry = make_entry("명의변경", ["승계절차"])
        # "승계는" -> "승계", a two-character token scores the short weight
        assert scorer.score("승계는 어떻게", entry) == ScoringConfig().short_token_match

    def test_token_scores_for_one_keyword_only(self, scorer):
        entry = make_entry("명의변경", ["승계절차", "승계서류"])
        # "승계" is consumed by the first keyword; one match, so no bonus
        assert scorer.score("승계는 어떻게", entry) == ScoringConfig().short_token_match

    def test_separate_tokens_match_separate_keywords(self, scorer):
        entry = make_entry("명의변경", ["승계절차", "이전서류"])
        config = ScoringConfig()
        # "승계" and "서류" each hit one keyword, plus the bonus for two
        assert scorer.score("승계 서류", entry) == (
            2 * config.short_token_match + 2 * config.multi_match_per_keyword
        )

    def test_no_relation_scores_zero(self, scorer, cancellation_fee):
        assert scorer.score("배송 언제", cancellation_fee) == 0


class TestMultiKeywordBonus:

    def test_bonus_for_two_distinct_keywords(self, scorer):
        entry = make_entry("결합할인율", ["결합할인", "2대 이상"])
        # (10 + 4) + (10 + 5) + bonus 5 * 2
        assert scorer.score("결합할인 2대 이상", entry) == 39

    def test_repeated_keyword_counts_once_for_bonus(self, scorer):
        entry = make_entry("중도해지", ["해약금", "해약금"])
        # (10 + 3) twice, no bonus for a single distinct keyword
        assert scorer.score("해약금 얼마", entry) == 26

    def test_generic_keywords_do_not_count_towards_bonus(self, scorer):
        entry = make_entry("국민카드 할인", ["할인", "혜택"])
        assert scorer.score("카드 할인 혜택", entry) == 2 * ScoringConfig().generic_substring


class TestCustomConfig:

    def test_weights_are_configurable(self, cancellation_fee):
        scorer = KeywordScorer(ScoringConfig(exact_question=1, exact_keyword=1))
        assert scorer.score("해약금", cancellation_fee) == 2
