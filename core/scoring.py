"""
Keyword scoring for FAQ matching.

Scores a normalized query against one catalog entry using several
independent signals:
- Exact question match (strong prior for button round-trips)
- Exact / substring keyword matches, longer keywords scoring higher
- Token-level fallback on particle-stripped tokens
- Question containment
- Bonus for entries matched on several distinct keywords

Generic keywords (short common words like "카드" or "할인") only earn a
flat score when found inside a longer query, and never count towards the
multi-keyword bonus.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from config.patterns import strip_particles
from core.context import CatalogEntry


# Keywords too common to signal a specific entry on substring containment.
GENERIC_KEYWORDS = frozenset({
    '카드', '할인', '혜택', '요금', '변경', '신청', '문의', '안내', '방법',
    '서비스', '구독', '제품', '가격', '비용', '확인', '조회',
})


@dataclass
class ScoringConfig:
    """
    Fixed scoring weights.

    Attributes:
        exact_question: Query equals the entry question
        exact_keyword: Query equals a keyword
        substring_base: Query contains a keyword (plus keyword length)
        generic_substring: Query contains a generic keyword
        keyword_contains_query: A keyword contains the query
        token_match: A stripped token matches a keyword
        short_token_match: Same, for tokens of SHORT_TOKEN_LENGTH or less
        query_contains_question: Query contains the question
        question_contains_query: Question contains the query
        multi_match_per_keyword: Bonus per distinct matched keyword
        multi_match_min: Matches needed before the bonus applies
        min_query_length: Shortest query allowed for containment checks
        generic_keywords: Keywords treated as generic
    """
    exact_question: int = 100
    exact_keyword: int = 20
    substring_base: int = 10
    generic_substring: int = 3
    keyword_contains_query: int = 5
    token_match: int = 8
    short_token_match: int = 3
    short_token_length: int = 2
    query_contains_question: int = 8
    question_contains_query: int = 5
    multi_match_per_keyword: int = 5
    multi_match_min: int = 2
    min_query_length: int = 2
    generic_keywords: FrozenSet[str] = field(default=GENERIC_KEYWORDS)


class KeywordScorer:
    """
    Computes relevance between a normalized query and catalog entries.

    The query must already be lower-cased and synonym-normalized; the
    scorer lower-cases keywords and questions itself so matching is
    case-insensitive end to end.

    Example:
        scorer = KeywordScorer()
        score = scorer.score("해약금", entry)
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def score(self, query: str, entry: CatalogEntry, tokens: Optional[List[str]] = None) -> int:
        """
        Score one entry.

        Args:
            query: Normalized query text
            entry: Catalog entry to score
            tokens: Particle-stripped tokens of the query (computed if None)

        Returns:
            Non-negative integer score; 0 means no relation
        """
        cfg = self.config
        if tokens is None:
            tokens = strip_particles(query)

        score = 0
        question = entry.question.lower()
        exact_question = query == question
        if exact_question:
            score += cfg.exact_question

        # Distinct keywords: a keyword listed twice scores twice but counts once for the bonus
        matched_keywords = set()
        consumed_tokens = set()

        for keyword in entry.keywords:
            kw = keyword.lower()
            if not kw:
                continue
            kw_compact = ''.join(kw.split())

            if query == kw or query == kw_compact:
                score += cfg.exact_keyword
                matched_keywords.add(kw)
            elif kw in query or kw_compact in query:
                if kw in cfg.generic_keywords:
                    score += cfg.generic_substring
                else:
                    score += cfg.substring_base + len(kw)
                    matched_keywords.add(kw)
            elif len(query) >= cfg.min_query_length and (query in kw or query in kw_compact):
                score += cfg.keyword_contains_query
                matched_keywords.add(kw)
            else:
                token_score = self._score_tokens(tokens, kw, consumed_tokens)
                if token_score:
                    score += token_score
                    matched_keywords.add(kw)

        if not exact_question:
            if question and question in query:
                score += cfg.query_contains_question
            elif len(query) >= cfg.min_query_length and query in question:
                score += cfg.question_contains_query

        if len(matched_keywords) >= cfg.multi_match_min:
            score += cfg.multi_match_per_keyword * len(matched_keywords)

        return score

    def _score_tokens(self, tokens: List[str], kw: str, consumed: set) -> int:
        """
        Token-level fallback for one keyword.

        Each unconsumed token that equals or overlaps the keyword adds
        points and is consumed, so no token scores for two keywords.
        """
        cfg = self.config
        total = 0
        for idx, token in enumerate(tokens):
            if idx in consumed:
                continue
            if (
                token == kw
                or (len(token) >= cfg.min_query_length and token in kw)
                or (len(kw) >= cfg.min_query_length and kw in token)
            ):
                if len(token) <= cfg.short_token_length:
                    total += cfg.short_token_match
                else:
                    total += cfg.token_match
                consumed.add(idx)
        return total
