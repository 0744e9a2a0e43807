"""
FAQ resolution for Care-Bot.

Normalizes the utterance, scores it against every answerable catalog
entry, ranks the results and decides between a direct answer, a
disambiguation list and "not found". Also provides the exact lookups
used for button round-trips and menu navigation.
"""

from dataclasses import dataclass
from typing import List, Optional

from config.patterns import strip_particles
from config.synonyms import normalize
from core.catalog import CatalogService
from core.context import (
    CatalogEntry, DirectAnswer, Disambiguation, NotFound, QuickButton, Reply, SearchResult,
)
from core.scoring import KeywordScorer
from core.structured_logging import get_logger

_logger = get_logger("core.faq")


@dataclass
class ResolverConfig:
    """
    Ranking and ambiguity thresholds.

    Attributes:
        max_results: Results kept after ranking
        confident_score: Top score that answers without ambiguity checks
        near_tie_ratio: second/top ratio that counts as a near tie
        candidate_ratio: Share of the top score a candidate must reach
    """
    max_results: int = 5
    confident_score: int = 30
    near_tie_ratio: float = 0.7
    candidate_ratio: float = 0.6


def prepare_query(query: str) -> str:
    """Lower-case, trim and synonym-normalize a raw query."""
    return normalize(query.strip().lower())


def find_ambiguous_candidates(
    results: List[SearchResult],
    config: Optional[ResolverConfig] = None,
) -> Optional[List[SearchResult]]:
    """
    Detect a near tie among ranked results.

    Returns the results scoring at least candidate_ratio of the top score
    when the top two are within near_tie_ratio of each other and two or
    more such candidates exist; None otherwise.

    Example:
        >>> find_ambiguous_candidates([r(100), r(75)])   # ratio 0.75
        [r(100), r(75)]
        >>> find_ambiguous_candidates([r(100), r(50)])   # ratio 0.5
        None
    """
    config = config or ResolverConfig()
    if len(results) < 2 or results[0].score <= 0:
        return None

    top = results[0].score
    if results[1].score / top < config.near_tie_ratio:
        return None

    threshold = top * config.candidate_ratio
    candidates = [r for r in results if r.score >= threshold][:config.max_results]
    if len(candidates) < 2:
        return None
    return candidates


class FaqResolver:
    """
    Resolves free-text questions against the FAQ catalog.

    Example:
        resolver = FaqResolver(catalog)
        results = resolver.search("해약금 얼마예요")
        reply = resolver.resolve("해약금 얼마예요")
    """

    def __init__(
        self,
        catalog: CatalogService,
        scorer: Optional[KeywordScorer] = None,
        config: Optional[ResolverConfig] = None,
    ):
        self.catalog = catalog
        self.scorer = scorer or KeywordScorer()
        self.config = config or ResolverConfig()

    def search(self, query: str) -> List[SearchResult]:
        """
        Rank answerable entries for a query.

        Args:
            query: Raw user query

        Returns:
            At most max_results results with score > 0, best first.
            Ties keep catalog order.
        """
        normalized = prepare_query(query)
        tokens = strip_particles(normalized)

        results = []
        for entry in self.catalog.faq_entries:
            if entry.is_menu:
                continue
            score = self.scorer.score(normalized, entry, tokens)
            if score > 0:
                results.append(SearchResult(entry=entry, score=score))

        results.sort(key=lambda r: r.score, reverse=True)
        return results[:self.config.max_results]

    def resolve(self, query: str) -> Reply:
        """
        Pick the reply for a free-text query.

        - No results: NotFound
        - Top score >= confident_score: DirectAnswer with the top entry
        - Near tie with two or more strong candidates: Disambiguation
        - Otherwise: DirectAnswer with the best available guess
        """
        results = self.search(query)

        if not results:
            _logger.debug(
                "No FAQ match",
                extra={"event": "faq_not_found", "user_query": query}
            )
            return NotFound(query=query)

        best = results[0]
        if best.score < self.config.confident_score:
            candidates = find_ambiguous_candidates(results, self.config)
            if candidates:
                _logger.debug(
                    f"Ambiguous FAQ match: {len(candidates)} candidates",
                    extra={
                        "event": "faq_ambiguous",
                        "user_query": query,
                        "top_score": best.score,
                    }
                )
                return Disambiguation(query=query, candidates=candidates)

        _logger.debug(
            f"FAQ answer: {best.entry.question}",
            extra={
                "event": "faq_resolved",
                "user_query": query,
                "matched_question": best.entry.question,
                "top_score": best.score,
            }
        )
        return DirectAnswer(entry=best.entry, related=results)

    def answer_with_buttons(self, query: str, buttons: List[QuickButton]) -> Reply:
        """
        Answer with the top entry for query and fixed follow-up buttons.

        Falls back to resolve() when nothing matches.
        """
        results = self.search(query)
        if not results:
            return self.resolve(query)
        return DirectAnswer(entry=results[0].entry, related=results, buttons=buttons)

    def find_by_question(self, question: str) -> Optional[CatalogEntry]:
        """Exact question lookup, used when a button sends a question back."""
        target = question.strip()
        for entry in self.catalog.faq_entries:
            if entry.question == target:
                return entry
        return None

    def find_menu_by_keyword(self, query: str) -> Optional[CatalogEntry]:
        """
        Menu entry whose keyword equals the normalized query.

        Only exact equality counts; menu navigation is never fuzzy.
        """
        normalized = prepare_query(query)
        if not normalized:
            return None
        for entry in self.catalog.faq_entries:
            if not entry.is_menu:
                continue
            for keyword in entry.keywords:
                if keyword.strip().lower() == normalized:
                    return entry
        return None
