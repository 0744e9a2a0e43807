"""
Price drill-down for Care-Bot.

Walks the three care axes (care type -> care detail -> visit cycle) for a
matched model. Each step filters the model's care plans by the axes chosen
so far and then either answers, asks for the next axis, or skips an axis
that offers only one choice.

States: awaiting care type, awaiting care detail, awaiting visit cycle,
resolved (PriceAnswer) and not found (None).
"""

from typing import List, Optional

from core.context import (
    CARE_AXES, CareAxis, PriceAnswer, PriceEntry, PricePrompt, QuickButton, Reply, StepKey,
)
from core.price_index import PriceIndex
from core.structured_logging import get_logger

_logger = get_logger("core.drilldown")

MAX_OPTIONS = 10


def distinct_values(items: List[PriceEntry], axis: CareAxis) -> List[str]:
    """Non-blank values of an axis in first-seen order."""
    values = []
    for item in items:
        value = getattr(item, axis.value)
        if value and value not in values:
            values.append(value)
    return values


def filter_by_step(items: List[PriceEntry], step: StepKey) -> List[PriceEntry]:
    """Keep items matching every chosen, non-blank axis of the step."""
    for axis in CARE_AXES:
        wanted = step.get(axis)
        if wanted:
            items = [item for item in items if getattr(item, axis.value) == wanted]
    return items


class PriceDrillDown:
    """
    Resolves step keys to a price answer or the next prompt.

    Example:
        drilldown = PriceDrillDown(PriceIndex(catalog))
        reply = drilldown.resolve_step(StepKey.parse("A720WA::방문관리"))
    """

    def __init__(self, index: PriceIndex):
        self.index = index

    def resolve_step(self, step: StepKey) -> Optional[Reply]:
        """
        Resolve one drill-down step.

        Args:
            step: Decoded step key

        Returns:
            PriceAnswer when a single plan remains (or every axis is chosen),
            PricePrompt for the next axis with several values, or None when
            the model is unknown or the filters leave nothing.
        """
        match = self.index.search_price(step.model)
        if match is None:
            return None

        items = filter_by_step(match.care_types, step)
        if not items:
            _logger.debug(
                f"Step filters left no plans: {step.encode()}",
                extra={"event": "price_step_empty", "model": match.model_full}
            )
            return None

        if len(items) == 1:
            return self._answer(items[0])

        for axis in CARE_AXES:
            if step.get(axis) is not None:
                continue

            values = distinct_values(items, axis)
            if len(values) <= 1:
                # Single choice: skip the question
                return self.resolve_step(step.with_axis(axis, values[0] if values else ''))

            options = [
                QuickButton(label=value, text=step.with_axis(axis, value).encode())
                for value in values[:MAX_OPTIONS]
            ]
            _logger.debug(
                f"Prompting for {axis.value}: {len(values)} values",
                extra={"event": "price_prompt", "model": match.model_full}
            )
            return PricePrompt(axis=axis, match=match, step=step, options=options)

        # Every axis chosen and duplicates remain
        return self._answer(items[0])

    def _answer(self, entry: PriceEntry) -> PriceAnswer:
        return PriceAnswer(entry=entry, as_of=self.index.price_as_of)
