"""
Price intent handlers.

Step keys and model codes are answered from the price catalog. When the
price catalog has nothing for the utterance the handler returns an empty
result and the orchestrator falls through to the FAQ handler.
"""

from config.patterns import looks_like_model_name
from core.context import PriceAnswer, StepKey
from handlers.base import BaseHandler, HandlerContext, HandlerResult


class PriceStepHandler(BaseHandler):
    """Handle PRICE_STEP intent ("A720WA::방문관리::...")."""

    def handle(self, ctx: HandlerContext) -> HandlerResult:
        step = StepKey.parse(ctx.query)
        ctx.add_debug(f"STEP KEY: {step}")
        return HandlerResult(reply=ctx.drilldown.resolve_step(step))


class ModelLookupHandler(BaseHandler):
    """
    Handle MODEL_LOOKUP intent.

    "A720WA 방문관리" (model followed by a care plan) answers directly when
    that pair exists; anything else starts the drill-down at the model.
    """

    def handle(self, ctx: HandlerContext) -> HandlerResult:
        tokens = ctx.query.split()

        if len(tokens) > 1 and looks_like_model_name(tokens[0]):
            care_label = ' '.join(tokens[1:])
            entry = ctx.price_index.get_price_by_model_and_care(tokens[0], care_label)
            if entry is not None:
                ctx.add_debug(f"MODEL + CARE: {entry.model_full} / {entry.care_combined}")
                return HandlerResult(
                    reply=PriceAnswer(entry=entry, as_of=ctx.price_index.price_as_of)
                )

        return HandlerResult(reply=ctx.drilldown.resolve_step(StepKey(model=ctx.query)))
