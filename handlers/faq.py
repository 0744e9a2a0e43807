"""
FAQ intent handlers.

Answers free-text questions and button round-trips from the FAQ catalog.
"""

from config.menus import SPECIAL_MAPPINGS
from core.context import DirectAnswer, QuickButton
from handlers.base import BaseHandler, HandlerContext, HandlerResult


class FaqHandler(BaseHandler):
    """
    Handle FAQ_SEARCH intent, and every price lookup that fell through.

    Lookup order:
    1. Exact catalog question (the payload of a question button)
    2. Keyword of a menu-type catalog entry
    3. Scored keyword search (direct answer, disambiguation or not found)
    """

    def handle(self, ctx: HandlerContext) -> HandlerResult:
        query = ctx.query

        entry = ctx.faq.find_by_question(query)
        if entry is not None:
            ctx.add_debug(f"EXACT QUESTION: {entry.question}")
            return HandlerResult(reply=DirectAnswer(entry=entry, related=ctx.faq.search(query)))

        entry = ctx.faq.find_menu_by_keyword(query)
        if entry is not None:
            ctx.add_debug(f"MENU ENTRY: {entry.question}")
            return HandlerResult(reply=DirectAnswer(entry=entry))

        reply = ctx.faq.resolve(query)
        ctx.add_debug(f"FAQ RESOLVED: {reply.type.value}")
        return HandlerResult(reply=reply)


class SpecialAnswerHandler(BaseHandler):
    """Handle SPECIAL_ANSWER intent: fixed FAQ query with fixed follow-ups."""

    def handle(self, ctx: HandlerContext) -> HandlerResult:
        mapping = SPECIAL_MAPPINGS[ctx.intent.payload]
        buttons = [QuickButton(label=b['label'], text=b['text']) for b in mapping['buttons']]
        reply = ctx.faq.answer_with_buttons(mapping['query'], buttons)
        return HandlerResult(reply=reply)
