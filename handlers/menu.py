"""
Menu intent handlers.

Navigation replies that come straight from the static menu catalog and
need no search.
"""

from core.context import CardMenu, CardTopicMenu, CategoryMenu, MainMenu
from handlers.base import BaseHandler, HandlerContext, HandlerResult


class MainMenuHandler(BaseHandler):
    """Handle empty input and menu keywords."""

    def handle(self, ctx: HandlerContext) -> HandlerResult:
        return HandlerResult(reply=MainMenu())


class CategoryMenuHandler(BaseHandler):
    """Handle category keywords ("계약", "가격표", ...)."""

    def handle(self, ctx: HandlerContext) -> HandlerResult:
        return HandlerResult(reply=CategoryMenu(category=ctx.intent.payload))


class CardMenuHandler(BaseHandler):
    """Handle a partner card company name."""

    def handle(self, ctx: HandlerContext) -> HandlerResult:
        return HandlerResult(reply=CardMenu(card_name=ctx.intent.payload))


class CardTopicHandler(BaseHandler):
    """Handle a card topic typed without a company ("실적제외")."""

    def handle(self, ctx: HandlerContext) -> HandlerResult:
        return HandlerResult(reply=CardTopicMenu(topic=ctx.intent.payload))
