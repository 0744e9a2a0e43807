"""
Intent handlers for Care-Bot.

Each handler processes a specific type of routing intent.
"""

from handlers.base import BaseHandler, HandlerContext, HandlerResult
from handlers.menu import MainMenuHandler, CategoryMenuHandler, CardMenuHandler, CardTopicHandler
from handlers.faq import FaqHandler, SpecialAnswerHandler
from handlers.price import PriceStepHandler, ModelLookupHandler

__all__ = [
    # Base classes
    'BaseHandler',
    'HandlerContext',
    'HandlerResult',
    # Handlers
    'MainMenuHandler',
    'CategoryMenuHandler',
    'CardMenuHandler',
    'CardTopicHandler',
    'FaqHandler',
    'SpecialAnswerHandler',
    'PriceStepHandler',
    'ModelLookupHandler',
]
