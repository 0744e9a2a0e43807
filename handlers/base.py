"""
Base handler and context classes for Care-Bot intent handlers.

Provides the common interface and shared context for all handlers.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional
from abc import ABC, abstractmethod

from core.context import Intent, Reply


@dataclass
class HandlerContext:
    """
    Context passed to all intent handlers.

    Contains everything a handler needs to answer an utterance:
    - The utterance itself
    - Classified intent
    - Component references (FAQ resolver, price index, drill-down)

    Handlers keep no state between turns; every request gets a fresh context.
    """
    query: str
    intent: Intent
    debug_mode: bool = False

    # Component references (set by orchestrator)
    faq: Any = None
    price_index: Any = None
    drilldown: Any = None

    # Debug output collector
    debug_lines: List[str] = field(default_factory=list)

    def add_debug(self, message: str) -> None:
        """Add a debug message."""
        if self.debug_mode:
            self.debug_lines.append(message)


@dataclass
class HandlerResult:
    """
    Result returned by intent handlers.

    A result without a reply means the handler could not answer and the
    orchestrator should fall through to the FAQ handler.
    """
    reply: Optional[Reply] = None

    @property
    def handled(self) -> bool:
        return self.reply is not None


class BaseHandler(ABC):
    """
    Base class for all intent handlers.

    Each handler processes a specific intent type and returns a HandlerResult.
    Handlers should be stateless - all state is in HandlerContext.
    """

    @abstractmethod
    def handle(self, ctx: HandlerContext) -> HandlerResult:
        """
        Process the intent and return a result.

        Args:
            ctx: Handler context with query, intent, and all components

        Returns:
            HandlerResult with the reply, or an empty result to fall through
        """
        pass
