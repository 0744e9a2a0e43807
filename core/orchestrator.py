"""
Utterance orchestrator for Care-Bot.

Coordinates the flow: intent classification → handler routing → reply
rendering → conversation logging. Any exception raised while answering is
logged and converted to the generic error reply, so callers always get a
renderable result.
"""

import time
import traceback
from dataclasses import dataclass, field
from typing import Any, List, Optional

from core.catalog import CatalogService
from core.context import ErrorReply, Intent, IntentType, QuickButton, Reply
from core.drilldown import PriceDrillDown
from core.faq import FaqResolver
from core.intent import IntentClassifier
from core.price_index import PriceIndex
from core.structured_logging import get_logger, log_conversation_turn, log_error
from core.conversation_csv import log_conversation as log_conversation_csv
from core.gsheets_logger import log_error_to_gsheets, log_to_gsheets
from ui.responses import ResponseFormatter, build_envelope, get_response_formatter

from handlers.base import BaseHandler, HandlerContext
from handlers.menu import MainMenuHandler, CategoryMenuHandler, CardMenuHandler, CardTopicHandler
from handlers.faq import FaqHandler, SpecialAnswerHandler
from handlers.price import PriceStepHandler, ModelLookupHandler

_logger = get_logger("core.orchestrator")


@dataclass
class OrchestratorComponents:
    """
    All components needed by the orchestrator.

    Created once per process by the entry point (server.py / app.py) and
    shared by every request.
    """
    intent_classifier: Any  # IntentClassifier
    faq: Any                # FaqResolver
    price_index: Any        # PriceIndex
    drilldown: Any          # PriceDrillDown
    formatter: Any          # ResponseFormatter
    log_dir: str = "logs"
    enable_conversation_csv: bool = True


def create_components(
    catalog: CatalogService,
    formatter: Optional[ResponseFormatter] = None,
    log_dir: str = "logs",
    enable_conversation_csv: bool = True,
) -> OrchestratorComponents:
    """
    Wire the search components around one catalog service.

    Args:
        catalog: Shared catalog service
        formatter: Reply renderer (defaults to the shared instance)
        log_dir: Directory for conversations.csv
        enable_conversation_csv: Whether to write conversations.csv

    Returns:
        OrchestratorComponents instance
    """
    faq = FaqResolver(catalog)
    price_index = PriceIndex(catalog)
    return OrchestratorComponents(
        intent_classifier=IntentClassifier(faq),
        faq=faq,
        price_index=price_index,
        drilldown=PriceDrillDown(price_index),
        formatter=formatter or get_response_formatter(),
        log_dir=log_dir,
        enable_conversation_csv=enable_conversation_csv,
    )


def create_components_from_settings(settings) -> OrchestratorComponents:
    """Build components for the data paths and sinks named in Settings."""
    return create_components(
        CatalogService.from_settings(settings),
        log_dir=str(settings.log_dir),
        enable_conversation_csv=settings.enable_conversation_csv,
    )


# Handler registry - maps intent types to handlers
HANDLERS = {
    IntentType.MAIN_MENU: MainMenuHandler(),
    IntentType.CATEGORY_MENU: CategoryMenuHandler(),
    IntentType.SPECIAL_ANSWER: SpecialAnswerHandler(),
    IntentType.CARD_MENU: CardMenuHandler(),
    IntentType.CARD_TOPIC: CardTopicHandler(),
    IntentType.PRICE_STEP: PriceStepHandler(),
    IntentType.MODEL_LOOKUP: ModelLookupHandler(),
    IntentType.FAQ_SEARCH: FaqHandler(),
}

# Answers anything a price handler could not
FALLBACK_HANDLER: BaseHandler = HANDLERS[IntentType.FAQ_SEARCH]


@dataclass
class TurnResult:
    """
    Outcome of one utterance.

    Attributes:
        reply: Reply variant chosen
        text: Rendered reply text
        buttons: Rendered quick-reply buttons
        intent: Routing intent (None when classification itself failed)
        response_time_ms: Total handling time
        debug_lines: Handler debug output (debug mode only)
    """
    reply: Reply
    text: str
    buttons: List[QuickButton]
    intent: Optional[Intent] = None
    response_time_ms: float = 0.0
    debug_lines: List[str] = field(default_factory=list)

    def to_envelope(self) -> dict:
        return build_envelope(self.text, self.buttons)


def process_utterance(
    utterance: Optional[str],
    components: OrchestratorComponents,
    session_id: str = "",
    debug_mode: bool = False
) -> TurnResult:
    """
    Answer one utterance.

    Flow:
    1. Classify intent
    2. Run the intent's handler; price handlers with no answer fall through
       to the FAQ handler
    3. Render the reply
    4. Log the turn (structured log, conversations.csv, Google Sheets)

    Args:
        utterance: Raw user text (None or blank means main menu)
        components: All orchestrator components
        session_id: Platform user id, used only for logging
        debug_mode: Whether to collect handler debug output

    Returns:
        TurnResult with the reply and its rendering
    """
    # Start timing for response
    start_time = time.perf_counter()
    query = (utterance or '').strip()
    debug_lines: List[str] = []
    intent = None

    try:
        # Step 1: Classify intent
        intent = components.intent_classifier.classify(query)
        if debug_mode:
            debug_lines.append(f"🎯 INTENT: {intent.type.value} (confidence={intent.confidence:.2f})")

        # Step 2: Execute handler
        handler_ctx = HandlerContext(
            query=query,
            intent=intent,
            debug_mode=debug_mode,
            faq=components.faq,
            price_index=components.price_index,
            drilldown=components.drilldown,
            debug_lines=debug_lines,
        )
        result = HANDLERS[intent.type].handle(handler_ctx)
        if not result.handled:
            _logger.debug(
                f"{intent.type.value} had no answer, falling back to FAQ search",
                extra={"event": "handler_fallthrough", "session_id": session_id}
            )
            handler_ctx.add_debug(f"↪️ {intent.type.value} had no answer, falling back to FAQ search")
            result = FALLBACK_HANDLER.handle(handler_ctx)

        # Step 3: Render
        reply = result.reply
        text, buttons = components.formatter.render(reply)

    except Exception as e:
        log_error(session_id, e, context=f"utterance={query!r}")
        log_error_to_gsheets(
            session_id=session_id,
            error_type=type(e).__name__,
            error_message=str(e),
            stack_trace=traceback.format_exc(),
            context=f"utterance={query!r}",
        )
        if debug_mode:
            debug_lines.append(f"❌ ERROR: {type(e).__name__}: {str(e)}")
        reply = ErrorReply()
        text, buttons = components.formatter.render(reply)

    response_time_ms = (time.perf_counter() - start_time) * 1000

    # Step 4: Log conversation; a failing sink must not cost the user the reply
    try:
        _log_turn(components, session_id, query, intent, reply, text, response_time_ms)
    except Exception as e:
        _logger.warning(
            f"Conversation logging failed: {type(e).__name__}: {e}",
            extra={"event": "turn_log_failed", "session_id": session_id, "error_type": type(e).__name__},
            exc_info=True,
        )

    return TurnResult(
        reply=reply,
        text=text,
        buttons=buttons,
        intent=intent,
        response_time_ms=response_time_ms,
        debug_lines=debug_lines,
    )


def _log_turn(
    components: OrchestratorComponents,
    session_id: str,
    query: str,
    intent: Optional[Intent],
    reply: Reply,
    text: str,
    response_time_ms: float,
) -> None:
    """Write one turn to every configured sink."""
    fields = reply.log_fields()

    # Structured log (carebot.log)
    log_conversation_turn(
        session_id=session_id,
        user_query=query,
        reply_type=reply.type.value,
        response_time_ms=response_time_ms,
        **fields
    )

    row = dict(
        session_id=session_id,
        user_query=query,
        bot_response=text,
        intent=intent.type.value if intent else '',
        reply_type=reply.type.value,
        response_time_ms=response_time_ms,
        **fields
    )

    # One row per utterance in conversations.csv
    if components.enable_conversation_csv:
        log_conversation_csv(log_dir=components.log_dir, **row)

    # No-op when Google Sheets is not configured
    log_to_gsheets(**row)
