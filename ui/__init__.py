"""
UI layer for Care-Bot.

Provides reply rendering and the skill response envelope.
"""

from ui.responses import (
    ResponseFormatter,
    build_envelope,
    format_price,
    format_price_response,
    get_response_formatter,
)

__all__ = [
    'ResponseFormatter',
    'build_envelope',
    'format_price',
    'format_price_response',
    'get_response_formatter',
]
