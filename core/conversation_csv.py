"""
Conversation CSV logger for reporting.

Writes ONE row per utterance with the reply chosen for it. This is
separate from the debug logs and is meant for spreadsheet / BI import.

Output file: logs/conversations.csv
"""

import csv
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional


# Column order shared with the Google Sheets logger
COLUMNS = [
    'timestamp',
    'session_id',
    'user_query',
    'bot_response',
    'intent',
    'reply_type',
    'matched_question',
    'top_score',
    'category',
    'model',
    'response_time_ms',
]


def build_row(
    session_id: str,
    user_query: str,
    bot_response: str,
    intent: str,
    reply_type: str,
    matched_question: Optional[str] = None,
    top_score: Optional[int] = None,
    category: Optional[str] = None,
    model: Optional[str] = None,
    response_time_ms: Optional[float] = None,
) -> Dict[str, str]:
    """Build one conversation row keyed by column name."""
    return {
        'timestamp': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        'session_id': session_id or '',
        'user_query': user_query or '',
        'bot_response': bot_response or '',
        'intent': intent or '',
        'reply_type': reply_type or '',
        'matched_question': matched_question or '',
        'top_score': str(top_score) if top_score is not None else '',
        'category': category or '',
        'model': model or '',
        'response_time_ms': f"{response_time_ms:.2f}" if response_time_ms is not None else '',
    }


def row_values(row: Dict[str, str]) -> List[str]:
    """Row values in column order, each flattened to a single line."""
    return [_escape(row.get(col, '')) for col in COLUMNS]


def _escape(value: str) -> str:
    """Flatten newlines so every turn stays on one line."""
    value = str(value) if value else ''
    return value.replace('\n', ' ').replace('\r', ' ')


class ConversationCSVLogger:
    """
    Logs conversation turns to a CSV file.

    Usage:
        logger = ConversationCSVLogger()
        logger.log(
            session_id="user_123",
            user_query="해약금",
            bot_response="해약금은 ...",
            intent="faq_search",
            reply_type="direct_answer",
            matched_question="해약금",
            top_score=48,
            response_time_ms=12.5
        )
    """

    def __init__(self, log_dir: str = "logs"):
        """
        Initialize the conversation CSV logger.

        Args:
            log_dir: Directory to store the CSV file
        """
        self.log_dir = Path(log_dir)
        self.csv_path = self.log_dir / "conversations.csv"
        self._ensure_headers()

    def _ensure_headers(self):
        """Create the directory and a CSV with headers if it doesn't exist."""
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            if not self.csv_path.exists():
                with open(self.csv_path, 'w', newline='', encoding='utf-8') as f:
                    writer = csv.writer(f)
                    writer.writerow(COLUMNS)
        except OSError as e:
            # Later writes fail the same way and warn again
            print(f"Warning: Could not create {self.csv_path}: {e}", file=sys.stderr)

    def log(self, **fields) -> None:
        """
        Log a single conversation turn.

        Args:
            **fields: Keyword arguments accepted by build_row()
        """
        row = build_row(**fields)

        # Write row (with error handling for locked files)
        try:
            with open(self.csv_path, 'a', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow(row_values(row))
        except OSError as e:
            # File is locked (open in Excel) or unwritable - warn but don't crash
            print(f"Warning: Could not write to {self.csv_path}: {e}", file=sys.stderr)


# Global instance for convenience
_conversation_logger: Optional[ConversationCSVLogger] = None


def get_conversation_logger(log_dir: str = "logs") -> ConversationCSVLogger:
    """Get or create the global conversation CSV logger."""
    global _conversation_logger
    if _conversation_logger is None or _conversation_logger.log_dir != Path(log_dir):
        _conversation_logger = ConversationCSVLogger(log_dir=log_dir)
    return _conversation_logger


def log_conversation(log_dir: str = "logs", **fields) -> None:
    """
    Convenience function to log a conversation turn.

    This is the primary function to call from the orchestrator.
    """
    get_conversation_logger(log_dir).log(**fields)
