"""
Google Sheets sink for Care-Bot conversation and error logs.

Used on hosts whose local disk does not survive a restart. Rows go to one
tab per day and kind:
- conversations-YYYY-MM-DD (same columns as conversations.csv)
- errors-YYYY-MM-DD

A failed append is reported on stderr and never raised.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import gspread
from google.oauth2.service_account import Credentials

from core.conversation_csv import COLUMNS as CONVERSATION_COLUMNS, build_row, row_values

ERROR_COLUMNS = [
    'timestamp',
    'session_id',
    'error_type',
    'error_message',
    'stack_trace',
    'context',
]

# Sheets rejects cells over 50k characters
MAX_CELL_LENGTH = 50000

NEW_SHEET_ROWS = 1000


class GoogleSheetsLogger:
    """
    Appends log rows to a spreadsheet through a service account.

    The client, spreadsheet and worksheets are opened lazily and cached,
    so constructing the logger never touches the network.
    """

    SCOPES = [
        'https://www.googleapis.com/auth/spreadsheets',
        'https://www.googleapis.com/auth/drive'
    ]

    def __init__(self, spreadsheet_id: str, credentials_path: Path):
        self.spreadsheet_id = spreadsheet_id
        self.credentials_path = Path(credentials_path)
        self._client = None
        self._spreadsheet = None
        self._worksheets: Dict[str, gspread.Worksheet] = {}

    def _open_spreadsheet(self):
        if self._client is None:
            credentials = Credentials.from_service_account_file(
                str(self.credentials_path), scopes=self.SCOPES
            )
            self._client = gspread.authorize(credentials)
        if self._spreadsheet is None:
            self._spreadsheet = self._client.open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    def _daily_worksheet(self, kind: str, columns: List[str]):
        """Today's tab for `kind`, created with a header row on first use."""
        title = f"{kind}-{datetime.now().strftime('%Y-%m-%d')}"
        worksheet = self._worksheets.get(title)
        if worksheet is not None:
            return worksheet

        spreadsheet = self._open_spreadsheet()
        try:
            worksheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            worksheet = spreadsheet.add_worksheet(title=title, rows=NEW_SHEET_ROWS, cols=len(columns))
            worksheet.append_row(columns, value_input_option='RAW')

        self._worksheets[title] = worksheet
        return worksheet

    def _append(self, kind: str, columns: List[str], values: List[str]) -> bool:
        try:
            worksheet = self._daily_worksheet(kind, columns)
            worksheet.append_row(values, value_input_option='RAW')
        except Exception as e:
            print(f"Warning: Failed to log {kind} to Google Sheets: {e}", file=sys.stderr)
            return False
        return True

    def log_conversation(self, **fields) -> bool:
        """
        Append one conversation turn.

        Args:
            **fields: Keyword arguments accepted by conversation_csv.build_row()

        Returns:
            True when the row was written
        """
        return self._append("conversations", CONVERSATION_COLUMNS, row_values(build_row(**fields)))

    def log_error(
        self,
        session_id: str,
        error_type: str,
        error_message: str,
        stack_trace: Optional[str] = None,
        context: Optional[str] = None,
    ) -> bool:
        """Append one error. Returns True when the row was written."""
        values = [
            datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            session_id or '',
            error_type or '',
            error_message or '',
            (stack_trace or '')[:MAX_CELL_LENGTH],
            context or '',
        ]
        return self._append("errors", ERROR_COLUMNS, values)


# Process-wide sink, set by the entry point when Sheets logging is configured
_gsheets_logger: Optional[GoogleSheetsLogger] = None


def init_gsheets_logger(spreadsheet_id: str, credentials_path: Path) -> GoogleSheetsLogger:
    """Configure the process-wide Google Sheets sink."""
    global _gsheets_logger
    _gsheets_logger = GoogleSheetsLogger(spreadsheet_id, credentials_path)
    return _gsheets_logger


def get_gsheets_logger() -> Optional[GoogleSheetsLogger]:
    return _gsheets_logger


def log_to_gsheets(**fields) -> bool:
    """Log a turn to the configured sink. False when none is configured or the write failed."""
    if _gsheets_logger is None:
        return False
    return _gsheets_logger.log_conversation(**fields)


def log_error_to_gsheets(
    session_id: str,
    error_type: str,
    error_message: str,
    stack_trace: Optional[str] = None,
    context: Optional[str] = None,
) -> bool:
    """Log an error to the configured sink. False when none is configured or the write failed."""
    if _gsheets_logger is None:
        return False
    return _gsheets_logger.log_error(session_id, error_type, error_message, stack_trace, context)
