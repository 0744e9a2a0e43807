"""
Tests for the conversation CSV logger and the Google Sheets sink.
"""

import csv
from unittest.mock import MagicMock

import gspread
import pytest

from core import gsheets_logger
from core.conversation_csv import (
    COLUMNS, ConversationCSVLogger, build_row, get_conversation_logger, row_values,
)
from core.gsheets_logger import ERROR_COLUMNS, GoogleSheetsLogger, log_error_to_gsheets, log_to_gsheets


def read_rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


TURN = dict(
    session_id="user_123",
    user_query="해약금",
    bot_response="해약금 안내\n두 번째 줄",
    intent="faq_search",
    reply_type="direct_answer",
    matched_question="해약금",
    top_score=120,
    response_time_ms=12.5,
)


# === CSV ===

class TestBuildRow:

    def test_formats_values(self):
        row = build_row(**TURN)
        assert row["top_score"] == "120"
        assert row["response_time_ms"] == "12.50"
        assert row["model"] == ""
        assert set(row) == set(COLUMNS)

    def test_row_values_flatten_newlines(self):
        values = row_values(build_row(**TURN))
        assert values[COLUMNS.index("bot_response")] == "해약금 안내 두 번째 줄"
        assert len(values) == len(COLUMNS)


class TestConversationCSVLogger:

    def test_header_written_once(self, tmp_path):
        ConversationCSVLogger(str(tmp_path))
        ConversationCSVLogger(str(tmp_path))
        assert read_rows(tmp_path / "conversations.csv") == [COLUMNS]

    def test_one_row_per_turn(self, tmp_path):
        logger = ConversationCSVLogger(str(tmp_path))
        logger.log(**TURN)
        logger.log(**dict(TURN, user_query="A720WA", reply_type="price_prompt", model="A720WA.AKOR"))

        rows = read_rows(tmp_path / "conversations.csv")
        assert len(rows) == 3
        assert rows[1][COLUMNS.index("user_query")] == "해약금"
        assert rows[2][COLUMNS.index("model")] == "A720WA.AKOR"

    def test_unwritable_file_warns(self, tmp_path, capsys):
        logger = ConversationCSVLogger(str(tmp_path))
        logger.csv_path = tmp_path / "locked"
        logger.csv_path.mkdir()

        logger.log(**TURN)

        assert "Warning: Could not write" in capsys.readouterr().err

    def test_uncreatable_dir_warns(self, tmp_path, capsys):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")

        logger = ConversationCSVLogger(str(blocker / "logs"))
        logger.log(**TURN)

        err = capsys.readouterr().err
        assert "Warning: Could not create" in err
        assert "Warning: Could not write" in err

    def test_global_logger_follows_log_dir(self, tmp_path):
        first = get_conversation_logger(str(tmp_path / "a"))
        assert get_conversation_logger(str(tmp_path / "a")) is first
        assert get_conversation_logger(str(tmp_path / "b")) is not first


# === GOOGLE SHEETS ===

@pytest.fixture
def sheets_logger():
    """Logger with a mocked gspread client."""
    logger = GoogleSheetsLogger("spreadsheet-id", "credentials.json")
    logger._client = MagicMock()
    return logger


class TestGoogleSheetsLogger:

    def test_conversation_appended(self, sheets_logger):
        worksheet = sheets_logger._client.open_by_key.return_value.worksheet.return_value

        assert sheets_logger.log_conversation(**TURN)

        values = worksheet.append_row.call_args[0][0]
        assert values[COLUMNS.index("user_query")] == "해약금"

    def test_daily_sheet_created_with_header(self, sheets_logger):
        spreadsheet = sheets_logger._client.open_by_key.return_value
        spreadsheet.worksheet.side_effect = gspread.WorksheetNotFound("missing")
        new_sheet = spreadsheet.add_worksheet.return_value

        assert sheets_logger.log_error("user_123", "RuntimeError", "boom", "trace", "ctx")

        assert spreadsheet.add_worksheet.call_args[1]["title"].startswith("errors-")
        header = new_sheet.append_row.call_args_list[0][0][0]
        assert header == ERROR_COLUMNS

    def test_worksheet_cached(self, sheets_logger):
        spreadsheet = sheets_logger._client.open_by_key.return_value
        sheets_logger.log_conversation(**TURN)
        sheets_logger.log_conversation(**TURN)
        assert spreadsheet.worksheet.call_count == 1

    def test_failure_returns_false(self, sheets_logger, capsys):
        sheets_logger._client.open_by_key.side_effect = RuntimeError("offline")

        assert not sheets_logger.log_conversation(**TURN)
        assert "Failed to log conversations to Google Sheets" in capsys.readouterr().err


class TestModuleFunctions:

    def test_noop_without_init(self, monkeypatch):
        monkeypatch.setattr(gsheets_logger, "_gsheets_logger", None)
        assert log_to_gsheets(**TURN) is False
        assert log_error_to_gsheets("s", "E", "m") is False

    def test_uses_global_logger(self, monkeypatch, sheets_logger):
        monkeypatch.setattr(gsheets_logger, "_gsheets_logger", sheets_logger)
        assert log_to_gsheets(**TURN) is True
