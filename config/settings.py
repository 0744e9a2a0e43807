"""
Runtime settings for Care-Bot.

Values come from CAREBOT_* environment variables with defaults that
point at the bundled data/ directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class Settings:
    """
    Configuration container for data sources and logging sinks.

    Attributes:
        faq_path: FAQ catalog JSON
        price_path: Price table JSON (written by price_loader.py)
        log_dir: Directory for log files and conversations.csv
        debug_mode: Show debug details in the Streamlit console
        enable_conversation_csv: Write one CSV row per turn
        enable_file_log: Write JSON logs to carebot.log
        gsheets_spreadsheet_id: Google Sheets log target (optional)
        gsheets_credentials_path: Service account JSON file (optional)
    """
    faq_path: Path
    price_path: Path
    log_dir: Path
    debug_mode: bool = False
    enable_conversation_csv: bool = True
    enable_file_log: bool = False
    gsheets_spreadsheet_id: Optional[str] = None
    gsheets_credentials_path: Optional[Path] = None


def load_settings() -> Settings:
    """Load settings from the environment, falling back to bundled paths."""
    data_dir = Path(os.getenv('CAREBOT_DATA_DIR', str(BASE_DIR / 'data')))
    credentials = os.getenv('CAREBOT_GSHEETS_CREDENTIALS')

    return Settings(
        faq_path=Path(os.getenv('CAREBOT_FAQ_PATH', str(data_dir / 'faq.json'))),
        price_path=Path(os.getenv('CAREBOT_PRICE_PATH', str(data_dir / 'price-data.json'))),
        log_dir=Path(os.getenv('CAREBOT_LOG_DIR', 'logs')),
        debug_mode=_env_flag('CAREBOT_DEBUG', False),
        enable_conversation_csv=_env_flag('CAREBOT_CONVERSATION_CSV', True),
        enable_file_log=_env_flag('CAREBOT_FILE_LOG', False),
        gsheets_spreadsheet_id=os.getenv('CAREBOT_GSHEETS_SPREADSHEET_ID') or None,
        gsheets_credentials_path=Path(credentials) if credentials else None,
    )
