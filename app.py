"""
Care-Bot Streamlit console - subscription FAQ and price lookup

Run with: streamlit run app.py

Operators use this page to try utterances and quick-reply buttons exactly
as the chat platform would send them, without a platform account.

Architecture:
- This file: Streamlit UI only
- core/orchestrator.py: Utterance processing coordination
- handlers/: Intent-specific handlers
- core/: Business logic (catalog, scoring, price lookup)
- ui/: Reply rendering
- server.py: Chat platform webhook (same orchestrator)
"""

import uuid

import streamlit as st

from config.settings import load_settings
from core.gsheets_logger import init_gsheets_logger
from core.orchestrator import create_components_from_settings, process_utterance
from core.structured_logging import setup_logging, get_logger


# =============================================================================
# CONFIGURATION
# =============================================================================

settings = load_settings()
DEBUG_MODE = settings.debug_mode

# Initialize structured logging
setup_logging(
    log_dir=str(settings.log_dir),
    console_level=20,  # INFO
    file_level=10,     # DEBUG
    enable_console=True,
    enable_file=settings.enable_file_log,
    enable_error_log=True,
)
app_logger = get_logger("app")

# Google Sheets logging for hosted deployments
if settings.gsheets_spreadsheet_id and settings.gsheets_credentials_path:
    init_gsheets_logger(settings.gsheets_spreadsheet_id, settings.gsheets_credentials_path)
    app_logger.info("Google Sheets logging initialized")

# Streamlit page config
st.set_page_config(
    page_title="Care-Bot - 구독 상담 도우미",
    page_icon="🤖",
    layout="wide"
)


# =============================================================================
# COMPONENT INITIALIZATION
# =============================================================================

@st.cache_resource
def get_components():
    """Build the shared components once per process (cached)."""
    return create_components_from_settings(settings)


def new_session() -> None:
    st.session_state.session_id = f"console-{uuid.uuid4().hex[:12]}"
    st.session_state.messages = []
    # Empty utterance: greet with the main menu
    st.session_state.pending_utterance = ""


def send(utterance: str) -> None:
    """Queue an utterance (typed or from a quick-reply button) for the next run."""
    st.session_state.pending_utterance = utterance


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    st.title("🤖 Care-Bot - 구독 상담 도우미")
    st.markdown("*FAQ 검색 · 구독료 조회 콘솔*")

    if "session_id" not in st.session_state:
        new_session()

    components = get_components()
    catalog = components.faq.catalog

    # Sidebar - Catalog and session
    with st.sidebar:
        st.header("📦 Catalog")
        col1, col2 = st.columns(2)
        with col1:
            st.metric("FAQ entries", len(catalog.faq_entries))
        with col2:
            st.metric("Price rows", len(catalog.price_entries))
        if catalog.price_as_of:
            st.write(f"**Price date:** {catalog.price_as_of}")

        st.markdown("---")
        st.header("📊 Session")
        st.write(f"**Session ID:** `{st.session_state.session_id}`")
        st.write(f"**Messages:** {len(st.session_state.messages)}")

        if st.button("🔄 New Session"):
            new_session()
            st.rerun()

    typed = st.chat_input("키워드나 모델명을 입력하세요 (예: 해약금, A720WA)")
    if typed:
        send(typed)

    # Answer the queued utterance before drawing the history
    utterance = st.session_state.pending_utterance
    if utterance is not None:
        st.session_state.pending_utterance = None
        result = process_utterance(
            utterance,
            components,
            session_id=st.session_state.session_id,
            debug_mode=DEBUG_MODE
        )
        if utterance:
            st.session_state.messages.append({"role": "user", "content": utterance})
        st.session_state.messages.append({
            "role": "assistant",
            "content": result.text,
            "buttons": result.buttons,
            "debug": {
                "intent": result.intent.type.value if result.intent else None,
                "reply_type": result.reply.type.value,
                "response_time_ms": round(result.response_time_ms, 2),
                "lines": result.debug_lines,
            },
        })

    # Display chat history
    last_index = len(st.session_state.messages) - 1
    for index, message in enumerate(st.session_state.messages):
        with st.chat_message(message["role"]):
            # Keep line breaks as the chat platform shows them
            st.text(message["content"])

            if DEBUG_MODE and message.get("debug"):
                with st.expander("🔍 Debug Info"):
                    st.json(message["debug"])

            # Only the latest reply's buttons are live
            if index == last_index and message.get("buttons"):
                columns = st.columns(min(len(message["buttons"]), 5))
                for i, button in enumerate(message["buttons"]):
                    with columns[i % len(columns)]:
                        st.button(
                            button.label,
                            key=f"qr-{index}-{i}",
                            on_click=send,
                            args=(button.text,),
                        )


if __name__ == "__main__":
    main()
