"""
Skill webhook for Care-Bot.

POST /api/chatbot answers one chat-platform skill request with a skill
response envelope. GET /api/chatbot is a status check.

Run:
    uvicorn server:app --host 0.0.0.0 --port 8000
    python server.py              (HOST / PORT from the environment)
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Optional, Union

from fastapi import Depends, FastAPI, Request
from pydantic import BaseModel, ConfigDict, ValidationError

from config.settings import load_settings
from core.gsheets_logger import init_gsheets_logger
from core.orchestrator import OrchestratorComponents, create_components_from_settings, process_utterance
from core.structured_logging import get_logger, setup_logging

SERVICE_NAME = "LG 구독 챗봇 API v5"

_logger = get_logger("server")


# =============================================================================
# Request / response models
# =============================================================================

class SkillUser(BaseModel):
    """Requesting user; only the id is used."""
    model_config = ConfigDict(extra="allow")
    id: Optional[Union[str, int]] = None


class UserRequest(BaseModel):
    """The user's turn inside a skill request."""
    model_config = ConfigDict(extra="allow")
    utterance: Optional[str] = None
    user: Optional[SkillUser] = None


class SkillRequest(BaseModel):
    """Skill request payload. Unknown platform fields are accepted and ignored."""
    model_config = ConfigDict(extra="allow")
    userRequest: Optional[UserRequest] = None

    @property
    def utterance(self) -> str:
        if self.userRequest is None or self.userRequest.utterance is None:
            return ""
        return self.userRequest.utterance.strip()

    @property
    def user_id(self) -> str:
        if self.userRequest is None or self.userRequest.user is None:
            return ""
        user_id = self.userRequest.user.id
        return str(user_id) if user_id is not None else ""


class StatusResponse(BaseModel):
    """Status payload returned by GET /api/chatbot."""
    status: str
    message: str
    timestamp: str


# =============================================================================
# Components
# =============================================================================

@lru_cache(maxsize=1)
def get_components() -> OrchestratorComponents:
    """
    Build the process-wide components on first use.

    Also sets up logging and, when configured, the Google Sheets sink.
    """
    settings = load_settings()
    setup_logging(
        log_dir=str(settings.log_dir),
        enable_file=settings.enable_file_log,
        enable_error_log=settings.enable_file_log,
    )
    if settings.gsheets_spreadsheet_id and settings.gsheets_credentials_path:
        init_gsheets_logger(settings.gsheets_spreadsheet_id, settings.gsheets_credentials_path)
        _logger.info("Google Sheets logging enabled", extra={"event": "gsheets_enabled"})
    return create_components_from_settings(settings)


def parse_skill_request(body: Any) -> SkillRequest:
    """Validate a request body; anything unusable becomes an empty request."""
    try:
        return SkillRequest.model_validate(body)
    except ValidationError as e:
        _logger.warning(
            f"Unusable skill request: {e.error_count()} validation errors",
            extra={"event": "invalid_request"}
        )
        return SkillRequest()


# =============================================================================
# Routes
# =============================================================================

app = FastAPI(title="Care-Bot Skill Webhook")


@app.post("/api/chatbot")
async def chatbot(
    request: Request,
    components: OrchestratorComponents = Depends(get_components),
) -> dict:
    """Answer one skill request. Always HTTP 200 with a skill envelope."""
    try:
        body = await request.json()
    except ValueError:
        _logger.warning("Request body is not JSON", extra={"event": "invalid_request"})
        body = {}

    skill_request = parse_skill_request(body)
    result = process_utterance(
        skill_request.utterance,
        components,
        session_id=skill_request.user_id,
    )
    return result.to_envelope()


@app.get("/api/chatbot", response_model=StatusResponse)
def status() -> StatusResponse:
    """Health check."""
    return StatusResponse(
        status="ok",
        message=SERVICE_NAME,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "server:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
