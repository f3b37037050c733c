"""
Chat API server.

Provides the REST API for chat front-ends: sending messages, inspecting and
clearing session history, summaries and service statistics.
"""

import asyncio
import time
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .. import __version__
from ..services.chat_service import ChatService
from ..utils import get_logger

API_PREFIX = "/api/chat"

# Create FastAPI app
app = FastAPI(
    title="SmartChat API",
    description="Conversational assistant with tool calling and session memory",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global state (will be set by init_api function)
chat_service: Optional[ChatService] = None
max_message_length: int = 2000
logger = get_logger("chat_api")


class ChatRequest(BaseModel):
    """Message sent by a client."""
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = Field(default=None, description="User message")
    session_id: Optional[str] = Field(
        default=None, alias="sessionId", description="Conversation identifier"
    )


class ChatResponse(BaseModel):
    """Reply returned to a client."""
    model_config = ConfigDict(populate_by_name=True)

    reply: Optional[str] = Field(default=None, description="Assistant reply")
    response: Optional[str] = Field(default=None, description="Same as reply, for older clients")
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    success: bool = Field(default=True)
    error: Optional[str] = Field(default=None)

    @classmethod
    def ok(cls, reply: str, session_id: str) -> "ChatResponse":
        return cls(reply=reply, response=reply, session_id=session_id)

    @classmethod
    def failure(cls, error: str) -> "ChatResponse":
        return cls(success=False, error=error)


class PromptRequest(BaseModel):
    """Legacy one-shot prompt."""
    prompt: Optional[str] = None


def init_api(service: ChatService, message_length_limit: int = 2000):
    """
    Initialize API with dependencies.

    Args:
        service: ChatService instance
        message_length_limit: Longest accepted message, in characters
    """
    global chat_service, max_message_length

    chat_service = service
    max_message_length = message_length_limit

    logger.info(f"Chat API initialized, max message length: {max_message_length}")


def generate_session_id() -> str:
    return f"session-{uuid.uuid4()}"


def _service() -> ChatService:
    if chat_service is None:
        raise HTTPException(status_code=500, detail="Chat service not initialized")
    return chat_service


def _error(status_code: int, response: ChatResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(by_alias=True),
    )


@app.exception_handler(Exception)
async def handle_exception(request: Request, exc: Exception):
    logger.error(f"Unhandled API error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


@app.post(f"{API_PREFIX}/message", response_model=ChatResponse, response_model_by_alias=True)
async def send_message(request: ChatRequest):
    """
    Send a message and get the assistant's reply.

    A session id is generated when the client sends none.
    """
    service = _service()

    session_id = request.session_id
    if not session_id or not session_id.strip():
        session_id = generate_session_id()
        logger.info(f"Generated new session ID: {session_id}")

    if not request.message or not request.message.strip():
        logger.warning("Empty message received")
        return _error(400, ChatResponse.failure("Message cannot be empty"))

    user_message = request.message.strip()
    if len(user_message) > max_message_length:
        logger.warning(f"Message too long: {len(user_message)} characters")
        return _error(
            400,
            ChatResponse.failure(f"Message is too long (max {max_message_length} characters)"),
        )

    # Each turn runs on a worker thread
    reply = await asyncio.to_thread(service.chat, session_id, user_message)

    return ChatResponse.ok(reply, session_id)


@app.post(API_PREFIX)
@app.post(f"{API_PREFIX}/")
async def legacy_chat(request: PromptRequest) -> Dict[str, str]:
    """One-off completion without session memory or tools."""
    service = _service()

    if not request.prompt or not request.prompt.strip():
        logger.warning("Empty prompt received")
        return JSONResponse(status_code=400, content={"error": "Prompt cannot be empty"})

    logger.info(f"Received legacy chat request with prompt length: {len(request.prompt)}")
    response = await asyncio.to_thread(service.quick_response, request.prompt)

    return {"response": response}


@app.delete(f"{API_PREFIX}/clear/{{session_id}}")
async def clear_conversation(session_id: str) -> Dict[str, str]:
    """Clear conversation history for a session."""
    _service().clear(session_id)
    logger.info(f"Cleared conversation for session: {session_id}")
    return {"message": "Conversation cleared successfully", "sessionId": session_id}


def _serialize_history(service: ChatService, session_id: str):
    return [message.model_dump(mode="json") for message in service.history(session_id)]


@app.get(f"{API_PREFIX}/history/{{session_id}}")
async def get_history(session_id: str):
    """Get conversation history for a session."""
    return _serialize_history(_service(), session_id)


@app.get(f"{API_PREFIX}/history/{{session_id}}/formatted")
async def get_formatted_history(session_id: str) -> Dict[str, Any]:
    """Get conversation history as readable text."""
    service = _service()
    return {
        "sessionId": session_id,
        "messageCount": len(service.history(session_id)),
        "conversation": service.formatted_history(session_id),
    }


@app.get(f"{API_PREFIX}/export/{{session_id}}")
async def export_conversation(session_id: str) -> Dict[str, Any]:
    """Export conversation messages with metadata."""
    messages = _serialize_history(_service(), session_id)
    return {
        "sessionId": session_id,
        "exportTime": int(time.time() * 1000),
        "messages": messages,
        "messageCount": len(messages),
    }


@app.get(f"{API_PREFIX}/summary/{{session_id}}")
async def get_summary(session_id: str) -> Dict[str, str]:
    """Summarize a session's conversation."""
    summary = await asyncio.to_thread(_service().summary, session_id)
    return {"summary": summary, "sessionId": session_id}


@app.get(f"{API_PREFIX}/stats")
async def get_statistics() -> Dict[str, Any]:
    """Session counts plus model availability."""
    service = _service()
    stats = service.statistics()
    model_available = await asyncio.to_thread(service.is_model_available)
    status = service.get_status()

    return {
        "activeSessions": stats.active_sessions,
        "totalMessages": stats.total_messages,
        "maxHistorySize": stats.max_history_size,
        "modelAvailable": model_available,
        "aiProvider": status["provider"],
        "model": status["model"],
        "tools": status["tools"],
    }


@app.get(f"{API_PREFIX}/health")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "UP",
        "service": "SmartChat API",
        "version": __version__,
        "chat_service": "connected" if chat_service else "disconnected",
        "timestamp": datetime.now().isoformat(),
    }
