"""Request-scoped accessors and the response envelope."""

from typing import Any, Optional

from fastapi import Request

from .assistant.providers import AssistantClient
from .config import Settings
from .database import Database


def get_db(request: Request) -> Database:
    """Database handle created by the application factory."""
    return request.app.state.db


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_assistant(request: Request) -> AssistantClient:
    return request.app.state.assistant


def success(data: Any = None, count: Optional[int] = None, **extra) -> dict[str, Any]:
    """
    Build a success envelope.

    Args:
        data: Payload placed under ``data`` (omitted when None)
        count: Item count for list responses
        **extra: Additional top-level keys such as ``token`` or ``message``

    Returns:
        The envelope dict
    """
    body: dict[str, Any] = {"success": True}
    if count is not None:
        body["count"] = count
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body
