"""Coaching conversations, suggestions and news."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..auth import get_current_user
from ..database import Database
from ..dependencies import get_assistant, get_db, success
from ..errors import AuthenticationError, BadRequestError, NotFoundError
from ..objectives.routes import get_owned_objective
from .prompts import COACH_SYSTEM_PROMPT, news_items, suggestions_prompt, system_prompt
from .providers import AssistantClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


class ConversationCreate(BaseModel):
    objective_id: Optional[str] = None


class MessageCreate(BaseModel):
    message: Optional[str] = None


def _with_objective(db: Database, conversation: dict[str, Any]) -> dict[str, Any]:
    """Attach a short summary of the linked objective, if any."""
    objective = (
        db.get_objective(conversation["objective_id"])
        if conversation["objective_id"]
        else None
    )
    conversation["objective"] = (
        {
            "id": objective.id,
            "name": objective.name,
            "category": objective.category.value,
            "description": objective.description,
        }
        if objective
        else None
    )
    return conversation


def get_owned_conversation(
    db: Database, conversation_id: str, user: dict
) -> dict[str, Any]:
    conversation = db.get_conversation(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    if conversation["user_id"] != user["id"]:
        raise AuthenticationError("Not authorized to access this conversation")
    return conversation


@router.get("/conversations")
async def list_conversations(
    db: Database = Depends(get_db), user: dict = Depends(get_current_user)
):
    conversations = [_with_objective(db, c) for c in db.list_conversations(user["id"])]
    return success(conversations, count=len(conversations))


@router.post("/conversations", status_code=201)
async def create_conversation(
    body: ConversationCreate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    if body.objective_id:
        get_owned_objective(db, body.objective_id, user)
    conversation = db.create_conversation(user["id"], body.objective_id or None)
    return success(conversation)


@router.get("/conversations/{conversation_id}")
async def get_conversation(
    conversation_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return success(_with_objective(db, get_owned_conversation(db, conversation_id, user)))


@router.delete("/conversations/{conversation_id}")
async def delete_conversation(
    conversation_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    get_owned_conversation(db, conversation_id, user)
    db.delete_conversation(conversation_id)
    return success({})


@router.post("/conversations/{conversation_id}/messages")
async def add_message(
    conversation_id: str,
    body: MessageCreate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
    assistant: AssistantClient = Depends(get_assistant),
):
    """Append the user's message and the assistant's reply."""
    if not body.message:
        raise BadRequestError("Please provide a message")

    conversation = get_owned_conversation(db, conversation_id, user)
    objective = (
        db.get_objective(conversation["objective_id"])
        if conversation["objective_id"]
        else None
    )

    messages = conversation["messages"] + [{"role": "user", "content": body.message}]
    prompt = [{"role": "system", "content": system_prompt(objective)}] + [
        {"role": m["role"], "content": m["content"]} for m in messages
    ]

    reply = await assistant.complete(prompt)
    messages.append({"role": "assistant", "content": reply})
    logger.debug(f"Conversation {conversation_id} now has {len(messages)} messages")

    return success(db.save_messages(conversation_id, messages))


@router.get("/objectives/{objective_id}/suggestions")
async def get_suggestions(
    objective_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
    assistant: AssistantClient = Depends(get_assistant),
):
    objective = get_owned_objective(db, objective_id, user)
    suggestions = await assistant.complete(
        [
            {"role": "system", "content": COACH_SYSTEM_PROMPT},
            {"role": "user", "content": suggestions_prompt(objective)},
        ]
    )
    return success({"suggestions": suggestions})


@router.get("/objectives/{objective_id}/news")
async def get_news(
    objective_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    items = news_items(get_owned_objective(db, objective_id, user))
    return success(items, count=len(items))
