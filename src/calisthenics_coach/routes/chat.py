"""Coach chat endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ..llm.base import BaseLLMClient
from ..llm.types import ChatMessage, GenerationConfig
from ..prompts import COACH_SYSTEM_PROMPT
from ..store.base import BaseStore
from ..store.types import Conversation, Message
from ..streaming.relay import relay_events
from ..streaming.sse import SSE_HEADERS
from .deps import error_response, get_conversation_store, get_llm_client, new_conversation_id
from .schemas import ChatRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

CHAT_OPTIONS = GenerationConfig(temperature=0.7)


def _history(conversation: Conversation, user_message: Message) -> list[ChatMessage]:
    """Prior transcript plus the new user message, in arrival order."""
    messages = [ChatMessage(role=m.role, content=m.content) for m in conversation.messages]
    messages.append(ChatMessage(role=user_message.role, content=user_message.content))
    return messages


def _save_exchange(
    store: BaseStore[Conversation],
    conversation: Conversation,
    user_message: Message,
    reply: str,
) -> Conversation:
    # Re-read so an exchange finished meanwhile on the same id is not dropped.
    # Concurrent requests on one conversation are still unordered.
    current = store.get(conversation.id) or conversation
    updated = current.with_exchange(user_message, Message(role="assistant", content=reply))
    store.set(updated.id, updated)
    return updated


def _open_conversation(store: BaseStore[Conversation], body: ChatRequest) -> Conversation:
    conversation_id = body.conversation_id or new_conversation_id()
    return store.get(conversation_id) or Conversation(id=conversation_id, owner_id=body.user_id)


@router.post("/chat/stream")
async def chat_stream(
    body: ChatRequest,
    request: Request,
    llm: BaseLLMClient = Depends(get_llm_client),
    conversations: BaseStore[Conversation] = Depends(get_conversation_store),
):
    """Stream the coach's reply as server-sent events.

    The user message and the reply are stored together once the reply is
    complete; a failed or abandoned stream leaves the conversation as it was.
    """
    error = body.validation_error()
    if error:
        return error_response(400, error)

    conversation = _open_conversation(conversations, body)
    user_message = Message(role="user", content=body.message)

    async def finalize(text: str) -> dict:
        _save_exchange(conversations, conversation, user_message, text)
        return {"conversationId": conversation.id}

    events = relay_events(
        lambda: llm.iter_chat(_history(conversation, user_message), COACH_SYSTEM_PROMPT, CHAT_OPTIONS),
        finalize,
        is_disconnected=request.is_disconnected,
        label="chat",
    )
    return StreamingResponse(events, media_type="text/event-stream", headers=SSE_HEADERS)


@router.post("/chat")
async def chat(
    body: ChatRequest,
    llm: BaseLLMClient = Depends(get_llm_client),
    conversations: BaseStore[Conversation] = Depends(get_conversation_store),
):
    error = body.validation_error()
    if error:
        return error_response(400, error)

    conversation = _open_conversation(conversations, body)
    user_message = Message(role="user", content=body.message)
    try:
        reply = await llm.chat(_history(conversation, user_message), COACH_SYSTEM_PROMPT, CHAT_OPTIONS)
    except Exception as e:
        logger.exception("Chat error")
        return error_response(500, str(e))

    _save_exchange(conversations, conversation, user_message, reply)
    return {"success": True, "response": reply, "conversationId": conversation.id}


@router.get("/chat/{conversation_id}")
async def get_conversation(
    conversation_id: str,
    conversations: BaseStore[Conversation] = Depends(get_conversation_store),
):
    conversation = conversations.get(conversation_id)
    if conversation is None:
        return error_response(404, "Conversation not found")
    return {"success": True, "conversation": conversation.to_dict()}
