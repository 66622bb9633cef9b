# routes/ai.py

import logging

from fastapi import APIRouter, Depends

from assistant import FAILURE_MESSAGE, OFFLINE_MESSAGE, provide_assistant
from database import get_store
from models import AIRequest, AIResponse
from repositories import ChatRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


def get_chat_repository(store=Depends(get_store)) -> ChatRepository:
    return ChatRepository(store)


@router.post("", response_model=AIResponse)
def ask(payload: AIRequest, assistant=Depends(provide_assistant), chat: ChatRepository = Depends(get_chat_repository)):
    if assistant is None:
        return AIResponse(text=OFFLINE_MESSAGE, session_id=payload.session_id)

    try:
        text = assistant.reply([turn.model_dump() for turn in payload.history], payload.prompt)
    except Exception:
        # provider errors never reach the chat user
        logger.exception("AI provider call failed")
        return AIResponse(text=FAILURE_MESSAGE)

    if payload.session_id:
        chat.add_message(payload.session_id, "user", payload.prompt)
        chat.add_message(payload.session_id, "model", text)

    logger.debug("AI response generated: prompt=%d chars, response=%d chars", len(payload.prompt), len(text))
    return AIResponse(text=text, session_id=payload.session_id)

@router.get("/history/{session_id}")
def get_history(session_id: str, limit: int = 50, chat: ChatRepository = Depends(get_chat_repository)):
    messages = chat.get_session_history(session_id, limit)
    return {"messages": messages, "count": len(messages)}

@router.delete("/history/{session_id}")
def clear_history(session_id: str, chat: ChatRepository = Depends(get_chat_repository)):
    deleted = chat.clear_session(session_id)
    return {"message": "Chat history cleared", "deleted": deleted}
