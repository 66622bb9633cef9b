import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List

import config
from errors import ConflictError
from models import ChatMessage, ChatRole
from store import ConditionFailed, EntityStore

from .base import new_id, storage_errors

logger = logging.getLogger(__name__)

CLEAR_SCAN_LIMIT = 1000
MAX_TIMESTAMP_RETRIES = 5


class ChatRepository:
    """Append-only message log, one partition per chat session.

    Messages are ordered by their ISO timestamp and a unique index on
    (session_id, timestamp) keeps that order total within a session.
    """

    entity_name = "ChatMessage"

    def __init__(self, store: EntityStore, table=None):
        self.store = store
        self.table = table or config.CHAT_COLLECTION

    def get_session_history(self, session_id: str, limit: int = 50) -> List[ChatMessage]:
        with storage_errors(self.entity_name, "get_history", session_id):
            items = self.store.scan_filtered(
                self.table,
                {"session_id": session_id},
                sort=[("timestamp", 1)],
                limit=limit,
            )
        return [ChatMessage(**i) for i in items]

    def add_message(self, session_id: str, role: ChatRole, text: str) -> ChatMessage:
        moment = datetime.now(timezone.utc)
        for _ in range(MAX_TIMESTAMP_RETRIES):
            item = {
                "id": new_id(),
                "session_id": session_id,
                "role": role,
                "text": text,
                "timestamp": moment.isoformat(timespec="microseconds"),
            }
            try:
                with storage_errors(self.entity_name, "add_message", session_id):
                    self.store.put(self.table, item, if_absent=True)
            except ConditionFailed:
                moment += timedelta(microseconds=1)
                continue
            logger.debug("Added chat message to session %s (%s)", session_id, role)
            return ChatMessage(**item)
        raise ConflictError(f"Could not order message in session {session_id}", {"session_id": session_id})

    def clear_session(self, session_id: str) -> int:
        """Delete every message in the session, one by one.

        Not atomic: a message appended while this runs may survive.
        """
        messages = self.get_session_history(session_id, CLEAR_SCAN_LIMIT)
        with storage_errors(self.entity_name, "clear_session", session_id):
            for message in messages:
                self.store.delete(self.table, message.id)
        logger.info("Cleared chat session %s (%d messages)", session_id, len(messages))
        return len(messages)

    def get_formatted_history(self, session_id: str) -> List[Dict[str, str]]:
        return [{"role": m.role, "text": m.text} for m in self.get_session_history(session_id)]
