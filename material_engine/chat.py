"""Conversation state for the assistant chat and the patent Q&A panel.

Each session owns its history; nothing is shared at module level. A turn is
committed to the history only after the API call succeeded, so a failed send
can simply be retried by the caller.
"""
from __future__ import annotations

import uuid
from typing import Dict, List, Optional

from .client import GenAIClient, model_turn, user_turn
from .errors import SessionClosed
from .logger import setup_logger
from .prompts import PATENT_ANALYST_ACK, PATENT_ANALYST_INSTRUCTION, SYSTEM_INSTRUCTION
from .types import ChatMessage
from .utils import clean_text, now_iso

logger = setup_logger(__name__)

EMPTY_REPLY = "System error: No response generated."


def _message(role: str, content: str) -> ChatMessage:
    return ChatMessage(role=role, content=content, id=str(uuid.uuid4()), timestamp=now_iso())


class ChatSession:
    def __init__(
        self,
        client: GenAIClient,
        system: Optional[str] = SYSTEM_INSTRUCTION,
        model: Optional[str] = None,
    ) -> None:
        self.client = client
        self.system = system
        self.model = model
        self.history: List[Dict[str, object]] = []
        self.messages: List[ChatMessage] = []
        self.closed = False

    def __enter__(self) -> "ChatSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def send(self, message: str) -> str:
        if self.closed:
            raise SessionClosed("Chat session is closed")
        text = str(message or "").strip()
        if not text:
            return ""

        result = self.client.generate(
            text,
            system=self.system,
            model=self.model,
            thinking=True,
            history=self.history,
        )
        raw_reply = result.text.strip() or EMPTY_REPLY
        reply = clean_text(raw_reply)

        self.history.append(user_turn(text))
        self.history.append(model_turn(raw_reply))
        self.messages.append(_message("user", text))
        self.messages.append(_message("model", reply))
        logger.debug("Chat turn committed; history=%d turns", len(self.history))
        return reply

    def close(self) -> None:
        self.history = []
        self.closed = True


class PatentChatSession(ChatSession):
    """Chat grounded on one uploaded patent PDF."""

    def __init__(
        self,
        client: GenAIClient,
        pdf_b64: str,
        model: Optional[str] = None,
        mime_type: str = "application/pdf",
    ) -> None:
        super().__init__(client, system=None, model=model)
        self.history = [
            user_turn(PATENT_ANALYST_INSTRUCTION, documents=[(mime_type, pdf_b64)]),
            model_turn(PATENT_ANALYST_ACK),
        ]
        self.messages = [_message("model", PATENT_ANALYST_ACK)]
