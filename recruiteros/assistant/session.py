"""
Assistant chat session.

A session owns the chat transcript: an append-only sequence of turns
seeded with a greeting from the assistant.  Only one request to the
assistant may be outstanding at a time, modelled as a two-state
machine::

    IDLE --send--> PENDING --reply/fallback--> IDLE

A `send` issued while PENDING is rejected and leaves the transcript
untouched.  The user's turn is appended as soon as a send is accepted,
and every accepted send is answered by exactly one assistant turn:
the service reply, or a fixed apology if the call fails.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from ..llm.providers import EMPTY_REPLY, AIProvider
from ..pipeline.schema import CandidateRecord, ChatRole, ChatTurn
from .context import build_context

logger = logging.getLogger(__name__)

GREETING = "Hi! I'm your recruitment assistant. Ask me anything about the candidates or recruitment strategies."
FALLBACK_REPLY = "Sorry, I had trouble connecting. Please try again."


class SessionState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class ChatSession:
    """Chat transcript plus the single-request guard.

    Args:
        provider: AI provider acting as the conversational assistant.
        max_context_records: Cap passed to `build_context`.
        clock: Produces turn timestamps.
    """

    def __init__(
        self,
        provider: AIProvider,
        max_context_records: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.provider = provider
        self.max_context_records = max_context_records
        self._clock = clock or datetime.now
        self._turns: List[ChatTurn] = [ChatTurn(ChatRole.ASSISTANT, GREETING, self._clock())]
        self.state = SessionState.IDLE

    @property
    def transcript(self) -> Tuple[ChatTurn, ...]:
        return tuple(self._turns)

    @property
    def pending(self) -> bool:
        return self.state is SessionState.PENDING

    def _append(self, role: ChatRole, text: str) -> None:
        self._turns.append(ChatTurn(role, text, self._clock()))

    async def send(self, text: str, records: Sequence[CandidateRecord]) -> bool:
        """Send a user message grounded in ``records``.

        Args:
            text: The user's message.  Surrounding whitespace is
                stripped.
            records: Current candidate records for the context snapshot.

        Returns:
            ``False`` if the message was blank or another request is
            still pending (nothing is appended), ``True`` once the
            user's turn and the assistant's answer have been appended.
        """
        message = (text or "").strip()
        if not message:
            return False
        if self.state is SessionState.PENDING:
            logger.debug("Rejecting chat message while a reply is pending")
            return False
        history = tuple(self._turns)
        self._append(ChatRole.USER, message)
        self.state = SessionState.PENDING
        answered = False
        try:
            context = build_context(records, self.max_context_records)
            reply = await self.provider.chat(history, message, context)
        except Exception:  # noqa: BLE001
            logger.exception("Assistant request failed")
            self._append(ChatRole.ASSISTANT, FALLBACK_REPLY)
            answered = True
        else:
            self._append(ChatRole.ASSISTANT, reply or EMPTY_REPLY)
            answered = True
        finally:
            # Every user turn gets an answer, even when the request is cancelled.
            if not answered:
                self._append(ChatRole.ASSISTANT, FALLBACK_REPLY)
            self.state = SessionState.IDLE
        return True
