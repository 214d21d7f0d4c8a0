"""Caller-facing conversation handle."""

import asyncio

from intake.conversation.models import ConversationState, Message, TurnResult
from intake.conversation.orchestrator import ConversationOrchestrator
from intake.profile.models import PartialProfile


class Conversation:
    """One conversation's state plus a lock that serializes its turns.

    The state is replaced only after a turn has fully completed. A turn
    that is cancelled (e.g. the caller times out) leaves it untouched.
    """

    def __init__(
        self,
        orchestrator: ConversationOrchestrator,
        state: ConversationState | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._state = state or orchestrator.start_conversation()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def profile(self) -> PartialProfile:
        return self._state.profile

    @property
    def messages(self) -> list[Message]:
        return list(self._state.messages)

    @property
    def is_complete(self) -> bool:
        return self._state.is_complete

    async def submit_user_turn(self, text: str) -> TurnResult:
        """Process one user message and return the reply."""
        async with self._lock:
            result = await self._orchestrator.process_turn(self._state, text)
            self._state = result.state
            return result
