"""Conversation domain: transcript, accumulated state and turn handling.

The orchestrator lives in intake.conversation.orchestrator and the
caller-facing Conversation in intake.conversation.session.
"""

from intake.conversation.models import (
    ConversationState,
    ConversationStatus,
    Message,
    MessageSender,
    TurnOutcome,
    TurnResult,
)

__all__ = [
    "ConversationState",
    "ConversationStatus",
    "Message",
    "MessageSender",
    "TurnOutcome",
    "TurnResult",
]
