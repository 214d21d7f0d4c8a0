"""Conversation models: messages, accumulated state and turn results.

All models are frozen. A turn produces a new ConversationState rather than
patching the previous one.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from intake.profile.enums import FIELD_ORDER, ProfileField
from intake.profile.models import PartialProfile


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class MessageSender(str, Enum):
    """Who wrote a message."""

    USER = "user"
    SYSTEM = "system"


class ConversationStatus(str, Enum):
    """Conversation lifecycle status."""

    COLLECTING = "collecting"
    COMPLETE = "complete"


class TurnOutcome(str, Enum):
    """What happened during one turn."""

    COLLECTING = "collecting"  # Asked for the next field
    RETRYING = "retrying"  # Fields present but whole-profile validation failed
    COMPLETE = "complete"  # Profile accepted
    FAILED = "failed"  # Unexpected fault, state kept


class Message(BaseModel):
    """One entry of the conversation transcript."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    text: str = Field(..., description="Message text")
    timestamp: datetime = Field(default_factory=utc_now, description="Creation time")
    sender: MessageSender = Field(..., description="Author")

    @classmethod
    def from_user(cls, text: str) -> "Message":
        return cls(text=text, sender=MessageSender.USER)

    @classmethod
    def from_system(cls, text: str) -> "Message":
        return cls(text=text, sender=MessageSender.SYSTEM)


class ConversationState(BaseModel):
    """Accumulated state of one conversation.

    Owned by the caller and replaced once per turn.
    """

    model_config = ConfigDict(frozen=True)

    conversation_id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    profile: PartialProfile = Field(
        default_factory=PartialProfile, description="Accepted field values"
    )
    completion_status: dict[ProfileField, bool] = Field(
        default_factory=lambda: {f: False for f in FIELD_ORDER},
        description="field -> accepted",
    )
    errors: list[str] = Field(
        default_factory=list, description="Errors reported on the latest turn"
    )
    status: ConversationStatus = Field(
        default=ConversationStatus.COLLECTING, description="Lifecycle status"
    )
    messages: list[Message] = Field(
        default_factory=list, description="Append-only transcript"
    )

    @property
    def is_complete(self) -> bool:
        return self.status == ConversationStatus.COMPLETE

    def recent_messages(self, limit: int) -> list[Message]:
        """Last `limit` messages of the transcript."""
        if limit <= 0:
            return []
        return self.messages[-limit:]


class TurnResult(BaseModel):
    """Result returned to the caller for one user turn."""

    model_config = ConfigDict(frozen=True)

    reply_text: str = Field(..., description="System reply to show the user")
    updated_profile: PartialProfile = Field(..., description="Accumulated profile")
    is_complete: bool = Field(..., description="Profile accepted")
    outcome: TurnOutcome = Field(..., description="What happened this turn")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Extraction confidence")
    errors: list[str] = Field(default_factory=list, description="Errors surfaced this turn")
    state: ConversationState = Field(..., description="New conversation state")
