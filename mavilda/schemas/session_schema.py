"""Per-conversation session state."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from mavilda.conversation.stages import ConversationStage, StageEntry


@dataclass
class HistoryEntry:
    """A user message as received, kept for audit only."""
    text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Session:
    """
    Mutable state of one chat conversation, keyed by an opaque session ID.

    Lead fields (name, phone, email, model, surface) are written once:
    the first detected value wins. `captured` only ever goes False -> True.
    `history` and `stage_history` are append-only and never read by the
    dialogue rules.
    """
    id: str
    stage: ConversationStage = ConversationStage.GREETING
    message_count: int = 0
    user_name: Optional[str] = None
    user_phone: Optional[str] = None
    user_email: Optional[str] = None
    model_interest: Optional[str] = None
    surface_ha: Optional[int] = None
    waiting_for_name: bool = False
    captured: bool = False
    history: list[HistoryEntry] = field(default_factory=list)
    stage_history: list[StageEntry] = field(default_factory=list)

    def record_message(self, text: str) -> None:
        """Count an incoming message and append it to the audit trail."""
        self.message_count += 1
        self.history.append(HistoryEntry(text=text))
