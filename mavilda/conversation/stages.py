"""
Coarse conversation stages for the sales chat.

Stages describe where the lead is in the scripted flow:

    greeting -> diagnosis -> proposal -> capture

Unlike a strict state machine, transitions are recorded but not
enforced: a lead asking for a demo right after giving their name jumps
straight from diagnosis to capture, and that is a legal path.

Usage:
    advance_stage(session, ConversationStage.PROPOSAL, reason="price")
    assert session.stage == ConversationStage.PROPOSAL
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mavilda.schemas.session_schema import Session

logger = logging.getLogger(__name__)


class ConversationStage(str, Enum):
    """All coarse phases of the sales conversation."""
    GREETING = "greeting"
    DIAGNOSIS = "diagnosis"
    PROPOSAL = "proposal"
    CAPTURE = "capture"


@dataclass
class StageEntry:
    """Recorded history entry for a stage change."""
    stage: ConversationStage
    reason: Optional[str] = None
    entered_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def advance_stage(
    session: Session, stage: ConversationStage, reason: Optional[str] = None
) -> ConversationStage:
    """Move the session to `stage` and record the change.

    Re-entering the current stage is a no-op and is not recorded.
    """
    if session.stage == stage and session.stage_history:
        return stage

    old_stage = session.stage
    session.stage = stage
    session.stage_history.append(StageEntry(stage=stage, reason=reason))
    logger.debug(
        "Stage change: %s -> %s (reason: %s)", old_stage.value, stage.value, reason,
    )
    return stage


def get_stage_trace(session: Session) -> list[str]:
    """Return ordered list of stage names entered."""
    return [entry.stage.value for entry in session.stage_history]
