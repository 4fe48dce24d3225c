"""
Lead slots with first-write-wins semantics.

A lead is sales-ready once it has a name, a model of interest, and at
least one contact method (phone or email). Every slot is written at most
once per session: later detections of the same slot are ignored, so a
lead quoting a second phone number never overwrites the first one.

Usage:
    newly_set = merge_analysis(session, analysis)
    just_captured = update_capture(session)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mavilda.conversation.analyzer import MessageAnalysis
    from mavilda.schemas.session_schema import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeadSlot:
    """Schema for a single lead slot."""

    name: str
    display_name: str
    analysis_attr: str = ""


LEAD_SLOTS: list[LeadSlot] = [
    LeadSlot(name="user_name", display_name="nombre"),
    LeadSlot(name="model_interest", display_name="modelo", analysis_attr="model"),
    LeadSlot(name="surface_ha", display_name="superficie"),
    LeadSlot(name="user_phone", display_name="teléfono", analysis_attr="phone"),
    LeadSlot(name="user_email", display_name="email", analysis_attr="email"),
]

_SLOT_NAMES = {slot.name for slot in LEAD_SLOTS}


def set_once(session: Session, name: str, value: Any) -> bool:
    """Write a lead slot only if it is still empty.

    Returns:
        True if the slot went from absent to present on this call.
    """
    if name not in _SLOT_NAMES:
        raise ValueError(f"Unknown lead slot: {name}")
    if value is None or getattr(session, name) is not None:
        return False
    setattr(session, name, value)
    logger.debug("Lead slot '%s' set", name)
    return True


def merge_analysis(session: Session, analysis: MessageAnalysis) -> set[str]:
    """Copy detected facts into the session, first value wins.

    The name and surface slots are not merged here: the dialogue rules
    record them, since only they know whether the value is expected on
    this turn.

    Returns:
        Names of the slots newly written on this turn.
    """
    newly_set: set[str] = set()
    for slot in LEAD_SLOTS:
        if not slot.analysis_attr:
            continue
        if set_once(session, slot.name, getattr(analysis, slot.analysis_attr)):
            newly_set.add(slot.name)
    return newly_set


def has_complete_lead(session: Session) -> bool:
    """Name, model, and at least one of phone/email are all known."""
    return bool(
        session.user_name
        and session.model_interest
        and (session.user_phone or session.user_email)
    )


def update_capture(session: Session) -> bool:
    """Mark the lead captured the first time it is complete.

    `captured` never reverts, even if a slot were later cleared.

    Returns:
        True only on the call where `captured` flipped to True.
    """
    if session.captured or not has_complete_lead(session):
        return False
    session.captured = True
    logger.info("Lead captured: model=%s", session.model_interest)
    return True


def demo_checklist(session: Session) -> dict[str, bool]:
    """Demo checklist items and whether each is already known.

    Field location is never extracted from text, so it always shows as
    pending.
    """
    return {
        "location": False,
        "surface": session.surface_ha is not None,
        "phone": session.user_phone is not None,
    }


def to_dict(session: Session) -> dict[str, Any]:
    """Export the filled lead slots as a flat dict."""
    return {
        slot.name: getattr(session, slot.name)
        for slot in LEAD_SLOTS
        if getattr(session, slot.name) is not None
    }
