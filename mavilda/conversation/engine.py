"""
Conversation engine: one incoming message -> one turn result.

Ties the pieces together for a single turn:

    validate -> get-or-create session -> count + record message
    -> analyze -> merge model and contact facts (first value wins) -> respond
    -> lead completion check -> snapshot

No I/O and no external calls happen here. Pricing and specification
lookups are only requested through a `LookupRequest`; the caller
fulfils them. Faults raised while analyzing or responding propagate to
the caller unchanged, and any session mutation made before the fault is
kept.
"""

from dataclasses import dataclass
from typing import Optional

from mavilda.config import settings
from mavilda.conversation.analyzer import Intent, analyze_message
from mavilda.conversation.lead import merge_analysis, update_capture
from mavilda.conversation.responder import (
    DialogueResponder,
    LookupKind,
    LookupRequest,
    Reply,
    ResponseOutcome,
)
from mavilda.conversation.session_store import InMemorySessionStore, SessionStore
from mavilda.logging_context import get_session_logger, session_scope
from mavilda.schemas.api_schema import LookupInfo, Needs, ProcessResponse, SessionSnapshot
from mavilda.schemas.session_schema import Session

logger = get_session_logger(__name__)

# Strings the caller matches exactly and replaces before display.
LOOKUP_SENTINELS: dict[LookupKind, str] = {
    LookupKind.PRICING: "__NEEDS_SHEETS__",
    LookupKind.SPECS: "__NEEDS_PINECONE__",
}


class InputError(ValueError):
    """Raised when a request cannot be processed as given."""


class MissingInputError(InputError):
    """Raised when the message or session ID is missing or empty."""


class MessageTooLongError(InputError):
    """Raised when a message exceeds the configured maximum length."""


def snapshot_session(session: Session) -> SessionSnapshot:
    """Copy the caller-visible fields; later turns never alter the copy."""
    return SessionSnapshot(
        id=session.id,
        user_name=session.user_name,
        user_phone=session.user_phone,
        user_email=session.user_email,
        model_interest=session.model_interest,
        surface_ha=session.surface_ha,
        messages=session.message_count,
        stage=session.stage.value,
    )


@dataclass(frozen=True)
class TurnResult:
    """Everything produced by processing one message."""
    outcome: ResponseOutcome
    session: SessionSnapshot
    needs: Needs
    intent: Intent
    model: Optional[str]

    @property
    def lookup(self) -> Optional[LookupRequest]:
        return self.outcome if isinstance(self.outcome, LookupRequest) else None

    @property
    def response_text(self) -> str:
        """Reply text, or the sentinel standing in for a pending lookup."""
        if isinstance(self.outcome, Reply):
            return self.outcome.text
        return LOOKUP_SENTINELS[self.outcome.kind]

    def to_response(self) -> ProcessResponse:
        lookup = self.lookup
        return ProcessResponse(
            response=self.response_text,
            session=self.session,
            needs=self.needs,
            intent=self.intent.value,
            model=self.model,
            lookup=LookupInfo(kind=lookup.kind.value, model=lookup.model) if lookup else None,
        )


class ConversationEngine:
    """Processes chat messages against a session store."""

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        responder: Optional[DialogueResponder] = None,
    ) -> None:
        self.store = store if store is not None else InMemorySessionStore()
        self.responder = responder if responder is not None else DialogueResponder()

    def _validate(self, message: Optional[str], session_id: Optional[str]) -> None:
        if not message or not session_id:
            raise MissingInputError("Mensaje y sessionId son requeridos")
        limit = settings.conversation.max_message_length
        if len(message) > limit:
            raise MessageTooLongError(f"El mensaje supera los {limit} caracteres")

    def process(self, message: Optional[str], session_id: Optional[str]) -> TurnResult:
        """
        Process one message for a session.

        Raises:
            InputError: If the input is missing or too long. The session
                is not touched.
        """
        self._validate(message, session_id)
        with session_scope(session_id):
            return self._run_turn(message, session_id)

    def _run_turn(self, message: str, session_id: str) -> TurnResult:
        session = self.store.get_or_create(session_id)
        session.record_message(message)

        analysis = analyze_message(message)
        merged = merge_analysis(session, analysis)
        if merged:
            logger.debug("Merged lead slots: %s", sorted(merged))
        outcome = self.responder.respond(session, analysis)
        just_captured = update_capture(session)

        needs = Needs(
            sheets=isinstance(outcome, LookupRequest) and outcome.kind == LookupKind.PRICING,
            pinecone=isinstance(outcome, LookupRequest) and outcome.kind == LookupKind.SPECS,
            save_lead=just_captured,
        )
        logger.info(
            "Turn %d: intent=%s stage=%s needs=%s",
            session.message_count, analysis.intent.value, session.stage.value,
            needs.model_dump(),
        )
        return TurnResult(
            outcome=outcome,
            session=snapshot_session(session),
            needs=needs,
            intent=analysis.intent,
            model=session.model_interest,
        )

    def reset_sessions(self) -> int:
        """Delete every session; returns how many were removed."""
        return self.store.clear_all()
