"""Shared test fixtures and helpers."""

import random
from typing import Optional

import pytest

from mavilda.conversation.engine import ConversationEngine, TurnResult
from mavilda.conversation.responder import DialogueResponder
from mavilda.conversation.session_store import InMemorySessionStore
from mavilda.conversation.stages import ConversationStage
from mavilda.schemas.session_schema import Session


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def responder():
    return DialogueResponder(rng=random.Random(42))


@pytest.fixture
def engine(store, responder):
    return ConversationEngine(store=store, responder=responder)


def make_session(
    session_id: str = "TEST-001",
    message_count: int = 3,
    user_name: Optional[str] = "Pedro",
    stage: ConversationStage = ConversationStage.DIAGNOSIS,
    **fields,
) -> Session:
    """Helper to create a session past the greeting, with sensible defaults."""
    return Session(
        id=session_id,
        message_count=message_count,
        user_name=user_name,
        stage=stage,
        **fields,
    )


def run_conversation(
    engine: ConversationEngine, messages: list[str], session_id: str = "TEST-001"
) -> list[TurnResult]:
    """Send each message in order and collect the turn results."""
    return [engine.process(message, session_id) for message in messages]
