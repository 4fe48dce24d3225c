"""
Dialogue responder: session + analyzed message -> one response.

The decision order is an explicit ordered list of `ResponseRule`s. The
first rule whose predicate holds builds the response; later rules are
not evaluated. Rules may mutate the session (name capture, stage
changes). Model, phone and email are merged beforehand by the engine;
the surface is recorded by the recommendation rule, so a surface given
while another rule answers is ignored until it is mentioned again.

A response is either a `Reply` with final text, or a `LookupRequest`
telling the caller to fetch pricing or specifications for a model from
an external service before anything is shown to the lead.

Usage:
    responder = DialogueResponder(rng=random.Random(7))
    outcome = responder.respond(session, analysis)
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from mavilda.config import settings
from mavilda.conversation import templates
from mavilda.conversation.analyzer import Intent, MessageAnalysis
from mavilda.conversation.lead import demo_checklist, set_once
from mavilda.conversation.stages import ConversationStage, advance_stage
from mavilda.conversation.templates import ChoiceSource, pick_variant
from mavilda.schemas.session_schema import Session
from mavilda.tools.catalog import recommend_for_surface

logger = logging.getLogger(__name__)


class LookupKind(str, Enum):
    """External capability the caller must consult."""
    PRICING = "pricing"
    SPECS = "specs"


@dataclass(frozen=True)
class Reply:
    """Final text to show the lead."""
    text: str


@dataclass(frozen=True)
class LookupRequest:
    """The caller must fetch content for `model` from an external service."""
    kind: LookupKind
    model: str


ResponseOutcome = Union[Reply, LookupRequest]


@dataclass
class TurnContext:
    """Everything a rule may look at for the current message."""
    session: Session
    analysis: MessageAnalysis
    rng: ChoiceSource

    @property
    def name(self) -> str:
        return self.session.user_name or ""

    @property
    def model(self) -> Optional[str]:
        return self.session.model_interest


@dataclass(frozen=True)
class ResponseRule:
    """A (predicate, builder) pair in the decision order."""
    name: str
    applies: Callable[[TurnContext], bool]
    build: Callable[[TurnContext], ResponseOutcome]


# ------------------------------------------------------------------ #
# Greeting and name capture
# ------------------------------------------------------------------ #

def _is_first_message(ctx: TurnContext) -> bool:
    return ctx.session.message_count == 1


def _greet(ctx: TurnContext) -> ResponseOutcome:
    ctx.session.waiting_for_name = True
    advance_stage(ctx.session, ConversationStage.GREETING, reason="first_message")
    return Reply(templates.greeting())


def _is_waiting_for_name(ctx: TurnContext) -> bool:
    return ctx.session.waiting_for_name and ctx.session.user_name is None


def _can_capture_name(ctx: TurnContext) -> bool:
    return _is_waiting_for_name(ctx) and ctx.analysis.looks_like_name


def _capture_name(ctx: TurnContext) -> ResponseOutcome:
    set_once(ctx.session, "user_name", ctx.analysis.text.strip())
    ctx.session.waiting_for_name = False
    advance_stage(ctx.session, ConversationStage.DIAGNOSIS, reason="name_captured")
    welcome = pick_variant(templates.WELCOME_VARIANTS, ctx.rng)
    return Reply(welcome.format(name=ctx.name))


def _ask_name_again(ctx: TurnContext) -> ResponseOutcome:
    return Reply(templates.ASK_NAME_AGAIN)


# ------------------------------------------------------------------ #
# Intent dispatch
# ------------------------------------------------------------------ #

def _handle_price(ctx: TurnContext) -> ResponseOutcome:
    if not ctx.model:
        return Reply(templates.which_model(ctx.name, "saber el precio"))
    advance_stage(ctx.session, ConversationStage.PROPOSAL, reason="price")
    return LookupRequest(kind=LookupKind.PRICING, model=ctx.model)


def _handle_demo(ctx: TurnContext) -> ResponseOutcome:
    advance_stage(ctx.session, ConversationStage.CAPTURE, reason="demo")
    return Reply(templates.demo_checklist(
        ctx.name, ctx.session.surface_ha, demo_checklist(ctx.session),
    ))


def _handle_specs(ctx: TurnContext) -> ResponseOutcome:
    if not ctx.model:
        return Reply(templates.which_model(ctx.name, "conocer las especificaciones"))
    return LookupRequest(kind=LookupKind.SPECS, model=ctx.model)


def _handle_financing(ctx: TurnContext) -> ResponseOutcome:
    advance_stage(ctx.session, ConversationStage.PROPOSAL, reason="financing")
    return Reply(templates.financing(ctx.name))


def _handle_compare(ctx: TurnContext) -> ResponseOutcome:
    return Reply(templates.comparison(ctx.name))


INTENT_HANDLERS: dict[Intent, Callable[[TurnContext], ResponseOutcome]] = {
    Intent.PRICE: _handle_price,
    Intent.DEMO: _handle_demo,
    Intent.SPECS: _handle_specs,
    Intent.FINANCING: _handle_financing,
    Intent.COMPARE: _handle_compare,
}


def _has_actionable_intent(ctx: TurnContext) -> bool:
    return ctx.session.user_name is not None and ctx.analysis.intent in INTENT_HANDLERS


def _dispatch_intent(ctx: TurnContext) -> ResponseOutcome:
    return INTENT_HANDLERS[ctx.analysis.intent](ctx)


# ------------------------------------------------------------------ #
# Diagnosis and proposal
# ------------------------------------------------------------------ #

def _surface_offered(ctx: TurnContext) -> bool:
    return ctx.session.surface_ha is None and ctx.analysis.surface_ha is not None


def _recommend_for_surface(ctx: TurnContext) -> ResponseOutcome:
    surface = ctx.analysis.surface_ha
    set_once(ctx.session, "surface_ha", surface)
    recommended = recommend_for_surface(surface)
    advance_stage(ctx.session, ConversationStage.PROPOSAL, reason="surface")
    logger.debug("Recommended %s for %s ha", recommended, surface)
    return Reply(templates.surface_pitch(ctx.name, surface, recommended))


def _surface_missing(ctx: TurnContext) -> bool:
    return (
        ctx.session.stage == ConversationStage.DIAGNOSIS
        and ctx.session.surface_ha is None
    )


def _ask_surface(ctx: TurnContext) -> ResponseOutcome:
    return Reply(templates.ask_surface(ctx.name))


def _should_ask_contact(ctx: TurnContext) -> bool:
    return (
        ctx.session.message_count >= settings.conversation.contact_prompt_min_messages
        and ctx.session.user_phone is None
        and ctx.model is not None
        and ctx.analysis.intent != Intent.DEMO
    )


def _ask_contact(ctx: TurnContext) -> ResponseOutcome:
    return Reply(templates.ask_contact(ctx.name, ctx.model))


def _contextual_fallback(ctx: TurnContext) -> ResponseOutcome:
    if ctx.model:
        return Reply(templates.model_followup(ctx.name, ctx.model, ctx.rng))
    if ctx.analysis.mentions_crop:
        return Reply(templates.crop_prompt(ctx.name, ctx.analysis.crops))
    if ctx.analysis.mentions_problem:
        return Reply(templates.problem_prompt(ctx.name))
    return Reply(templates.help_menu(ctx.name))


RESPONSE_RULES: list[ResponseRule] = [
    ResponseRule("first_message", _is_first_message, _greet),
    ResponseRule("name_capture", _can_capture_name, _capture_name),
    ResponseRule("name_reprompt", _is_waiting_for_name, _ask_name_again),
    ResponseRule("intent", _has_actionable_intent, _dispatch_intent),
    ResponseRule("surface_recommendation", _surface_offered, _recommend_for_surface),
    ResponseRule("surface_prompt", _surface_missing, _ask_surface),
    ResponseRule("contact_prompt", _should_ask_contact, _ask_contact),
    ResponseRule("fallback", lambda ctx: True, _contextual_fallback),
]


class DialogueResponder:
    """
    Picks exactly one response per message by walking `RESPONSE_RULES`.

    The random source only affects the wording of variant templates,
    never session state.
    """

    def __init__(
        self,
        rules: Optional[list[ResponseRule]] = None,
        rng: Optional[ChoiceSource] = None,
    ) -> None:
        self.rules = rules if rules is not None else RESPONSE_RULES
        self.rng = rng if rng is not None else random.Random()

    def select_rule(self, ctx: TurnContext) -> ResponseRule:
        """Return the first rule whose predicate holds."""
        for rule in self.rules:
            if rule.applies(ctx):
                return rule
        raise LookupError("No response rule matched; the rule list needs a catch-all")

    def respond(
        self,
        session: Session,
        analysis: MessageAnalysis,
    ) -> ResponseOutcome:
        ctx = TurnContext(
            session=session,
            analysis=analysis,
            rng=self.rng,
        )
        rule = self.select_rule(ctx)
        logger.debug("Response rule: %s", rule.name)
        return rule.build(ctx)
