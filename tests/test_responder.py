"""Tests for the staged dialogue responder."""

import random

import pytest

from mavilda.conversation import templates
from mavilda.conversation.analyzer import analyze_message
from mavilda.conversation.lead import merge_analysis
from mavilda.conversation.responder import (
    RESPONSE_RULES,
    DialogueResponder,
    LookupKind,
    LookupRequest,
    Reply,
    TurnContext,
)
from mavilda.conversation.stages import ConversationStage
from mavilda.schemas.session_schema import Session
from tests.conftest import make_session


def respond(responder, session, text):
    """Analyze, merge facts and respond, the way the engine does."""
    analysis = analyze_message(text)
    merge_analysis(session, analysis)
    return responder.respond(session, analysis)


class TestRuleOrder:
    def test_rules_in_decision_order(self):
        assert [rule.name for rule in RESPONSE_RULES] == [
            "first_message",
            "name_capture",
            "name_reprompt",
            "intent",
            "surface_recommendation",
            "surface_prompt",
            "contact_prompt",
            "fallback",
        ]

    def test_no_matching_rule_raises(self):
        responder = DialogueResponder(rules=[])
        ctx = TurnContext(
            session=Session(id="s"), analysis=analyze_message("hola"), rng=random.Random(0)
        )
        with pytest.raises(LookupError):
            responder.select_rule(ctx)


class TestFirstMessage:
    def test_greeting_and_waiting_for_name(self, responder):
        session = Session(id="s", message_count=1)
        outcome = respond(responder, session, "hola")
        assert outcome == Reply(templates.greeting())
        assert session.waiting_for_name is True
        assert session.stage == ConversationStage.GREETING

    def test_greeting_regardless_of_content(self, responder):
        session = Session(id="s", message_count=1)
        outcome = respond(responder, session, "¿cuánto cuesta el T50?")
        assert outcome == Reply(templates.greeting())
        assert session.model_interest == "T50"


class TestNameCapture:
    def _waiting_session(self) -> Session:
        return Session(id="s", message_count=2, waiting_for_name=True)

    def test_name_captured(self, responder):
        session = self._waiting_session()
        outcome = respond(responder, session, "  Pedro ")
        assert session.user_name == "Pedro"
        assert session.waiting_for_name is False
        assert session.stage == ConversationStage.DIAGNOSIS
        assert isinstance(outcome, Reply)
        assert outcome.text in [v.format(name="Pedro") for v in templates.WELCOME_VARIANTS]

    def test_seeded_rng_pins_the_wording(self):
        texts = []
        for _ in range(2):
            session = self._waiting_session()
            texts.append(respond(DialogueResponder(rng=random.Random(3)), session, "Ana").text)
        assert texts[0] == texts[1]

    def test_wording_does_not_affect_state(self):
        states = []
        for seed in range(5):
            session = self._waiting_session()
            respond(DialogueResponder(rng=random.Random(seed)), session, "Ana")
            states.append((session.user_name, session.stage, session.waiting_for_name))
        assert len(set(states)) == 1

    def test_reprompt_when_not_name_like(self, responder):
        session = self._waiting_session()
        outcome = respond(responder, session, "si")
        assert outcome == Reply(templates.ASK_NAME_AGAIN)
        assert session.user_name is None
        assert session.waiting_for_name is True
        assert session.stage == ConversationStage.GREETING

    def test_reprompt_comes_before_intent(self, responder):
        session = self._waiting_session()
        outcome = respond(responder, session, "quiero saber el precio del drone más grande")
        assert outcome == Reply(templates.ASK_NAME_AGAIN)


class TestPriceIntent:
    def test_asks_model_when_unknown(self, responder):
        session = make_session()
        outcome = respond(responder, session, "¿cuánto cuesta?")
        assert isinstance(outcome, Reply)
        for code in ["T25P", "T50", "T70P", "T100", "Mavic3M"]:
            assert code in outcome.text
        assert session.stage == ConversationStage.DIAGNOSIS

    def test_requests_pricing_lookup_when_model_known(self, responder):
        session = make_session(model_interest="T50")
        outcome = respond(responder, session, "¿cuánto cuesta?")
        assert outcome == LookupRequest(kind=LookupKind.PRICING, model="T50")
        assert session.stage == ConversationStage.PROPOSAL

    def test_model_in_same_message_is_used(self, responder):
        session = make_session()
        outcome = respond(responder, session, "precio del T100")
        assert outcome == LookupRequest(kind=LookupKind.PRICING, model="T100")


class TestOtherIntents:
    def test_demo_checklist_with_everything_pending(self, responder):
        session = make_session()
        outcome = respond(responder, session, "quiero una demo")
        assert session.stage == ConversationStage.CAPTURE
        assert "Superficie (pendiente)" in outcome.text
        assert "Teléfono de contacto (pendiente)" in outcome.text

    def test_demo_checklist_reflects_known_surface(self, responder):
        session = make_session(surface_ha=350)
        outcome = respond(responder, session, "quiero una demo")
        assert "350 ha ✓" in outcome.text

    def test_specs_asks_model_when_unknown(self, responder):
        session = make_session()
        outcome = respond(responder, session, "pasame la ficha técnica")
        assert isinstance(outcome, Reply)
        assert "especificaciones" in outcome.text

    def test_specs_lookup_when_model_known(self, responder):
        session = make_session(model_interest="T25P")
        outcome = respond(responder, session, "pasame la ficha técnica")
        assert outcome == LookupRequest(kind=LookupKind.SPECS, model="T25P")
        assert session.stage == ConversationStage.DIAGNOSIS

    def test_financing(self, responder):
        session = make_session()
        outcome = respond(responder, session, "¿tienen financiación?")
        assert outcome == Reply(templates.financing("Pedro"))
        assert session.stage == ConversationStage.PROPOSAL

    def test_compare_leaves_state_alone(self, responder):
        session = make_session()
        outcome = respond(responder, session, "¿qué diferencia hay entre modelos?")
        assert outcome == Reply(templates.comparison("Pedro"))
        assert session.stage == ConversationStage.DIAGNOSIS


class TestSurfaceRecommendation:
    @pytest.mark.parametrize(
        "text, expected_model",
        [("Tengo 200 ha", "T25P"), ("Tengo 350 ha", "T50"), ("Tengo 900 ha", "T100")],
    )
    def test_recommends_by_band(self, responder, text, expected_model):
        session = make_session()
        outcome = respond(responder, session, text)
        assert expected_model in outcome.text
        assert session.stage == ConversationStage.PROPOSAL

    def test_pitch_includes_tier_price(self, responder):
        session = make_session()
        outcome = respond(responder, session, "Tengo 350 ha")
        assert "USD 27.900" in outcome.text

    def test_surface_recorded_once(self, responder):
        session = make_session()
        respond(responder, session, "Tengo 350 ha")
        outcome = respond(responder, session, "en realidad son 900 ha")
        assert session.surface_ha == 350
        assert "T100" not in outcome.text

    def test_intent_takes_precedence_over_surface(self, responder):
        session = make_session()
        outcome = respond(responder, session, "tengo 350 ha, ¿tienen financiación?")
        assert outcome == Reply(templates.financing("Pedro"))
        assert session.surface_ha is None

    def test_surface_ignored_by_intent_is_recommended_later(self, responder):
        session = make_session()
        respond(responder, session, "tengo 350 ha, ¿tienen financiación?")
        outcome = respond(responder, session, "son 350 ha")
        assert session.surface_ha == 350
        assert "T50" in outcome.text

    def test_surface_not_recorded_during_name_reprompt(self, responder):
        session = make_session(message_count=2, user_name=None, stage=ConversationStage.GREETING)
        session.waiting_for_name = True
        outcome = respond(responder, session, "tengo 350 ha")
        assert outcome == Reply(templates.ASK_NAME_AGAIN)
        assert session.surface_ha is None


class TestPromptsAndFallback:
    def test_asks_surface_in_diagnosis(self, responder):
        session = make_session()
        outcome = respond(responder, session, "quiero información")
        assert outcome == Reply(templates.ask_surface("Pedro"))

    def test_asks_contact_from_fifth_message(self, responder):
        session = make_session(
            message_count=5, model_interest="T50", surface_ha=350,
            stage=ConversationStage.PROPOSAL,
        )
        outcome = respond(responder, session, "ok gracias")
        assert outcome == Reply(templates.ask_contact("Pedro", "T50"))

    def test_no_contact_prompt_before_fifth_message(self, responder):
        session = make_session(
            message_count=4, model_interest="T50", surface_ha=350,
            stage=ConversationStage.PROPOSAL,
        )
        outcome = respond(responder, session, "ok gracias")
        followups = [
            v.format(name="Pedro", model="T50") for v in templates.MODEL_FOLLOWUP_VARIANTS
        ]
        assert outcome.text in followups

    def test_no_contact_prompt_when_phone_known(self, responder):
        session = make_session(
            message_count=6, model_interest="T50", surface_ha=350,
            user_phone="3415551234", stage=ConversationStage.PROPOSAL,
        )
        outcome = respond(responder, session, "ok gracias")
        assert "WhatsApp" not in outcome.text

    def test_crop_prompt(self, responder):
        session = make_session(stage=ConversationStage.PROPOSAL)
        outcome = respond(responder, session, "hacemos soja y trigo")
        assert outcome == Reply(templates.crop_prompt("Pedro", ("soja", "trigo")))

    def test_problem_prompt(self, responder):
        session = make_session(stage=ConversationStage.PROPOSAL)
        outcome = respond(responder, session, "tenemos malezas resistentes")
        assert outcome == Reply(templates.problem_prompt("Pedro"))

    def test_generic_menu(self, responder):
        session = make_session(stage=ConversationStage.PROPOSAL)
        outcome = respond(responder, session, "gracias")
        assert outcome == Reply(templates.help_menu("Pedro"))
