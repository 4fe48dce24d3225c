"""
Offline console demo: chat with the lead bot in the terminal.

Runs the real analyzer, responder and session store through the same
engine the HTTP service uses. Lookup requests are shown as a system
line instead of being fulfilled, since the pricing sheet and the specs
knowledge base are external services.

Usage:
    python console_demo.py
    python console_demo.py --scenario price
    python console_demo.py --scenario surface
"""

import argparse
import random
import uuid
from typing import Optional

from mavilda.config import settings
from mavilda.conversation.engine import ConversationEngine, InputError, TurnResult
from mavilda.conversation.lead import to_dict
from mavilda.conversation.responder import DialogueResponder
from mavilda.conversation.stages import get_stage_trace

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class ConsoleSession:
    """Drives one conversation with the engine from the terminal."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "price": [
            "Hola!",
            "Pedro",
            "Me interesa el T50",
            "¿Cuánto cuesta?",
            "Mi celular es 341 555 1234",
        ],
        "surface": [
            "Buenas",
            "Laura",
            "Tengo 350 ha de soja",
            "Quiero coordinar una demo",
            "laura.campo@gmail.com",
        ],
        "demo": [
            "Hola",
            "ok",
            "Martín",
            "Quiero una prueba en el campo",
            "Tengo problemas con malezas",
        ],
    }

    def __init__(self, seed: Optional[int] = None) -> None:
        self.engine = ConversationEngine(responder=DialogueResponder(rng=random.Random(seed)))
        self.session_id = f"console_{uuid.uuid4().hex[:8]}"

    def bot_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.business.bot_name}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.business.bot_name.upper()} BOT - {title}{RESET}")
        print(f"{BOLD}  {settings.business.company_name}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _process_input(self, text: str) -> Optional[TurnResult]:
        try:
            result = self.engine.process(text, self.session_id)
        except InputError as exc:
            print(f"{RED}{exc}{RESET}")
            return None

        if result.lookup is not None:
            self.system_log(
                f"Lookup needed: {result.lookup.kind.value} for {result.lookup.model} "
                f"({result.response_text})"
            )
        else:
            self.bot_say(result.response_text)

        snap = result.session
        self.system_log(
            f"Stage: {snap.stage} | intent: {result.intent.value} | "
            f"model: {snap.model_interest} | surface: {snap.surface_ha}"
        )
        if result.needs.save_lead:
            self.system_log(f"{YELLOW}Lead complete: save to CRM{RESET}")
        return result

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            print(f"\n{BLUE}[Lead] {RESET}{step}")
            self._process_input(step)

        session = self.engine.store.get(self.session_id)
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Scenario '{scenario}' complete.{RESET}")
        if session is not None:
            trace = " -> ".join(get_stage_trace(session))
            print(f"{DIM}  Stage trace: {trace}{RESET}")
            print(f"{DIM}  Captured: {session.captured}{RESET}")
            print(f"{DIM}  Lead: {to_dict(session)}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def run(self) -> None:
        self._banner("Console Demo")
        print(f"{BOLD}  Type 'quit' to exit{RESET}")

        while True:
            user_input = input(f"\n{BLUE}[Lead] {RESET}").strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                return
            self._process_input(user_input)


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reply wording")
    args = parser.parse_args()

    session = ConsoleSession(seed=args.seed)
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
