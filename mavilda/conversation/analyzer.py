"""
Message analyzer: raw user text -> structured facts.

Pure and deterministic. Every detection is driven by an ordered list of
(pattern, result) pairs evaluated top to bottom, so first-match-wins
precedence lives in data rather than in nested conditionals.

Usage:
    analysis = analyze_message("Tengo 350 ha de soja, ¿cuánto cuesta el T50?")
    assert analysis.model == "T50"
    assert analysis.surface_ha == 350
    assert analysis.intent == Intent.PRICE
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mavilda.config import settings
from mavilda.utils import digits_only, normalize_text

logger = logging.getLogger(__name__)


class Intent(str, Enum):
    """Single classified purpose of a user message."""
    PRICE = "price"
    DEMO = "demo"
    FINANCING = "financing"
    SPECS = "specs"
    COMPARE = "compare"
    GENERAL = "general"


def _keywords(*fragments: str) -> re.Pattern:
    return re.compile("|".join(fragments))


# --- Model detection: code keywords first, then weaker numeric aliases ---
_NUMERIC_ALIAS = r"\b(?:el|modelo|drone|dron)\s+{}\b(?!\s*(?:ha\b|has\b|hect))"

MODEL_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"t25"), "T25P"),
    (re.compile(r"t50"), "T50"),
    (re.compile(r"t70"), "T70P"),
    (re.compile(r"t100"), "T100"),
    (re.compile(r"mavic"), "Mavic3M"),
    (re.compile(_NUMERIC_ALIAS.format("25")), "T25P"),
    (re.compile(_NUMERIC_ALIAS.format("50")), "T50"),
    (re.compile(_NUMERIC_ALIAS.format("70")), "T70P"),
    (re.compile(_NUMERIC_ALIAS.format("100")), "T100"),
]

# --- Surface detection, most explicit phrasing first ---
# At most six digits: longer runs are phone numbers or IDs, never hectares.
_NUMBER = r"(?<![\d.])(\d{1,3}\.\d{3}|\d{1,6})(?![\d.]?\d)"

SURFACE_PATTERNS: list[re.Pattern] = [
    re.compile(_NUMBER + r"\s*(?:ha|has|hectareas?)\b"),
    re.compile(r"(?:superficie|campo)\D{0,25}?" + _NUMBER),
    re.compile(
        r"\b(?:tengo|trabajo|cultivo|siembro)\s+"
        r"(?:unas?\s+|como\s+|mas de\s+|cerca de\s+)?" + _NUMBER
    ),
    re.compile(r"^\s*" + _NUMBER + r"\s*$"),
]

# --- Intent classification, checked in this order ---
INTENT_RULES: list[tuple[re.Pattern, Intent]] = [
    (_keywords("precio", "costo", "cuesta", "cuanto sale", "cuanto vale", "cotiz",
               "presupuesto", r"\bvalor\b"), Intent.PRICE),
    (_keywords("demo", "prueba", "probar", "demostracion", "verlo volar", "visita"),
     Intent.DEMO),
    (_keywords("financ", "cuota", "leasing", "credito", "plan de pago"), Intent.FINANCING),
    (_keywords("especificacion", "ficha tecnica", r"\brinde", "rendimiento", "autonomia",
               "capacidad", "bateria", "tanque", "litros", "caracteristica"), Intent.SPECS),
    (_keywords("compar", "diferencia", r"\bvs\b", "versus", r"cual (?:me )?conviene"),
     Intent.COMPARE),
]

# --- Independent topic flags ---
CROP_PATTERN = re.compile(
    r"\b(soja|maiz|trigo|girasol|sorgo|cebada|algodon|arroz|mani|colza|avena)\b"
)

TOPIC_KEYWORDS: dict[str, re.Pattern] = {
    "lote": re.compile(r"\blotes?\b"),
    "campaign": _keywords("campana", "temporada", "zafra"),
    "crop": CROP_PATTERN,
    "spraying": _keywords("pulveriz", "fumig", "aplicacion", "aplicar", "herbicida",
                          "fungicida", "insecticida"),
    "problem": _keywords("maleza", "plaga", "insecto", "hongo", "enfermedad", "yuyo",
                         "chinche", "oruga", "isoca", "roya"),
}

GREETING_PATTERN = re.compile(
    r"\b(?:hola|buen dia|buenos dias|buenas|que tal|saludos|hey)\b"
)
YES_NO_PATTERN = re.compile(
    r"\b(?:si|sip|no|nop|nope|ok|okay|dale|claro|bueno|listo|obvio)\b"
)
DIGIT_RUN_PATTERN = re.compile(r"\d{3,}")

PHONE_PATTERN = re.compile(r"[\d\s\-+()]{10,15}")
EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+", re.IGNORECASE)


@dataclass(frozen=True)
class MessageAnalysis:
    """Facts extracted from a single message. Absent detections are None."""
    text: str
    normalized: str
    model: Optional[str] = None
    surface_ha: Optional[int] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    intent: Intent = Intent.GENERAL
    mentions_lote: bool = False
    mentions_campaign: bool = False
    mentions_crop: bool = False
    crops: tuple[str, ...] = ()
    mentions_spraying: bool = False
    mentions_problem: bool = False
    is_greeting: bool = False
    looks_like_name: bool = False


def detect_model(normalized: str) -> Optional[str]:
    for pattern, model in MODEL_RULES:
        if pattern.search(normalized):
            return model
    return None


def _phone_spans(text: str) -> list[tuple[int, int]]:
    return [
        match.span()
        for match in PHONE_PATTERN.finditer(text)
        if len(digits_only(match.group(0))) >= settings.conversation.phone_min_digits
    ]


def detect_surface(normalized: str) -> Optional[int]:
    """Return hectares from the first surface pattern that matches.

    Numbers that sit inside a phone-shaped run are skipped, so
    "mi campo, llamame al 341 555 1234" yields no surface.
    """
    phone_spans = _phone_spans(normalized)
    for pattern in SURFACE_PATTERNS:
        for match in pattern.finditer(normalized):
            start, end = match.span(1)
            if any(start < p_end and p_start < end for p_start, p_end in phone_spans):
                continue
            return int(match.group(1).replace(".", ""))
    return None


def detect_phone(text: str) -> Optional[str]:
    """Return the digits of the first phone-shaped run.

    Runs that are mostly separators (e.g. a long stretch of spaces) are
    skipped.
    """
    for match in PHONE_PATTERN.finditer(text):
        digits = digits_only(match.group(0))
        if len(digits) >= settings.conversation.phone_min_digits:
            return digits
    return None


def detect_email(text: str) -> Optional[str]:
    match = EMAIL_PATTERN.search(text)
    return match.group(0) if match else None


def classify_intent(normalized: str) -> Intent:
    for pattern, intent in INTENT_RULES:
        if pattern.search(normalized):
            return intent
    return Intent.GENERAL


def looks_like_name(text: str, normalized: str) -> bool:
    """Heuristic: short, not a yes/no answer, and no run of 3+ digits."""
    stripped = text.strip()
    return (
        bool(stripped)
        and len(stripped) < settings.conversation.name_max_length
        and not YES_NO_PATTERN.search(normalized)
        and not DIGIT_RUN_PATTERN.search(stripped)
    )


def analyze_message(text: str) -> MessageAnalysis:
    """Extract every fact the dialogue rules need from a raw message."""
    normalized = normalize_text(text)
    crops = tuple(dict.fromkeys(CROP_PATTERN.findall(normalized)))

    analysis = MessageAnalysis(
        text=text,
        normalized=normalized,
        model=detect_model(normalized),
        surface_ha=detect_surface(normalized),
        phone=detect_phone(text),
        email=detect_email(text),
        intent=classify_intent(normalized),
        mentions_lote=bool(TOPIC_KEYWORDS["lote"].search(normalized)),
        mentions_campaign=bool(TOPIC_KEYWORDS["campaign"].search(normalized)),
        mentions_crop=bool(crops),
        crops=crops,
        mentions_spraying=bool(TOPIC_KEYWORDS["spraying"].search(normalized)),
        mentions_problem=bool(TOPIC_KEYWORDS["problem"].search(normalized)),
        is_greeting=bool(GREETING_PATTERN.search(normalized)),
        looks_like_name=looks_like_name(text, normalized),
    )
    logger.debug(
        "Analyzed message: intent=%s model=%s surface=%s phone=%s email=%s",
        analysis.intent.value, analysis.model, analysis.surface_ha,
        bool(analysis.phone), bool(analysis.email),
    )
    return analysis
