"""Shared text utilities used across the lead bot."""

import re
import unicodedata


def normalize_text(value: str) -> str:
    """Lowercase and strip diacritics, for keyword matching only.

    Examples:
        >>> normalize_text("¿Cuánto CUESTA el T50?")
        '¿cuanto cuesta el t50?'
        >>> normalize_text("Campaña")
        'campana'
    """
    decomposed = unicodedata.normalize("NFD", value.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def digits_only(value: str) -> str:
    """Strip everything except digits.

    Examples:
        >>> digits_only("+54 9 (341) 555-1234")
        '5493415551234'
    """
    return re.sub(r"\D", "", value)
