"""Drone catalog with hectare bands, tier prices, and intended use."""

import logging
from typing import Optional

from mavilda.config import settings

logger = logging.getLogger(__name__)

# Ordered smallest to largest; menus list models in this order.
DRONE_CATALOG: dict[str, dict] = {
    "T25P": {
        "name": "DJI Agras T25P",
        "hectares": "100-300 ha",
        "price": 18500,
        "use": "Pulverización en lotes chicos y medianos",
    },
    "T50": {
        "name": "DJI Agras T50",
        "hectares": "300-500 ha",
        "price": 27900,
        "use": "Pulverización y siembra en campos medianos",
    },
    "T70P": {
        "name": "DJI Agras T70P",
        "hectares": "500-800 ha",
        "price": 34500,
        "use": "Alta capacidad para contratistas",
    },
    "T100": {
        "name": "DJI Agras T100",
        "hectares": "más de 800 ha",
        "price": 41900,
        "use": "Máxima capacidad para grandes superficies",
    },
    "Mavic3M": {
        "name": "DJI Mavic 3 Multispectral",
        "hectares": "mapeo y monitoreo",
        "price": 6900,
        "use": "Mapeo multiespectral y monitoreo de cultivos",
    },
}

MODEL_ICONS: dict[str, str] = {"Mavic3M": "📷"}


def get_all_models() -> list[dict]:
    """Return all models with basic info, in catalog order."""
    return [
        {"code": code, "name": info["name"], "hectares": info["hectares"]}
        for code, info in DRONE_CATALOG.items()
    ]


def get_model_details(code: str) -> Optional[dict]:
    """Get full details for a model code (case-insensitive)."""
    normalized = code.strip().lower()
    for model_code, info in DRONE_CATALOG.items():
        if model_code.lower() == normalized:
            return {"code": model_code, **info}
    logger.warning("Unknown drone model requested: %s", code)
    return None


def format_price(amount: int) -> str:
    """Format a tier price the way the sales team quotes it (USD 27.900)."""
    return f"{settings.business.currency} {amount:,}".replace(",", ".")


def recommend_for_surface(hectares: int) -> str:
    """Pick the spraying model sized for a surface in hectares."""
    conv = settings.conversation
    if hectares <= conv.recommend_small_max_ha:
        return "T25P"
    if hectares <= conv.recommend_medium_max_ha:
        return "T50"
    return "T100"


def format_model_menu() -> str:
    """Render the model list with hectare ranges, one per line."""
    return "\n".join(
        f"{MODEL_ICONS.get(m['code'], '🚁')} {m['code']} - {m['hectares']}"
        for m in get_all_models()
    )
