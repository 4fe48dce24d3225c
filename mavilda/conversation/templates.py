"""Response texts for the sales chat, in Rioplatense Spanish."""

from typing import Any, Optional, Protocol, Sequence

from mavilda.config import settings
from mavilda.tools.catalog import format_model_menu, format_price, get_model_details


class ChoiceSource(Protocol):
    def choice(self, seq: Sequence[Any]) -> Any: ...


def pick_variant(options: Sequence[str], rng: ChoiceSource) -> str:
    """Choose one wording from `options`.

    The random source is explicit so tests can pin the choice with a
    seeded `random.Random`.
    """
    if not options:
        raise ValueError("No template variants to choose from")
    return rng.choice(options)


def greeting() -> str:
    biz = settings.business
    return (
        f"¡Hola! 👋 Soy {biz.bot_name}, tu asesora de drones agrícolas DJI "
        f"de {biz.company_name}.\n\n¿Con quién tengo el gusto de hablar?"
    )


WELCOME_VARIANTS = [
    "¡Mucho gusto {name}! 🚁\n\n¿Qué superficie necesitás cubrir con el drone? (ej: 100 ha)",
    "¡Encantada {name}! 🌾\n\nContame, ¿cuántas hectáreas trabajás y qué cultivos tenés?",
    "¡Hola {name}, qué bueno que escribas! 🚁\n\n"
    "Para recomendarte el drone ideal, ¿qué superficie querés cubrir?",
]

ASK_NAME_AGAIN = (
    "Perdón, no llegué a registrar tu nombre 😊\n\n¿Cómo te llamás?"
)


def which_model(name: str, purpose: str) -> str:
    return (
        f"{name}, ¿de qué modelo querés {purpose}?\n\n"
        f"{format_model_menu()}"
    )


def demo_checklist(name: str, surface_ha: Optional[int], checklist: dict[str, bool]) -> str:
    surface = f"{surface_ha} ha ✓" if checklist["surface"] else "pendiente"
    phone = "✓" if checklist["phone"] else "pendiente"
    location = "✓" if checklist["location"] else "pendiente"
    return (
        f"¡Excelente {name}! Para coordinar una demo necesito:\n\n"
        f"📍 Ubicación de tu campo ({location})\n"
        f"📏 Superficie ({surface})\n"
        f"📱 Teléfono de contacto ({phone})\n\n"
        f"¿Me pasás estos datos?"
    )


def financing(name: str) -> str:
    return (
        f"{name}, tenemos excelentes planes de financiación:\n\n"
        f"💳 Hasta 12 cuotas sin interés\n"
        f"🏦 Leasing a 24-36 meses\n"
        f"📊 Planes a medida según tu flujo\n\n"
        f"¿Te gustaría que un asesor te contacte?"
    )


def comparison(name: str) -> str:
    return (
        f"{name}, así se comparan nuestros modelos:\n\n"
        f"🚁 T25P - Liviano y ágil, ideal para 100-300 ha\n"
        f"🚁 T50 - El más elegido, para 300-500 ha\n"
        f"🚁 T70P - Alta capacidad, para 500-800 ha\n"
        f"🚁 T100 - Máximo rendimiento, más de 800 ha\n"
        f"📷 Mavic3M - Mapeo multiespectral y monitoreo\n\n"
        f"¿Cuántas hectáreas trabajás? Así te digo cuál te conviene."
    )


SURFACE_PITCHES = {
    "T25P": (
        "Con {surface} ha, el {model} es ideal para vos 🚁\n\n"
        "Es ágil, fácil de transportar y cubre tu campo sin problemas.\n"
        "💰 Precio desde {price}\n\n"
        "¿Querés coordinar una demo o ver opciones de financiación?"
    ),
    "T50": (
        "Para {surface} ha te recomiendo el {model} 🚁\n\n"
        "Es nuestro modelo más elegido: gran capacidad de tanque y autonomía "
        "para trabajar todo el día.\n"
        "💰 Precio desde {price}\n\n"
        "¿Te gustaría ver una demo en tu campo o conocer la financiación?"
    ),
    "T100": (
        "Con {surface} ha necesitás máxima capacidad: el {model} es el indicado 🚁\n\n"
        "Pensado para grandes superficies y contratistas.\n"
        "💰 Precio desde {price}\n\n"
        "¿Coordinamos una demo o preferís ver planes de financiación?"
    ),
}


def _model_display_name(model: str) -> str:
    details = get_model_details(model)
    return details["name"] if details else model


def surface_pitch(name: str, surface_ha: int, model: str) -> str:
    body = SURFACE_PITCHES[model].format(
        surface=surface_ha,
        model=model,
        price=format_price(get_model_details(model)["price"]),
    )
    return f"{name}, {body[0].lower()}{body[1:]}" if name else body


def ask_surface(name: str) -> str:
    return (
        f"{name}, para recomendarte el mejor equipo necesito saber:\n\n"
        f"📏 ¿Cuántas hectáreas querés cubrir?\n"
        f"🌱 ¿Qué cultivos trabajás?"
    )


def ask_contact(name: str, model: str) -> str:
    return (
        f"{name}, ¿me dejás tu celular o WhatsApp? 📱\n\n"
        f"Así te envío el catálogo completo del {_model_display_name(model)} con videos de "
        f"funcionamiento y casos de éxito."
    )


MODEL_FOLLOWUP_VARIANTS = [
    "¿Qué más te gustaría saber del {model}?\n\n"
    "• Precio y financiación\n• Especificaciones técnicas\n• Solicitar una demo",
    "¡Excelente elección el {model}! ¿Te cuento sobre precio, "
    "rendimiento o coordinamos una demo?",
    "{name}, ¿tenés alguna otra consulta sobre el {model}? "
    "Puedo pasarte precio, ficha técnica o armar una demo.",
]


def model_followup(name: str, model: str, rng: ChoiceSource) -> str:
    return pick_variant(MODEL_FOLLOWUP_VARIANTS, rng).format(name=name, model=model)


def crop_prompt(name: str, crops: tuple[str, ...]) -> str:
    crop_text = ", ".join(crops) if crops else "tus cultivos"
    return (
        f"{name}, trabajamos con muchos productores de {crop_text} 🌱\n\n"
        f"¿Cuántas hectáreas querés pulverizar? Así te recomiendo el modelo justo."
    )


def problem_prompt(name: str) -> str:
    return (
        f"{name}, los drones son ideales para aplicaciones localizadas contra "
        f"malezas y plagas 🎯\n\n"
        f"¿Qué superficie tenés afectada? Con eso te digo qué equipo te conviene."
    )


def help_menu(name: str) -> str:
    return (
        f"{name}, ¿en qué te puedo ayudar?\n\n"
        f"• Conocer los modelos\n"
        f"• Precios y financiación\n"
        f"• Especificaciones técnicas\n"
        f"• Coordinar una demo"
    )
