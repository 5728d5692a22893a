# backend/presets.py

from typing import Dict, Optional, Tuple

from .model import StylePreset

DEFAULT_PROMPT = "Change the person's clothing to a professional business suit."

PRESET_STYLES: Tuple[StylePreset, ...] = (
    StylePreset(
        id="suit-dark",
        label="Dark Business Suit",
        prompt="Change the clothing to a professional dark charcoal business suit with a crisp white shirt and tie.",
        icon="👔",
    ),
    StylePreset(
        id="tuxedo",
        label="Formal Tuxedo",
        prompt="Change the clothing to a formal black tuxedo with a bow tie.",
        icon="🎩",
    ),
    StylePreset(
        id="casual-chic",
        label="Smart Casual",
        prompt="Change the clothing to a smart casual outfit, like a blazer with a t-shirt.",
        icon="👕",
    ),
    StylePreset(
        id="cyberpunk",
        label="Cyberpunk Techwear",
        prompt="Change the clothing to futuristic cyberpunk techwear with neon accents.",
        icon="🤖",
    ),
    StylePreset(
        id="leather",
        label="Leather Jacket",
        prompt="Change the clothing to a stylish black leather jacket and jeans.",
        icon="🧥",
    ),
)

_BY_ID: Dict[str, StylePreset] = {p.id: p for p in PRESET_STYLES}


def get_preset(preset_id: str) -> Optional[StylePreset]:
    return _BY_ID.get(preset_id)

