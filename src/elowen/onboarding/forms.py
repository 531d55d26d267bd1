"""
Onboarding Forms - Assessment options.

Finite option lists shown by the wizard. Anything outside these lists is
still accepted (the collaborator reads free text) but gets logged.
"""

import logging

from elowen.core.models import SkinType

logger = logging.getLogger(__name__)


# =============================================================================
# Valid Options
# =============================================================================

SKIN_TYPE_OPTIONS = [
    SkinType.DRY,
    SkinType.OILY,
    SkinType.COMBINATION,
    SkinType.NORMAL,
    SkinType.SENSITIVE,
]

CONCERN_OPTIONS = [
    "Acne",
    "Aging",
    "Redness",
    "Dark Spots",
    "Dryness",
    "Texture",
]

LIFESTYLE_OPTIONS = [
    "High Stress",
    "Poor Sleep",
    "Sun Exposure",
    "Urban Pollution",
    "Frequent Workouts",
    "Frequent Travel",
]

SENSITIVITY_MIN = 1
SENSITIVITY_MAX = 5
DEFAULT_SENSITIVITY = 3


# =============================================================================
# Wizard Steps
# =============================================================================

WIZARD_STEPS = [
    {
        "id": "skin_type",
        "title": "Your Skin Type",
        "description": "Everyone's base is different. Let's find yours.",
    },
    {
        "id": "concerns",
        "title": "Primary Concerns",
        "description": "What would you like to focus on?",
    },
    {
        "id": "lifestyle",
        "title": "Lifestyle Factors",
        "description": "Your environment affects your glow.",
    },
]


def check_option(value: str, options: list[str], kind: str) -> str:
    """Return the option as given, logging values outside the known list."""
    if value not in options:
        logger.info(f"Custom {kind} (accepted): {value}")
    return value


def clamp_sensitivity(value: int) -> int:
    """Clamp a slider value into the sensitivity range."""
    return max(SENSITIVITY_MIN, min(SENSITIVITY_MAX, int(value)))


def get_form_options() -> dict:
    """All wizard options, for rendering."""
    return {
        "skin_types": [t.value for t in SKIN_TYPE_OPTIONS],
        "concerns": CONCERN_OPTIONS,
        "lifestyle": LIFESTYLE_OPTIONS,
        "sensitivity": {
            "min": SENSITIVITY_MIN,
            "max": SENSITIVITY_MAX,
            "default": DEFAULT_SENSITIVITY,
        },
    }
