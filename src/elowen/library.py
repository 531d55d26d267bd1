"""
Elowen - Library content.

Static reading list and routine tips shown in the library and routine views.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Article:
    title: str
    tag: str


@dataclass(frozen=True)
class RoutineTip:
    title: str
    body: str


ARTICLES = [
    Article("Dermal Barrier Integrity", "Physiology"),
    Article("Retinoid Synergies", "Active Compounds"),
    Article("Photo-aging Pathways", "UV Protection"),
    Article("Psychodermatology: Stress & Glow", "Neurological"),
]

ROUTINE_TIPS = [
    RoutineTip(
        "Precision Patch Testing",
        "Prior to full integration, apply actives to a controlled zone for 48 hours "
        "to mitigate widespread inflammatory responses.",
    ),
    RoutineTip(
        "Layering Order",
        "Follow a low-to-high viscosity path: start with aqueous solutions and end with "
        "occlusive barriers to maximize transdermal absorption.",
    ),
    RoutineTip(
        "Daily SPF",
        "Broad-spectrum UV filters are critical even in indirect light settings to prevent "
        "oxidative stress and hyperpigmentation progression.",
    ),
]


def articles_by_tag(tag: str) -> list[Article]:
    return [a for a in ARTICLES if a.tag.lower() == tag.lower()]
