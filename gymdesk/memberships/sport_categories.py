"""Sport categories a membership package can grant access to."""

from dataclasses import dataclass

FULL_ACCESS_CATEGORY = "all"


@dataclass(frozen=True)
class SportCategory:
    id: str
    name: str
    description: str
    color: str
    display_order: int
    is_active: bool = True


SPORT_CATEGORIES: tuple[SportCategory, ...] = (
    SportCategory(
        FULL_ACCESS_CATEGORY,
        "All Sports",
        "Full access to all sports and activities",
        "#1976d2",
        0,
    ),
    SportCategory("bjj", "Brazilian Jiu-Jitsu", "BJJ classes and open mats", "#7b1fa2", 1),
    SportCategory("muay_thai", "Muay Thai", "Traditional Thai boxing", "#d32f2f", 2),
    SportCategory("boxing", "Boxing", "Boxing training and sparring", "#f57c00", 3),
    SportCategory("mma", "Mixed Martial Arts", "MMA training and technique", "#388e3c", 4),
    SportCategory("kickboxing", "Kickboxing", "Cardio kickboxing classes", "#e91e63", 5),
    SportCategory(
        "wrestling", "Wrestling", "Wrestling technique and conditioning", "#795548", 6
    ),
    SportCategory(
        "fitness",
        "Fitness & Conditioning",
        "General fitness and strength training",
        "#607d8b",
        7,
    ),
)

SPORT_CATEGORY_IDS: frozenset[str] = frozenset(c.id for c in SPORT_CATEGORIES)
