"""Difficulty profiles."""

from dataclasses import dataclass, field

from ..models.enums import Difficulty, Rarity


@dataclass(frozen=True)
class DifficultyProfile:
    """Per-level tuning for enemy generation, field size and pacing."""

    difficulty: Difficulty
    stat_multiplier: float
    form_range: tuple[int, int]
    rarity_weights: dict[Rarity, float] = field(hash=False)
    initial_hand_size: int
    deck_size: int
    max_field_size: int
    energy_regen_base: int  # Reference value only; turn regen uses Settings.energy_regen_base
    reward_multiplier: float
    max_hand_size: int  # Player hand capacity for draws


PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(
        difficulty=Difficulty.EASY,
        stat_multiplier=0.8,
        form_range=(0, 1),
        rarity_weights={Rarity.COMMON: 0.7, Rarity.RARE: 0.3, Rarity.EPIC: 0.0, Rarity.LEGENDARY: 0.0},
        initial_hand_size=2,
        deck_size=3,
        max_field_size=3,
        energy_regen_base=2,
        reward_multiplier=0.5,
        max_hand_size=5,
    ),
    Difficulty.MEDIUM: DifficultyProfile(
        difficulty=Difficulty.MEDIUM,
        stat_multiplier=1.0,
        form_range=(1, 2),
        rarity_weights={Rarity.COMMON: 0.5, Rarity.RARE: 0.3, Rarity.EPIC: 0.2, Rarity.LEGENDARY: 0.0},
        initial_hand_size=3,
        deck_size=4,
        max_field_size=4,
        energy_regen_base=3,
        reward_multiplier=1.0,
        max_hand_size=4,
    ),
    Difficulty.HARD: DifficultyProfile(
        difficulty=Difficulty.HARD,
        stat_multiplier=1.2,
        form_range=(1, 3),
        rarity_weights={Rarity.COMMON: 0.2, Rarity.RARE: 0.4, Rarity.EPIC: 0.3, Rarity.LEGENDARY: 0.1},
        initial_hand_size=3,
        deck_size=5,
        max_field_size=5,
        energy_regen_base=4,
        reward_multiplier=1.5,
        max_hand_size=3,
    ),
    Difficulty.EXPERT: DifficultyProfile(
        difficulty=Difficulty.EXPERT,
        stat_multiplier=1.5,
        form_range=(2, 3),
        rarity_weights={Rarity.COMMON: 0.0, Rarity.RARE: 0.3, Rarity.EPIC: 0.5, Rarity.LEGENDARY: 0.2},
        initial_hand_size=4,
        deck_size=6,
        max_field_size=6,
        energy_regen_base=5,
        reward_multiplier=2.0,
        max_hand_size=3,
    ),
}


def get_profile(difficulty: Difficulty | str | None) -> DifficultyProfile:
    """Get the profile for a difficulty. Unknown values fall back to medium."""
    return PROFILES[Difficulty.parse(difficulty)]
