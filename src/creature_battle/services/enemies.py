"""Enemy generator - creates the opposing roster for a battle."""

import logging
from collections.abc import Sequence
from dataclasses import replace

from ..engine.difficulty import DifficultyProfile, get_profile
from ..engine.rng import BattleRandom
from ..engine.stats import derive_battle_stats, round_half_up
from ..engine.types import BaseAttributes, Creature
from ..models.enums import Difficulty, Rarity

logger = logging.getLogger(__name__)

# Species used when the player's roster gives no species to mirror
SPECIES_TEMPLATES: list[tuple[str, str]] = [
    ("emberfox", "Emberfox"),
    ("tidecrab", "Tidecrab"),
    ("mossback", "Mossback"),
    ("stormwing", "Stormwing"),
    ("gloomcap", "Gloomcap"),
    ("ironhorn", "Ironhorn"),
    ("frostling", "Frostling"),
    ("duneviper", "Duneviper"),
]

RARITY_ORDER = (Rarity.COMMON, Rarity.RARE, Rarity.EPIC, Rarity.LEGENDARY)

MAX_ENEMY_ENERGY_COST = 9
OPENING_ENERGY_COST = 3


class EnemyGenerator:
    """Generates enemy creatures scaled to a difficulty."""

    def __init__(self, rng: BattleRandom) -> None:
        self.rng = rng

    def generate_roster(
        self,
        difficulty: Difficulty | str | None,
        count: int,
        player_creatures: Sequence[Creature] = (),
    ) -> list[Creature]:
        """Generate the enemy roster.

        Args:
            difficulty: Battle difficulty (unknown values fall back to medium)
            count: Requested roster size, capped at the difficulty's deck size
            player_creatures: Player roster whose species are mirrored

        Returns:
            Battle-ready enemy creatures at full health
        """
        profile = get_profile(difficulty)
        count = max(0, min(count, profile.deck_size))

        species_pool = self._species_pool(player_creatures)
        roster: list[Creature] = []
        for index in range(count):
            creature = self._generate_creature(profile, index, species_pool)
            if index == 0:
                creature.battle_stats.energy_cost = OPENING_ENERGY_COST
            roster.append(creature)

        logger.debug(
            "Generated %d enemies for %s: %s",
            len(roster),
            profile.difficulty.value,
            ", ".join(f"{c.species_name} ({c.rarity.value}, form {c.form})" for c in roster),
        )
        return roster

    def _species_pool(self, player_creatures: Sequence[Creature]) -> list[tuple[str, str]]:
        """Distinct player species, in first-seen order."""
        pool: dict[str, str] = {}
        for creature in player_creatures:
            if creature.species_id and creature.species_id not in pool:
                pool[creature.species_id] = creature.species_name
        return list(pool.items())

    def _generate_creature(
        self,
        profile: DifficultyProfile,
        index: int,
        species_pool: list[tuple[str, str]],
    ) -> Creature:
        rarity = self.select_rarity(profile.rarity_weights)
        form = self.rng.randint(*profile.form_range)
        species_id, species_name = self.rng.choice(species_pool or SPECIES_TEMPLATES)

        attributes = self.generate_attributes(rarity, form, profile.stat_multiplier)
        battle_stats = derive_battle_stats(attributes, rarity, form, 0)
        battle_stats = replace(battle_stats, energy_cost=self.energy_cost(rarity, form))

        return Creature(
            id=f"enemy-{index + 1}-{species_id}",
            species_id=species_id,
            species_name=species_name,
            rarity=rarity,
            form=form,
            combination_level=0,
            stats=attributes,
            battle_stats=battle_stats,
            current_health=battle_stats.max_health,
        )

    def select_rarity(self, weights: dict[Rarity, float]) -> Rarity:
        """Cumulative draw over the rarity table; residual probability is common."""
        roll = self.rng.unit()
        cumulative = 0.0
        for rarity in RARITY_ORDER:
            cumulative += weights.get(rarity, 0.0)
            if roll < cumulative:
                return rarity
        return Rarity.COMMON

    def generate_attributes(self, rarity: Rarity, form: int, stat_multiplier: float) -> BaseAttributes:
        """Rarity baseline plus form plus a -1/0/+1 jitter per stat, scaled and rounded."""
        baseline = self._get_baseline(rarity)
        values = {}
        for stat in ("energy", "strength", "magic", "stamina", "speed"):
            jitter = self.rng.randint(-1, 1)
            values[stat] = round_half_up((baseline + form + jitter) * stat_multiplier)
        return BaseAttributes(**values)

    def energy_cost(self, rarity: Rarity, form: int) -> int:
        """Deploy cost of a generated creature."""
        return min(MAX_ENEMY_ENERGY_COST, 3 + form + self._get_rarity_cost_bonus(rarity))

    def _get_baseline(self, rarity: Rarity) -> int:
        """Get the base attribute value for a rarity."""
        match rarity:
            case Rarity.RARE:
                return 6
            case Rarity.EPIC:
                return 7
            case Rarity.LEGENDARY:
                return 8
            case _:
                return 5

    def _get_rarity_cost_bonus(self, rarity: Rarity) -> int:
        """Get the extra energy cost for a rarity."""
        match rarity:
            case Rarity.RARE:
                return 1
            case Rarity.EPIC:
                return 2
            case Rarity.LEGENDARY:
                return 3
            case _:
                return 0
