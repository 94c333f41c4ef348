"""AI decision engine - chooses one action for the enemy side."""

import logging

from ..models.enums import Difficulty
from .difficulty import get_profile
from .rng import BattleRandom
from .types import Creature, Intent

logger = logging.getLogger(__name__)

EASY_DEFEND_CHANCE = 0.3
MEDIUM_LOW_HEALTH_DEFEND_CHANCE = 0.25
MEDIUM_LOW_HEALTH = 0.3
MEDIUM_DEFEND_CHANCE = 0.4
MEDIUM_DEFEND_BELOW = 0.5


class AIDecisionEngine:
    """Difficulty-scaled policy for the non-human side.

    Hard and expert currently use the easy policy.
    """

    def __init__(self, rng: BattleRandom) -> None:
        self.rng = rng

    def decide(
        self,
        difficulty: Difficulty,
        hand: list[Creature],
        field: list[Creature],
        opponent_field: list[Creature],
        energy: int,
    ) -> Intent:
        """Choose one intent.

        Args:
            difficulty: Battle difficulty (selects the policy and field size)
            hand: Own hand
            field: Own field
            opponent_field: Opposing field
            energy: Own available energy

        Returns:
            Deploy, Attack, Defend or EndTurn intent
        """
        profile = get_profile(difficulty)

        if len(field) >= profile.max_field_size:
            logger.debug("AI ends turn: field is full (%d)", len(field))
            return Intent.end_turn()
        if energy <= 0:
            logger.debug("AI ends turn: no energy")
            return Intent.end_turn()
        if not hand and not field:
            logger.debug("AI ends turn: nothing to play")
            return Intent.end_turn()

        match profile.difficulty:
            case Difficulty.MEDIUM:
                return self._medium(hand, field, opponent_field, energy, profile.max_field_size)
            case Difficulty.HARD | Difficulty.EXPERT:
                # TODO: dedicated hard/expert policies; both reuse the easy policy for now
                return self._easy(hand, field, opponent_field, energy, profile.max_field_size)
            case _:
                return self._easy(hand, field, opponent_field, energy, profile.max_field_size)

    def _easy(
        self,
        hand: list[Creature],
        field: list[Creature],
        opponent_field: list[Creature],
        energy: int,
        max_field_size: int,
    ) -> Intent:
        affordable = [c for c in hand if c.battle_stats.energy_cost <= energy]
        if len(field) < max_field_size and affordable:
            return Intent.deploy(self.rng.choice(affordable))

        if field and opponent_field:
            attacker = self.rng.choice(field)
            target = self.rng.choice(opponent_field)
            if self.rng.chance(EASY_DEFEND_CHANCE) and not attacker.is_defending:
                return Intent.defend(attacker)
            return Intent.attack(attacker, target)

        if field:
            idle = [c for c in field if not c.is_defending]
            if idle:
                return Intent.defend(self.rng.choice(idle))

        return Intent.end_turn()

    def _medium(
        self,
        hand: list[Creature],
        field: list[Creature],
        opponent_field: list[Creature],
        energy: int,
        max_field_size: int,
    ) -> Intent:
        affordable = [c for c in hand if c.battle_stats.energy_cost <= energy]
        if len(field) < max_field_size and affordable:
            return Intent.deploy(max(affordable, key=lambda c: c.stats.total()))

        if field:
            attacker = max(field, key=lambda c: c.battle_stats.strongest_attack)
            wants_cover = attacker.health_fraction < MEDIUM_LOW_HEALTH or not opponent_field
            if wants_cover and not attacker.is_defending and self.rng.chance(MEDIUM_LOW_HEALTH_DEFEND_CHANCE):
                return Intent.defend(attacker)
            if opponent_field:
                target = min(opponent_field, key=lambda c: c.current_health)
                return Intent.attack(attacker, target)

        if field and (not opponent_field or self.rng.chance(MEDIUM_DEFEND_CHANCE)):
            idle = [c for c in field if not c.is_defending]
            if idle:
                weakest = min(idle, key=lambda c: c.health_fraction)
                if weakest.health_fraction < MEDIUM_DEFEND_BELOW:
                    return Intent.defend(weakest)

        return Intent.end_turn()
