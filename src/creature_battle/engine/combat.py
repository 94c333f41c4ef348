"""Combat resolver - computes the outcome of a single attack."""

import copy
import logging

from ..models.enums import AttackType
from .rng import BattleRandom
from .stats import round_half_up
from .types import AttackResult, BaseAttributes, Creature, DamageResult

logger = logging.getLogger(__name__)

CRITICAL_MULTIPLIER = 1.5
VARIANCE_RANGE = (0.9, 1.1)


def select_attack_type(attacker: Creature) -> AttackType:
    """Physical when physical attack is at least magical attack."""
    stats = attacker.battle_stats
    if stats.physical_attack >= stats.magical_attack:
        return AttackType.PHYSICAL
    return AttackType.MAGICAL


def effectiveness_multiplier(attack_type: AttackType, defender: BaseAttributes) -> float:
    """Damage multiplier from the effectiveness triangle.

    Strength > Stamina > Speed > Magic > Energy > Strength. Physical attacks
    are strength-based, magical attacks are magic-based.
    """
    if attack_type is AttackType.PHYSICAL:
        if defender.stamina > defender.energy:
            return 1.5
        if defender.magic > defender.stamina:
            return 0.75
    else:
        if defender.speed > defender.strength:
            return 1.5
        if defender.energy > defender.magic:
            return 0.75
    return 1.0


def effectiveness_text(multiplier: float) -> str:
    if multiplier >= 1.5:
        return "super effective"
    if multiplier <= 0.75:
        return "not very effective"
    return "normal"


class CombatResolver:
    """Resolves attacks between two creatures using an injected random source."""

    def __init__(self, rng: BattleRandom) -> None:
        self.rng = rng

    def calculate_damage(
        self,
        attacker: Creature,
        defender: Creature,
        attack_type: AttackType,
    ) -> DamageResult:
        """Roll dodge, critical and variance and compute final damage.

        Order: dodge roll, then critical roll, then variance. A dodge stops
        all further rolls. Damage is at least 1 whenever the attack lands.
        """
        attacker_stats = attacker.battle_stats
        defender_stats = defender.battle_stats

        if self.rng.percent() < defender_stats.dodge_chance:
            return DamageResult(damage=0, is_dodged=True)

        is_critical = self.rng.percent() < attacker_stats.critical_chance
        critical_multiplier = CRITICAL_MULTIPLIER if is_critical else 1.0
        variance = self.rng.uniform(*VARIANCE_RANGE)

        if attack_type is AttackType.PHYSICAL:
            attack_value = attacker_stats.physical_attack
            defense_value = defender_stats.physical_defense
        else:
            attack_value = attacker_stats.magical_attack
            defense_value = defender_stats.magical_defense

        multiplier = effectiveness_multiplier(attack_type, defender.stats)
        raw_damage = attack_value * multiplier * variance * critical_multiplier
        final_damage = max(1, round_half_up(raw_damage - defense_value))

        return DamageResult(
            damage=final_damage,
            is_dodged=False,
            is_critical=is_critical,
            effectiveness=effectiveness_text(multiplier),
            multiplier=multiplier,
        )

    def resolve_attack(
        self,
        attacker: Creature | None,
        defender: Creature | None,
        attack_type: AttackType | None = None,
    ) -> AttackResult:
        """Resolve one attack.

        Args:
            attacker: Attacking creature
            defender: Defending creature
            attack_type: Forced attack type, or None to pick automatically

        Returns:
            AttackResult with updated copies of both creatures. Missing input
            yields a no-op result with a diagnostic message.
        """
        if attacker is None or defender is None:
            logger.debug("Attack skipped: attacker=%r defender=%r", attacker, defender)
            return AttackResult(
                updated_attacker=attacker,
                updated_defender=defender,
                message="Invalid attack - missing stats",
                damage_result=DamageResult(damage=0),
            )

        updated_attacker = copy.deepcopy(attacker)
        updated_defender = copy.deepcopy(defender)

        if attack_type is None:
            attack_type = select_attack_type(updated_attacker)

        result = self.calculate_damage(updated_attacker, updated_defender, attack_type)

        if result.is_dodged:
            message = f"{attacker.species_name}'s attack was dodged by {defender.species_name}!"
        else:
            updated_defender.apply_damage(result.damage)
            message = f"{attacker.species_name} used {attack_type.value} attack on {defender.species_name}"
            if result.is_critical:
                message += " (Critical Hit!)"
            if result.effectiveness != "normal":
                message += f" - {result.effectiveness}!"
            message += f" dealing {result.damage} damage."
            if not updated_defender.is_alive():
                message += f" {defender.species_name} was defeated!"

        return AttackResult(
            updated_attacker=updated_attacker,
            updated_defender=updated_defender,
            message=message,
            damage_result=result,
            attack_type=attack_type,
        )
