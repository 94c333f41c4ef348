"""Tests for the combat resolver."""

import pytest

from creature_battle.engine.combat import (
    CombatResolver,
    effectiveness_multiplier,
    effectiveness_text,
    select_attack_type,
)
from creature_battle.engine.rng import BattleRandom
from creature_battle.engine.types import BaseAttributes
from creature_battle.models.enums import AttackType

from factories import ScriptedRandom, make_creature


class TestEffectiveness:
    """Tests for the effectiveness triangle."""

    def test_physical_against_stamina(self):
        """Test physical attacks are super effective when stamina beats energy."""
        multiplier = effectiveness_multiplier(AttackType.PHYSICAL, BaseAttributes(stamina=10, energy=2))
        assert multiplier == 1.5
        assert effectiveness_text(multiplier) == "super effective"

    def test_physical_against_magic(self):
        """Test physical attacks are weak when magic beats stamina."""
        multiplier = effectiveness_multiplier(AttackType.PHYSICAL, BaseAttributes(magic=8, stamina=3))
        assert multiplier == 0.75
        assert effectiveness_text(multiplier) == "not very effective"

    def test_magical_matchups(self):
        """Test magical attacks against speed and energy."""
        assert effectiveness_multiplier(AttackType.MAGICAL, BaseAttributes(speed=6, strength=2)) == 1.5
        assert effectiveness_multiplier(AttackType.MAGICAL, BaseAttributes(energy=6, magic=2)) == 0.75
        assert effectiveness_multiplier(AttackType.MAGICAL, BaseAttributes()) == 1.0

    def test_attack_type_ties_go_physical(self):
        """Test that equal attacks pick physical."""
        creature = make_creature(physical_attack=15, magical_attack=15)
        assert select_attack_type(creature) == AttackType.PHYSICAL

        creature = make_creature(physical_attack=10, magical_attack=15)
        assert select_attack_type(creature) == AttackType.MAGICAL


class TestResolveAttack:
    """Tests for single attack resolution."""

    def test_plain_hit(self):
        """Test damage with no dodge, no critical and neutral variance."""
        resolver = CombatResolver(ScriptedRandom(units=[0.5, 0.5], uniforms=[1.0]))
        attacker = make_creature("a", "Attacker", physical_attack=20)
        defender = make_creature("d", "Defender", physical_defense=5)

        result = resolver.resolve_attack(attacker, defender, AttackType.PHYSICAL)

        assert result.damage_result.damage == 15
        assert not result.damage_result.is_dodged
        assert not result.damage_result.is_critical
        assert result.updated_defender.current_health == 85
        assert "dealing 15 damage" in result.message

    def test_dodge(self):
        """Test that a dodge deals nothing and skips the critical roll."""
        resolver = CombatResolver(ScriptedRandom(units=[0.01], uniforms=[1.0]))
        attacker = make_creature("a", "Attacker", critical_chance=100)
        defender = make_creature("d", "Defender", dodge_chance=10)

        result = resolver.resolve_attack(attacker, defender, AttackType.PHYSICAL)

        assert result.damage_result.damage == 0
        assert result.damage_result.is_dodged
        assert not result.damage_result.is_critical
        assert result.updated_defender.current_health == 100
        assert result.message == "Attacker's attack was dodged by Defender!"

    def test_super_effective_hit(self):
        """Test the effectiveness multiplier feeds into damage."""
        resolver = CombatResolver(ScriptedRandom(units=[0.5, 0.5], uniforms=[1.0]))
        attacker = make_creature("a", "Attacker")
        defender = make_creature("d", "Defender", attributes=BaseAttributes(stamina=10, energy=2))

        result = resolver.resolve_attack(attacker, defender)

        assert result.attack_type == AttackType.PHYSICAL
        assert result.damage_result.multiplier == 1.5
        assert result.damage_result.damage == 25
        assert "super effective" in result.message

    def test_critical_hit(self):
        """Test the critical multiplier."""
        resolver = CombatResolver(ScriptedRandom(units=[0.5, 0.0], uniforms=[1.0]))
        attacker = make_creature("a", "Attacker", critical_chance=10)
        defender = make_creature("d", "Defender")

        result = resolver.resolve_attack(attacker, defender, AttackType.PHYSICAL)

        assert result.damage_result.is_critical
        assert result.damage_result.damage == 25
        assert "(Critical Hit!)" in result.message

    def test_minimum_damage(self):
        """Test that a landed hit deals at least 1 damage."""
        resolver = CombatResolver(ScriptedRandom(units=[0.5, 0.5], uniforms=[0.9]))
        attacker = make_creature("a", "Attacker", physical_attack=10)
        defender = make_creature("d", "Defender", physical_defense=100)

        result = resolver.resolve_attack(attacker, defender, AttackType.PHYSICAL)

        assert result.damage_result.damage == 1

    def test_lethal_hit_is_reported(self):
        """Test the defeat suffix and health clamping."""
        resolver = CombatResolver(ScriptedRandom(units=[0.5, 0.5], uniforms=[1.0]))
        attacker = make_creature("a", "Attacker", physical_attack=200)
        defender = make_creature("d", "Defender", health=10)

        result = resolver.resolve_attack(attacker, defender, AttackType.PHYSICAL)

        assert result.updated_defender.current_health == 0
        assert result.message.endswith("Defender was defeated!")

    def test_inputs_are_not_mutated(self):
        """Test that the resolver works on copies."""
        resolver = CombatResolver(ScriptedRandom(units=[0.5, 0.5], uniforms=[1.0]))
        attacker = make_creature("a", "Attacker")
        defender = make_creature("d", "Defender")

        result = resolver.resolve_attack(attacker, defender)

        assert defender.current_health == 100
        assert result.updated_defender is not defender

    def test_missing_creature_is_a_no_op(self):
        """Test that a missing defender yields a diagnostic result."""
        resolver = CombatResolver(BattleRandom(1))
        attacker = make_creature("a", "Attacker")

        result = resolver.resolve_attack(attacker, None)

        assert result.message == "Invalid attack - missing stats"
        assert result.damage_result.damage == 0
        assert result.updated_attacker is attacker

    @pytest.mark.parametrize("seed", range(0, 200, 7))
    def test_damage_zero_only_when_dodged(self, seed):
        """Test that damage is 0 exactly when the attack is dodged."""
        rng = BattleRandom(seed)
        resolver = CombatResolver(rng)
        attacker = make_creature("a", "Attacker", physical_attack=rng.randint(1, 60), critical_chance=20)
        defender = make_creature(
            "d",
            "Defender",
            physical_defense=rng.randint(0, 80),
            dodge_chance=20,
            attributes=BaseAttributes(stamina=rng.randint(0, 9), energy=rng.randint(0, 9)),
        )

        for _ in range(20):
            damage = resolver.calculate_damage(attacker, defender, AttackType.PHYSICAL)
            if damage.is_dodged:
                assert damage.damage == 0
            else:
                assert damage.damage >= 1
