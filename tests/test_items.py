"""Tests for the item effect resolver and applying items."""

from creature_battle.engine.effects import EffectEngine
from creature_battle.engine.items import magic_power, resolve_spell_effect, resolve_tool_effect
from creature_battle.engine.types import BaseAttributes, EffectPayload
from creature_battle.models.enums import EffectKind
from creature_battle.models.records import SpellRecord, ToolRecord

from factories import make_creature


def tool(item_type, effect, name="Test Tool"):
    return ToolRecord(id="t1", name=name, item_type=item_type, effect_kind=effect)


def spell(item_type, effect, name="Test Spell"):
    return SpellRecord(id="s1", name=name, item_type=item_type, effect_kind=effect)


class TestToolEffects:
    """Tests for resolve_tool_effect."""

    def test_missing_tool(self):
        """Test that no tool means no effect."""
        assert resolve_tool_effect(None) == EffectPayload()
        assert resolve_tool_effect(None).is_empty()

    def test_default_stamina_tool(self):
        """Test the base stamina tool effect."""
        payload = resolve_tool_effect(tool("stamina", "default"))
        assert payload.stat_changes == {"physical_defense": 5}
        assert payload.health_change == 10
        assert payload.duration == 3

    def test_surge_doubles_and_shortens(self):
        """Test that surge doubles the base deltas for one turn."""
        payload = resolve_tool_effect(tool("strength", "surge"))
        assert payload.stat_changes == {"physical_attack": 10}
        assert payload.duration == 1

    def test_echo_weakens_and_extends(self):
        """Test that echo scales deltas by 0.7 for five turns."""
        payload = resolve_tool_effect(tool("speed", "echo"))
        assert set(payload.stat_changes) == {"initiative", "dodge_chance"}
        assert payload.stat_changes["dodge_chance"] == 2
        assert payload.duration == 5

    def test_shield(self):
        """Test the flat shield bonus regardless of type."""
        payload = resolve_tool_effect(tool("magic", "shield"))
        assert payload.stat_changes == {"physical_defense": 8, "magical_defense": 8}
        assert payload.duration == 3

    def test_drain(self):
        """Test that drain trades defense for attack."""
        payload = resolve_tool_effect(tool("energy", "drain"))
        assert payload.stat_changes == {
            "physical_attack": 7,
            "magical_attack": 7,
            "physical_defense": -3,
            "magical_defense": -3,
        }

    def test_charge_records_target_stat(self):
        """Test that charge targets the first stat of the base effect."""
        payload = resolve_tool_effect(tool("strength", "charge"))
        assert payload.charge is not None
        assert payload.charge.target_stat == "physical_attack"
        assert payload.charge.per_turn_bonus == 3
        assert payload.charge.max_turns == 3
        assert payload.stat_changes == {}

    def test_unknown_type_and_effect(self):
        """Test that unknown names fall back to an empty default effect."""
        record = ToolRecord.model_validate({"id": "t9", "type": "plasma", "effect": "Blaze"})
        assert record.item_type is None
        assert record.effect_kind == EffectKind.DEFAULT

        payload = resolve_tool_effect(record)
        assert payload.stat_changes == {}
        assert payload.duration == 3


class TestSpellEffects:
    """Tests for resolve_spell_effect."""

    def test_magic_power(self):
        """Test spell scaling from caster magic."""
        assert magic_power(5) == 1.5
        assert magic_power(None) == 1.0

    def test_missing_spell(self):
        """Test that no spell means no effect."""
        assert resolve_spell_effect(None, 5).is_empty()

    def test_strength_default_deals_scaled_damage(self):
        """Test base strength spell damage with the default caster magic."""
        payload = resolve_spell_effect(spell("strength", "default"))
        assert payload.damage == 23
        assert payload.stat_changes == {"physical_attack": 7}
        assert payload.duration == 2

    def test_surge_doubles_damage(self):
        """Test that surge doubles damage and has no lasting effect."""
        payload = resolve_spell_effect(spell("strength", "surge"), 5)
        assert payload.damage == 46
        assert payload.duration == 0

    def test_shield_heals(self):
        """Test shield spell defense and healing."""
        payload = resolve_spell_effect(spell("speed", "shield"), 0)
        assert payload.stat_changes == {"physical_defense": 10, "magical_defense": 10}
        assert payload.healing == 10
        assert payload.duration == 2

    def test_echo_heal_over_time(self):
        """Test that echo turns healing into a per-turn effect."""
        payload = resolve_spell_effect(spell("stamina", "echo"), 5)
        # Base healing 30, spread over three ticks and scaled by power again
        assert payload.health_over_time == 15
        assert payload.healing == 0
        assert payload.duration == 3

    def test_echo_damage_over_time(self):
        """Test that echo turns damage into negative health per turn."""
        payload = resolve_spell_effect(spell("strength", "echo"), 0)
        assert payload.health_over_time == -5
        assert payload.duration == 3

    def test_drain(self):
        """Test drain damage and caster healing."""
        payload = resolve_spell_effect(spell("magic", "drain"), 0)
        assert payload.damage == 12
        assert payload.self_heal == 6
        assert payload.duration == 0

    def test_charge_prepares_delayed_damage(self):
        """Test the prepared strike of a charge spell."""
        payload = resolve_spell_effect(spell("magic", "charge"), 10)
        assert payload.prepare is not None
        assert payload.prepare.damage == 50
        assert payload.prepare.turns == 1
        assert payload.duration == 1

    def test_energy_spell_grants_energy(self):
        """Test the base energy spell."""
        payload = resolve_spell_effect(spell("energy", "default"), 5)
        assert payload.energy_gain == 5
        assert payload.stat_changes == {"energy_cost": -2}


class TestApplyingItems:
    """Tests for EffectEngine.apply_tool and apply_spell."""

    def test_shield_tool_raises_defenses(self):
        """Test applying a shield tool to a creature with 10/10 defenses."""
        engine = EffectEngine()
        creature = make_creature(physical_defense=10, magical_defense=10)

        outcome = engine.apply_tool(creature, tool("stamina", "shield", name="Iron Shell"))

        updated = outcome.creature
        assert updated.battle_stats.physical_defense == 18
        assert updated.battle_stats.magical_defense == 18
        assert len(updated.active_effects) == 1
        assert updated.active_effects[0].duration == 3
        assert updated.active_effects[0].name == "Iron Shell"
        assert creature.battle_stats.physical_defense == 10

    def test_healing_tool_heals_immediately(self):
        """Test that a stamina tool heals on application."""
        engine = EffectEngine()
        creature = make_creature(health=50)

        outcome = engine.apply_tool(creature, tool("stamina", "default"))

        assert outcome.creature.current_health == 60

    def test_missing_tool_is_a_no_op(self):
        """Test that a missing tool leaves the creature untouched."""
        engine = EffectEngine()
        creature = make_creature()

        outcome = engine.apply_tool(creature, None)

        assert outcome.creature is creature
        assert outcome.payload is None

    def test_drain_spell_damages_target_and_heals_caster(self):
        """Test drain splits into target damage and caster healing."""
        engine = EffectEngine()
        caster = make_creature("c", "Caster", health=50)
        target = make_creature("t", "Target")

        outcome = engine.apply_spell(caster, target, spell("magic", "drain"))

        assert outcome.target.current_health == 88
        assert outcome.caster.current_health == 56
        assert outcome.caster.active_effects == []

    def test_spell_without_target_hits_caster(self):
        """Test a self-cast healing spell."""
        engine = EffectEngine()
        caster = make_creature("c", "Caster", attributes=BaseAttributes(magic=0), health=40)

        outcome = engine.apply_spell(caster, None, spell("speed", "shield"))

        assert outcome.target is outcome.caster
        assert outcome.caster.current_health == 50
        assert outcome.caster.battle_stats.physical_defense == 15
        assert outcome.caster.active_effects[0].duration == 2
