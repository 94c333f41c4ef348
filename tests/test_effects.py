"""Tests for the effect engine."""

from creature_battle.engine.effects import EffectEngine, creature_label
from creature_battle.engine.types import ActiveEffect, PrepareEffect
from creature_battle.models.enums import Side
from creature_battle.models.records import SpellRecord, ToolRecord

from factories import make_creature


def effect(name="Buff", duration=2, health_effect=0, stat_effect=None, prepare=None):
    return ActiveEffect(
        id=f"{name.lower()}-1",
        name=name,
        icon="*",
        kind="test",
        description="Test effect",
        duration=duration,
        stat_effect=stat_effect or {},
        health_effect=health_effect,
        prepare=prepare,
    )


class TestAddEffect:
    """Tests for attaching effects."""

    def test_stat_effect_applies_once(self):
        """Test that stat deltas are applied at creation only."""
        engine = EffectEngine()
        creature = make_creature()

        engine.add_effect(creature, effect(stat_effect={"physical_attack": 5}))
        assert creature.battle_stats.physical_attack == 25

        result = engine.tick([creature], Side.PLAYER)
        assert result.creatures[0].battle_stats.physical_attack == 25

    def test_zero_duration_only_applies_stats(self):
        """Test that an effect without duration is not kept."""
        engine = EffectEngine()
        creature = make_creature()

        engine.add_effect(creature, effect(duration=0, stat_effect={"magical_attack": 3}))

        assert creature.active_effects == []
        assert creature.battle_stats.magical_attack == 13

    def test_health_clamped_after_max_health_drop(self):
        """Test health stays within the new maximum."""
        engine = EffectEngine()
        creature = make_creature()

        engine.add_effect(creature, effect(stat_effect={"max_health": -40}))

        assert creature.current_health == 60

    def test_unknown_stat_is_ignored(self):
        """Test that deltas for unknown stats change nothing."""
        engine = EffectEngine()
        creature = make_creature()
        before = creature.battle_stats

        engine.add_effect(creature, effect(stat_effect={"luck": 4}))

        assert creature.battle_stats == before


class TestDefend:
    """Tests for the defensive stance."""

    def test_defend_boosts_defenses(self):
        """Test the 50% defense boost and the Defending effect."""
        engine = EffectEngine()
        creature = make_creature(physical_defense=10, magical_defense=7)

        updated = engine.defend(creature)

        assert updated.is_defending
        assert updated.battle_stats.physical_defense == 15
        # 7 * 1.5 = 10.5 rounds up
        assert updated.battle_stats.magical_defense == 11
        assert [e.name for e in updated.active_effects] == ["Defending"]
        assert updated.active_effects[0].duration == 1
        assert not creature.is_defending

    def test_defending_ends_on_tick(self):
        """Test that one tick ends the stance."""
        engine = EffectEngine()
        updated = engine.defend(make_creature("c1", "Guardian"))

        result = engine.tick([updated], Side.PLAYER)

        ticked = result.creatures[0]
        assert not ticked.is_defending
        assert ticked.active_effects == []
        assert "Guardian is no longer defending." in result.messages

    def test_defend_missing_creature(self):
        """Test that defending nothing returns nothing."""
        assert EffectEngine().defend(None) is None


class TestTick:
    """Tests for advancing effects."""

    def test_creatures_without_effects_are_unchanged(self):
        """Test that ticking a quiet field is a no-op."""
        engine = EffectEngine()
        creature = make_creature()

        first = engine.tick([creature], Side.PLAYER)
        second = engine.tick(first.creatures, Side.PLAYER)

        assert first.creatures[0] is creature
        assert second.creatures[0] is creature
        assert first.messages == []
        assert second.messages == []

    def test_duration_decrements_by_one(self):
        """Test every tick removes exactly one turn."""
        engine = EffectEngine()
        creature = make_creature()
        engine.add_effect(creature, effect(duration=3))

        result = engine.tick([creature], Side.PLAYER)

        assert result.creatures[0].active_effects[0].duration == 2
        assert creature.active_effects[0].duration == 3

    def test_expired_effects_are_removed(self):
        """Test the worn-off message and removal."""
        engine = EffectEngine()
        creature = make_creature("c1", "Emberfox")
        engine.add_effect(creature, effect(name="Blessing", duration=1))

        result = engine.tick([creature], Side.ENEMY)

        assert result.creatures[0].active_effects == []
        assert "Blessing effect on enemy Emberfox has worn off." in result.messages

    def test_remaining_effects_keep_positive_duration(self):
        """Test that no effect is left with zero duration."""
        engine = EffectEngine()
        creature = make_creature()
        outcome = engine.apply_tool(
            creature, ToolRecord(id="t1", name="Shell", item_type="stamina", effect_kind="shield")
        )

        current = [outcome.creature]
        for _ in range(4):
            current = engine.tick(current, Side.PLAYER).creatures
            assert all(e.duration >= 1 for c in current for e in c.active_effects)

        assert current[0].active_effects == []

    def test_heal_over_time_is_clamped(self):
        """Test per-tick healing never exceeds max health."""
        engine = EffectEngine()
        creature = make_creature("c1", "Mossback", health=95)
        engine.add_effect(creature, effect(name="Regrowth", health_effect=10))

        result = engine.tick([creature], Side.PLAYER)

        assert result.creatures[0].current_health == 100
        assert "Mossback healed for 10 health from Regrowth." in result.messages

    def test_damage_over_time_defeats_creature(self):
        """Test that creatures reaching 0 health are removed and counted."""
        engine = EffectEngine()
        creature = make_creature("c1", "Gloomcap", health=5)
        engine.add_effect(creature, effect(name="Blight", health_effect=-10))

        result = engine.tick([creature], Side.ENEMY)

        assert result.creatures == []
        assert [c.id for c in result.defeated] == ["c1"]
        assert result.defeated[0].current_health == 0
        assert "1 enemy creatures were defeated!" in result.messages

    def test_prepared_strike_lands_on_expiry(self):
        """Test that a charge spell deals its damage when it expires."""
        engine = EffectEngine()
        caster = make_creature("c", "Caster")
        target = make_creature("t", "Target")
        outcome = engine.apply_spell(
            caster, target, SpellRecord(id="s1", name="Overload", item_type="magic", effect_kind="charge")
        )
        assert outcome.target.current_health == 100

        result = engine.tick([outcome.target], Side.PLAYER)

        assert result.creatures[0].current_health == 75
        assert "Charging unleashed on Target for 25 damage!" in result.messages

    def test_prepare_effect_shape(self):
        """Test effect built from a prepare payload."""
        prepared = effect(duration=2, prepare=PrepareEffect(name="Charging", turns=1, damage=5))
        creature = make_creature()
        engine = EffectEngine()
        engine.add_effect(creature, prepared)

        first = engine.tick([creature], Side.PLAYER)
        assert first.creatures[0].current_health == 100
        second = engine.tick(first.creatures, Side.PLAYER)
        assert second.creatures[0].current_health == 95


class TestEffectIds:
    """Tests for effect id generation."""

    def test_ids_are_unique_and_repeatable(self):
        """Test that two engines generate the same id sequence."""
        ids = []
        for _ in range(2):
            engine = EffectEngine()
            first = engine.defend(make_creature())
            second = engine.defend(make_creature())
            ids.append((first.active_effects[0].id, second.active_effects[0].id))

        assert ids[0] == ids[1]
        assert ids[0][0] != ids[0][1]


class TestCreatureLabel:
    """Tests for log labels."""

    def test_labels(self):
        """Test enemy prefixes."""
        creature = make_creature("c1", "Duneviper")
        assert creature_label(creature, Side.PLAYER) == "Duneviper"
        assert creature_label(creature, Side.ENEMY) == "Enemy Duneviper"
        assert creature_label(creature, Side.ENEMY, capitalize=False) == "enemy Duneviper"
