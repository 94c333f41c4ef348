"""Tests for boundary record parsing."""

import pytest
from pydantic import ValidationError

from creature_battle.models.enums import AttributeFamily, EffectKind, IntentKind, Rarity
from creature_battle.models.records import (
    MAX_ATTRIBUTE,
    MAX_COMBINATION_LEVEL,
    CreatureRecord,
    IntentRecord,
    SpellRecord,
    ToolRecord,
)


class TestCreatureRecord:
    """Tests for CreatureRecord."""

    def test_camel_case_aliases(self):
        """Test collaborator key names."""
        record = CreatureRecord.model_validate(
            {"id": 7, "speciesId": "emberfox", "speciesName": "Emberfox", "combinationLevel": 2}
        )

        assert record.id == "7"
        assert record.species_id == "emberfox"
        assert record.species_name == "Emberfox"
        assert record.combination_level == 2

    def test_lenient_values(self):
        """Test that bad values fall back instead of failing."""
        record = CreatureRecord.model_validate(
            {"id": "c1", "rarity": "mythic", "form": 9, "stats": "broken", "combinationLevel": -1}
        )

        assert record.rarity == Rarity.COMMON
        assert record.form == 3
        assert record.stats is None
        assert record.combination_level == 0

    def test_stat_coercion(self):
        """Test attribute coercion."""
        record = CreatureRecord.model_validate({"id": "c1", "stats": {"energy": "6", "strength": -2, "magic": None}})

        assert record.stats.energy == 6
        assert record.stats.strength == 0
        assert record.stats.magic == 0

    def test_display_name_fallbacks(self):
        """Test the name used in log lines."""
        assert CreatureRecord(id="c1").display_name == "c1"
        assert CreatureRecord(id="c1", species_id="mossback").display_name == "mossback"
        assert CreatureRecord.model_validate({"id": "c1", "name": "Moss"}).display_name == "Moss"

    def test_missing_id_is_rejected(self):
        """Test that an id is required."""
        with pytest.raises(ValidationError):
            CreatureRecord.model_validate({"speciesName": "Nobody"})


class TestItemRecords:
    """Tests for tool and spell records."""

    def test_tool_aliases(self):
        """Test tool key names."""
        tool = ToolRecord.model_validate({"id": 3, "name": "Shell", "tool_type": "Stamina", "tool_effect": "shield"})

        assert tool.id == "3"
        assert tool.item_type == AttributeFamily.STAMINA
        assert tool.effect_kind == EffectKind.SHIELD

    def test_spell_aliases(self):
        """Test spell key names."""
        spell = SpellRecord.model_validate({"id": "s1", "spell_type": "magic", "spell_effect": "Echo"})

        assert spell.name == "Unknown item"
        assert spell.item_type == AttributeFamily.MAGIC
        assert spell.effect_kind == EffectKind.ECHO

    def test_unknown_effect_and_type(self):
        """Test closed-set fallbacks."""
        tool = ToolRecord.model_validate({"id": "t1", "type": "luck", "effect": "teleport"})

        assert tool.item_type is None
        assert tool.effect_kind == EffectKind.DEFAULT


class TestIntentRecord:
    """Tests for IntentRecord."""

    def test_camel_case_keys(self):
        """Test the UI collaborator's key names."""
        record = IntentRecord.model_validate(
            {"kind": "useSpell", "sourceCreatureId": 1, "targetCreatureId": "e1", "spellId": "s1"}
        )

        assert record.kind == IntentKind.USE_SPELL
        assert record.source_creature_id == "1"
        assert record.target_creature_id == "e1"
        assert record.spell_id == "s1"
        assert record.tool_id is None

    def test_unknown_kind_is_rejected(self):
        """Test that intent kinds form a closed set."""
        with pytest.raises(ValidationError):
            IntentRecord.model_validate({"kind": "flee"})


class TestNumericEdges:
    """Tests for non-finite and oversized numbers."""

    @pytest.mark.parametrize("value", ["inf", float("inf"), float("-inf"), "nan", float("nan"), 10**400])
    def test_non_finite_values_fall_back(self, value):
        """Test that unrepresentable numbers become defaults."""
        record = CreatureRecord.model_validate(
            {"id": "c1", "form": value, "combinationLevel": value, "stats": {"strength": value}}
        )

        assert record.form == 0
        assert record.combination_level == 0
        assert record.stats.strength == 0

    def test_huge_values_are_clamped(self):
        """Test the attribute and combination ceilings."""
        record = CreatureRecord.model_validate(
            {"id": "c1", "form": 1e308, "combinationLevel": 1e308, "stats": {"strength": 1e308, "speed": "1e308"}}
        )

        assert record.form == 3
        assert record.combination_level == MAX_COMBINATION_LEVEL
        assert record.stats.strength == MAX_ATTRIBUTE
        assert record.stats.speed == MAX_ATTRIBUTE
