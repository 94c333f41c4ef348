"""Boundary schemas for records supplied by collaborators.

Creature, tool and spell records arrive loosely typed: fields may be missing,
mistyped or use the collaborator's key names. These models accept that input
and normalize it once, so the engine can assume well-formed values.
"""

import math
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .enums import AttributeFamily, EffectKind, IntentKind, Rarity

# Upper bounds keeping derived stats finite
MAX_ATTRIBUTE = 1000
MAX_COMBINATION_LEVEL = 100


def _coerce_int(value: Any, default: int = 0) -> int:
    """Best-effort integer conversion used by lenient validators."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return int(round(number))


class BaseAttributesRecord(BaseModel):
    """Base attribute set of a creature."""

    model_config = ConfigDict(extra="ignore")

    energy: int = Field(default=0, description="Energy attribute")
    strength: int = Field(default=0, description="Strength attribute")
    magic: int = Field(default=0, description="Magic attribute")
    stamina: int = Field(default=0, description="Stamina attribute")
    speed: int = Field(default=0, description="Speed attribute")

    @field_validator("energy", "strength", "magic", "stamina", "speed", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any) -> int:
        return min(MAX_ATTRIBUTE, max(0, _coerce_int(value)))


class CreatureRecord(BaseModel):
    """Owned creature as supplied by the roster collaborator."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(description="Unique creature id")
    species_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("species_id", "speciesId"),
        description="Species reference",
    )
    species_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("species_name", "speciesName", "name"),
        description="Display name of the species",
    )
    rarity: Rarity = Field(default=Rarity.COMMON, description="Rarity tier")
    form: int = Field(default=0, description="Evolution tier, 0-3")
    combination_level: int = Field(
        default=0,
        validation_alias=AliasChoices("combination_level", "combinationLevel"),
        description="Combination bonus tier",
    )
    stats: BaseAttributesRecord | None = Field(default=None, description="Base attributes, if known")

    @field_validator("id", "species_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("rarity", mode="before")
    @classmethod
    def _parse_rarity(cls, value: Any) -> Rarity:
        return Rarity.parse(value)

    @field_validator("form", mode="before")
    @classmethod
    def _clamp_form(cls, value: Any) -> int:
        return min(3, max(0, _coerce_int(value)))

    @field_validator("combination_level", mode="before")
    @classmethod
    def _clamp_combination(cls, value: Any) -> int:
        return min(MAX_COMBINATION_LEVEL, max(0, _coerce_int(value)))

    @field_validator("stats", mode="before")
    @classmethod
    def _drop_malformed_stats(cls, value: Any) -> Any:
        # Anything that is not a mapping counts as "attributes absent"
        if isinstance(value, (dict, BaseAttributesRecord)):
            return value
        return None

    @property
    def display_name(self) -> str:
        return self.species_name or self.species_id or self.id


class ItemRecord(BaseModel):
    """Shared shape of tools and spells."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(description="Unique item id")
    name: str = Field(default="Unknown item", description="Display name")
    item_type: AttributeFamily | None = Field(
        default=None,
        validation_alias=AliasChoices("item_type", "type", "tool_type", "spell_type"),
        description="Attribute family the item targets",
    )
    effect_kind: EffectKind = Field(
        default=EffectKind.DEFAULT,
        validation_alias=AliasChoices("effect_kind", "effectKind", "effect", "tool_effect", "spell_effect"),
        description="Effect variant",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("item_type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> AttributeFamily | None:
        return AttributeFamily.parse(value)

    @field_validator("effect_kind", mode="before")
    @classmethod
    def _parse_kind(cls, value: Any) -> EffectKind:
        return EffectKind.parse(value)


class ToolRecord(ItemRecord):
    """One-time-use tool applied to an own creature."""


class SpellRecord(ItemRecord):
    """One-time-use spell cast by an own creature; scales with caster magic."""


class IntentRecord(BaseModel):
    """Player intent as submitted by the UI collaborator."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    kind: IntentKind = Field(description="Requested action")
    source_creature_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("source_creature_id", "sourceCreatureId"),
    )
    target_creature_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("target_creature_id", "targetCreatureId"),
    )
    tool_id: str | None = Field(default=None, validation_alias=AliasChoices("tool_id", "toolId"))
    spell_id: str | None = Field(default=None, validation_alias=AliasChoices("spell_id", "spellId"))

    @field_validator("source_creature_id", "target_creature_id", "tool_id", "spell_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
