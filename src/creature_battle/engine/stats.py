"""Stat derivation and creature normalization."""

import logging
import math
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from ..models.enums import Rarity
from ..models.records import BaseAttributesRecord, CreatureRecord
from .types import BaseAttributes, BattleStats, Creature

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up."""
    return math.floor(value + 0.5)


def default_battle_stats() -> BattleStats:
    """Stat bundle used when a creature has no base attributes."""
    return BattleStats(
        physical_attack=10,
        magical_attack=10,
        physical_defense=5,
        magical_defense=5,
        max_health=50,
        initiative=10,
        critical_chance=5,
        dodge_chance=3,
        energy_cost=3,
    )


def rarity_multiplier(rarity: Rarity | None) -> float:
    match rarity:
        case Rarity.LEGENDARY:
            return 1.3
        case Rarity.EPIC:
            return 1.2
        case Rarity.RARE:
            return 1.1
        case _:
            return 1.0


def form_multiplier(form: int | None) -> float:
    """Form 0 = 1.0x, form 3 = 1.75x."""
    return 1 + 0.25 * (form or 0)


def combination_bonus(combination_level: int | None) -> float:
    """+10% per combination level."""
    return 1 + 0.1 * (combination_level or 0)


def derive_battle_stats(
    attributes: BaseAttributes | None,
    rarity: Rarity | None = None,
    form: int | None = 0,
    combination_level: int | None = 0,
) -> BattleStats:
    """Compute combat stats from base attributes.

    Args:
        attributes: Base attributes, or None when unknown
        rarity: Rarity tier (affects max health only)
        form: Evolution tier 0-3
        combination_level: Combination bonus tier

    Returns:
        Derived BattleStats. Missing attributes yield the default bundle.
    """
    if attributes is None:
        return default_battle_stats()

    energy = attributes.energy
    strength = attributes.strength
    magic = attributes.magic
    stamina = attributes.stamina
    speed = attributes.speed

    rarity_mult = rarity_multiplier(rarity)
    form_mult = form_multiplier(form)
    combo = combination_bonus(combination_level)

    return BattleStats(
        physical_attack=round_half_up((10 + strength * 2 + speed * 0.5) * form_mult * combo),
        magical_attack=round_half_up((10 + magic * 2 + energy * 0.5) * form_mult * combo),
        physical_defense=round_half_up((5 + stamina * 1.5 + strength * 0.5) * form_mult * combo),
        magical_defense=round_half_up((5 + energy * 1.5 + magic * 0.5) * form_mult * combo),
        max_health=round_half_up((50 + stamina * 3 + energy) * rarity_mult * form_mult),
        initiative=round_half_up(10 + speed * 2),
        critical_chance=min(5 + speed * 0.5, 30),
        dodge_chance=min(3 + speed * 0.3, 20),
        energy_cost=max(1, round_half_up(10 - energy * 0.2)),
    )


def recalculate_battle_stats(creature: Creature) -> BattleStats:
    """Recalculate derived stats after buffs.

    Buff deltas already live in battle_stats, so this returns them unchanged.
    """
    return creature.battle_stats


def _to_attributes(record: BaseAttributesRecord | None) -> BaseAttributes | None:
    if record is None:
        return None
    return BaseAttributes(
        energy=record.energy,
        strength=record.strength,
        magic=record.magic,
        stamina=record.stamina,
        speed=record.speed,
    )


def build_creature(record: CreatureRecord) -> Creature:
    """Turn a validated record into a battle-ready creature at full health."""
    attributes = _to_attributes(record.stats)
    battle_stats = derive_battle_stats(attributes, record.rarity, record.form, record.combination_level)
    return Creature(
        id=record.id,
        species_id=record.species_id,
        species_name=record.display_name,
        rarity=record.rarity,
        form=record.form,
        combination_level=record.combination_level,
        stats=attributes or BaseAttributes(),
        battle_stats=battle_stats,
        current_health=battle_stats.max_health,
    )


def build_roster(records: Iterable[CreatureRecord | dict[str, Any]]) -> list[Creature]:
    """Validate and normalize a roster. Records without an id are skipped."""
    creatures: list[Creature] = []
    for raw in records:
        try:
            record = raw if isinstance(raw, CreatureRecord) else CreatureRecord.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping malformed creature record %r: %s", raw, exc.errors()[0]["msg"])
            continue
        creatures.append(build_creature(record))
    return creatures
