"""Item effect resolver - turns tool/spell descriptors into effect payloads."""

from ..models.enums import AttributeFamily, EffectKind
from ..models.records import SpellRecord, ToolRecord
from .stats import round_half_up
from .types import ChargeEffect, EffectPayload, PrepareEffect

TOOL_DURATION = 3
SPELL_DURATION = 2

# Base tool effects by the attribute family the tool targets
TOOL_BASE_EFFECTS: dict[AttributeFamily, EffectPayload] = {
    AttributeFamily.ENERGY: EffectPayload(stat_changes={"energy_cost": -1}, duration=TOOL_DURATION),
    AttributeFamily.STRENGTH: EffectPayload(stat_changes={"physical_attack": 5}, duration=TOOL_DURATION),
    AttributeFamily.MAGIC: EffectPayload(stat_changes={"magical_attack": 5}, duration=TOOL_DURATION),
    AttributeFamily.STAMINA: EffectPayload(
        stat_changes={"physical_defense": 5},
        health_change=10,
        duration=TOOL_DURATION,
    ),
    AttributeFamily.SPEED: EffectPayload(
        stat_changes={"initiative": 5, "dodge_chance": 3},
        duration=TOOL_DURATION,
    ),
}


def magic_power(caster_magic: int | None) -> float:
    """Spell scaling factor: +10% per magic point."""
    return 1 + 0.1 * (caster_magic or 0)


def _scaled(deltas: dict[str, int], factor: float) -> dict[str, int]:
    return {stat: round_half_up(value * factor) for stat, value in deltas.items()}


def _tool_base_effect(item_type: AttributeFamily | None) -> EffectPayload:
    base = TOOL_BASE_EFFECTS.get(item_type) if item_type is not None else None
    if base is None:
        return EffectPayload(duration=TOOL_DURATION)
    return EffectPayload(
        stat_changes=dict(base.stat_changes),
        health_change=base.health_change,
        duration=base.duration,
    )


def resolve_tool_effect(tool: ToolRecord | None) -> EffectPayload:
    """Resolve the effect a tool has when applied to a creature.

    Args:
        tool: Tool descriptor, may be None

    Returns:
        EffectPayload. A missing tool yields an empty payload.
    """
    if tool is None:
        return EffectPayload()

    base = _tool_base_effect(tool.item_type)

    match tool.effect_kind:
        case EffectKind.SURGE:
            # Stronger but shorter
            return EffectPayload(
                stat_changes=_scaled(base.stat_changes, 2),
                health_change=base.health_change,
                duration=1,
            )
        case EffectKind.SHIELD:
            return EffectPayload(
                stat_changes={"physical_defense": 8, "magical_defense": 8},
                duration=3,
            )
        case EffectKind.ECHO:
            # Weaker but lasts longer
            return EffectPayload(
                stat_changes=_scaled(base.stat_changes, 0.7),
                health_change=base.health_change,
                duration=5,
            )
        case EffectKind.DRAIN:
            # Converts defense into attack
            return EffectPayload(
                stat_changes={
                    "physical_attack": 7,
                    "magical_attack": 7,
                    "physical_defense": -3,
                    "magical_defense": -3,
                },
                duration=3,
            )
        case EffectKind.CHARGE:
            target_stat = next(iter(base.stat_changes), None)
            return EffectPayload(
                charge=ChargeEffect(target_stat=target_stat, per_turn_bonus=3, max_turns=3),
                duration=3,
            )
        case _:
            return base


def _spell_base_effect(item_type: AttributeFamily | None, power: float) -> EffectPayload:
    match item_type:
        case AttributeFamily.ENERGY:
            return EffectPayload(stat_changes={"energy_cost": -2}, energy_gain=5, duration=SPELL_DURATION)
        case AttributeFamily.STRENGTH:
            return EffectPayload(
                damage=round_half_up(15 * power),
                stat_changes={"physical_attack": 7},
                duration=SPELL_DURATION,
            )
        case AttributeFamily.MAGIC:
            return EffectPayload(
                stat_changes={"magical_attack": 7, "magical_defense": 3},
                duration=SPELL_DURATION,
            )
        case AttributeFamily.STAMINA:
            return EffectPayload(
                healing=round_half_up(20 * power),
                stat_changes={"physical_defense": 5},
                duration=SPELL_DURATION,
            )
        case AttributeFamily.SPEED:
            return EffectPayload(
                stat_changes={"initiative": 7, "dodge_chance": 5, "critical_chance": 5},
                duration=SPELL_DURATION,
            )
        case _:
            return EffectPayload(duration=SPELL_DURATION)


def resolve_spell_effect(spell: SpellRecord | None, caster_magic: int | None = 5) -> EffectPayload:
    """Resolve the effect of a spell cast by a creature.

    Damage and healing scale with magic_power = 1 + 0.1 * caster_magic.

    Args:
        spell: Spell descriptor, may be None
        caster_magic: Magic attribute of the casting creature

    Returns:
        EffectPayload. A missing spell yields an empty payload.
    """
    if spell is None:
        return EffectPayload()

    power = magic_power(caster_magic)
    base = _spell_base_effect(spell.item_type, power)

    match spell.effect_kind:
        case EffectKind.SURGE:
            return EffectPayload(damage=base.damage * 2, duration=0)
        case EffectKind.SHIELD:
            return EffectPayload(
                stat_changes={"physical_defense": 10, "magical_defense": 10},
                healing=round_half_up(10 * power),
                duration=2,
            )
        case EffectKind.ECHO:
            # Healing or damage spread over three ticks
            if base.healing:
                per_tick = round_half_up(base.healing / 3 * power)
            elif base.damage:
                per_tick = round_half_up(-(base.damage / 3) * power)
            else:
                per_tick = 0
            return EffectPayload(health_over_time=per_tick, duration=3)
        case EffectKind.DRAIN:
            return EffectPayload(
                damage=round_half_up(12 * power),
                self_heal=round_half_up(6 * power),
                duration=0,
            )
        case EffectKind.CHARGE:
            return EffectPayload(
                prepare=PrepareEffect(name="Charging", turns=1, damage=round_half_up(25 * power)),
                duration=1,
            )
        case _:
            return base
