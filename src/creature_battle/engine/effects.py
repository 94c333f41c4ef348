"""Effect engine - applies, ticks and expires status effects."""

import copy
import itertools
import logging
from dataclasses import dataclass, field

from ..models.enums import Side
from ..models.records import SpellRecord, ToolRecord
from .items import resolve_spell_effect, resolve_tool_effect
from .stats import recalculate_battle_stats, round_half_up
from .types import ActiveEffect, Creature, EffectPayload

logger = logging.getLogger(__name__)

DEFEND_MULTIPLIER = 1.5


@dataclass
class TickResult:
    """Result of ticking one field."""

    creatures: list[Creature]
    messages: list[str] = field(default_factory=list)
    defeated: list[Creature] = field(default_factory=list)


@dataclass
class ToolOutcome:
    """Result of applying a tool to a creature."""

    creature: Creature | None
    payload: EffectPayload | None


@dataclass
class SpellOutcome:
    """Result of casting a spell. Caster and target may be the same creature."""

    caster: Creature | None
    target: Creature | None
    payload: EffectPayload | None


def creature_label(creature: Creature, side: Side | None, capitalize: bool = True) -> str:
    """Name used in log lines: enemy creatures are prefixed."""
    if side is Side.ENEMY:
        return f"{'Enemy' if capitalize else 'enemy'} {creature.species_name}"
    return creature.species_name


class EffectEngine:
    """Creates status effects and advances them once per turn boundary."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    def _next_id(self, name: str) -> str:
        return f"{name.lower().replace(' ', '-')}-{next(self._ids)}"

    def add_effect(self, creature: Creature, effect: ActiveEffect) -> None:
        """Attach an effect, applying its stat deltas exactly once.

        Effects with no remaining duration only contribute their stat deltas.
        """
        for stat, delta in effect.stat_effect.items():
            creature.battle_stats.apply_delta(stat, delta)
        if effect.stat_effect:
            creature.battle_stats = recalculate_battle_stats(creature)
            creature.clamp_health()
        if effect.duration > 0:
            creature.active_effects.append(effect)

    def defend(self, creature: Creature | None) -> Creature | None:
        """Put a creature in a defensive stance until the next tick.

        Both defenses rise by 50%; the applied delta is recorded on a
        one-turn "Defending" effect.
        """
        if creature is None:
            return None

        updated = copy.deepcopy(creature)
        updated.is_defending = True

        stats = updated.battle_stats
        boost = {
            "physical_defense": round_half_up(stats.physical_defense * DEFEND_MULTIPLIER) - stats.physical_defense,
            "magical_defense": round_half_up(stats.magical_defense * DEFEND_MULTIPLIER) - stats.magical_defense,
        }
        self.add_effect(
            updated,
            ActiveEffect(
                id=self._next_id("Defending"),
                name="Defending",
                icon="🛡️",
                kind="defense",
                description="Increased defense until next turn",
                duration=1,
                stat_effect=boost,
            ),
        )
        return updated

    def apply_tool(self, creature: Creature | None, tool: ToolRecord | None) -> ToolOutcome:
        """Apply a tool to a creature.

        Args:
            creature: Target creature
            tool: Tool descriptor

        Returns:
            ToolOutcome with an updated copy. Missing input returns the
            creature unchanged and no payload.
        """
        if creature is None or tool is None:
            logger.debug("Tool skipped: creature=%r tool=%r", creature, tool)
            return ToolOutcome(creature=creature, payload=None)

        payload = resolve_tool_effect(tool)
        updated = copy.deepcopy(creature)

        self.add_effect(
            updated,
            ActiveEffect(
                id=self._next_id(tool.name),
                name=tool.name,
                icon="🔧",
                kind=tool.item_type.value if tool.item_type else "tool",
                description=tool.effect_kind.description,
                duration=payload.duration,
                stat_effect=dict(payload.stat_changes),
                health_effect=payload.health_change,
                charge=payload.charge,
            ),
        )

        if payload.health_change > 0:
            updated.apply_heal(payload.health_change)

        return ToolOutcome(creature=updated, payload=payload)

    def apply_spell(
        self,
        caster: Creature | None,
        target: Creature | None,
        spell: SpellRecord | None,
    ) -> SpellOutcome:
        """Cast a spell from caster onto target (the caster when target is None)."""
        if caster is None or spell is None:
            logger.debug("Spell skipped: caster=%r spell=%r", caster, spell)
            return SpellOutcome(caster=caster, target=target, payload=None)

        payload = resolve_spell_effect(spell, caster.stats.magic)

        updated_caster = copy.deepcopy(caster)
        if target is None or target.id == caster.id:
            updated_target = updated_caster
        else:
            updated_target = copy.deepcopy(target)

        if payload.damage:
            updated_target.apply_damage(payload.damage)
        if payload.healing:
            updated_target.apply_heal(payload.healing)
        if payload.self_heal:
            updated_caster.apply_heal(payload.self_heal)

        if payload.duration > 0:
            self.add_effect(
                updated_target,
                ActiveEffect(
                    id=self._next_id(spell.name),
                    name=spell.name,
                    icon="✨",
                    kind=spell.item_type.value if spell.item_type else "spell",
                    description=spell.effect_kind.description,
                    duration=payload.duration,
                    stat_effect=dict(payload.stat_changes),
                    health_effect=payload.health_over_time,
                    prepare=payload.prepare,
                ),
            )

        return SpellOutcome(caster=updated_caster, target=updated_target, payload=payload)

    def tick(self, creatures: list[Creature], side: Side | None = None) -> TickResult:
        """Advance every creature's effects by one turn.

        Per effect: apply health_effect (clamped), decrement duration, drop
        expired effects. Defending ends. Creatures at 0 health are removed.

        Args:
            creatures: Field creatures of one side
            side: Owning side, used for log wording

        Returns:
            TickResult with updated copies of the surviving creatures
        """
        result = TickResult(creatures=[])
        ticked: list[Creature] = []

        for creature in creatures:
            if not creature.active_effects and not creature.is_defending:
                ticked.append(creature)
                continue

            updated = copy.deepcopy(creature)
            name = creature_label(updated, side)
            remaining: list[ActiveEffect] = []

            for effect in updated.active_effects:
                if effect.health_effect:
                    updated.current_health += effect.health_effect
                    updated.clamp_health()
                    if effect.health_effect > 0:
                        result.messages.append(f"{name} healed for {effect.health_effect} health from {effect.name}.")
                    else:
                        result.messages.append(
                            f"{name} took {abs(effect.health_effect)} damage from {effect.name}."
                        )

                effect.duration -= 1
                if effect.duration > 0:
                    remaining.append(effect)
                    continue

                if effect.prepare is not None:
                    dealt = updated.apply_damage(effect.prepare.damage)
                    result.messages.append(f"{effect.prepare.name} unleashed on {name} for {dealt} damage!")
                result.messages.append(
                    f"{effect.name} effect on {creature_label(updated, side, capitalize=False)} has worn off."
                )

            updated.active_effects = remaining

            if updated.is_defending:
                updated.is_defending = False
                result.messages.append(f"{name} is no longer defending.")

            ticked.append(updated)

        result.creatures = [c for c in ticked if c.is_alive()]
        result.defeated = [c for c in ticked if not c.is_alive()]

        if result.defeated:
            count = len(result.defeated)
            if side is Side.ENEMY:
                result.messages.append(f"{count} enemy creatures were defeated!")
            else:
                result.messages.append(f"{count} of your creatures were defeated!")

        return result
