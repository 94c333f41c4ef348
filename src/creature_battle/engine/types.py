"""Type definitions for the battle engine."""

import copy
import dataclasses
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

from ..models.enums import AttackType, BattlePhase, Difficulty, IntentKind, Rarity, Side
from ..models.records import SpellRecord, ToolRecord

if TYPE_CHECKING:
    from .logging import LogEntry


@dataclass
class BaseAttributes:
    """The five base attributes every derived stat is computed from."""

    energy: int = 0
    strength: int = 0
    magic: int = 0
    stamina: int = 0
    speed: int = 0

    def total(self) -> int:
        """Sum of all base attributes."""
        return self.energy + self.strength + self.magic + self.stamina + self.speed


@dataclass
class BattleStats:
    """Combat-usable stats derived from base attributes."""

    physical_attack: int
    magical_attack: int
    physical_defense: int
    magical_defense: int
    max_health: int
    initiative: int
    critical_chance: float
    dodge_chance: float
    energy_cost: int

    def apply_delta(self, stat: str, delta: float) -> None:
        """Add a delta to a stat by name. Unknown stat names are ignored."""
        if not hasattr(self, stat):
            return
        current = getattr(self, stat)
        setattr(self, stat, current + delta)

    @property
    def strongest_attack(self) -> int:
        return max(self.physical_attack, self.magical_attack)


@dataclass
class ChargeEffect:
    """Charge-up record left by a Charge tool."""

    target_stat: str | None
    per_turn_bonus: int
    max_turns: int


@dataclass
class PrepareEffect:
    """Delayed damage left by a Charge spell; lands when the effect expires."""

    name: str
    turns: int
    damage: int


@dataclass
class ActiveEffect:
    """A timed status effect attached to a creature.

    stat_effect is applied once when the effect is created and never again;
    health_effect is applied on every tick while the effect is active.
    """

    id: str
    name: str
    icon: str
    kind: str
    description: str
    duration: int
    stat_effect: dict[str, int] = field(default_factory=dict)
    health_effect: int = 0
    charge: ChargeEffect | None = None
    prepare: PrepareEffect | None = None


@dataclass
class Creature:
    """In-battle representation of a creature."""

    id: str
    species_id: str | None
    species_name: str
    rarity: Rarity
    form: int
    combination_level: int
    stats: BaseAttributes
    battle_stats: BattleStats
    current_health: int
    active_effects: list[ActiveEffect] = field(default_factory=list)
    is_defending: bool = False

    def is_alive(self) -> bool:
        """Check if the creature still has health left."""
        return self.current_health > 0

    @property
    def health_fraction(self) -> float:
        if self.battle_stats.max_health <= 0:
            return 0.0
        return self.current_health / self.battle_stats.max_health

    def apply_damage(self, amount: int) -> int:
        """Apply damage, clamped at 0. Returns actual damage dealt."""
        actual = min(self.current_health, max(0, amount))
        self.current_health -= actual
        return actual

    def apply_heal(self, amount: int) -> int:
        """Apply healing, clamped at max health. Returns actual health restored."""
        actual = max(0, min(self.battle_stats.max_health - self.current_health, amount))
        self.current_health += actual
        return actual

    def clamp_health(self) -> None:
        """Force current health back into [0, max_health]."""
        self.current_health = min(self.battle_stats.max_health, max(0, self.current_health))


@dataclass
class SideState:
    """Deck, hand, field, energy and inventories of one side."""

    # "field" shadows dataclasses.field inside this class body
    deck: list[Creature] = dataclasses.field(default_factory=list)
    hand: list[Creature] = dataclasses.field(default_factory=list)
    field: list[Creature] = dataclasses.field(default_factory=list)
    energy: int = 0
    tools: list[ToolRecord] = dataclasses.field(default_factory=list)
    spells: list[SpellRecord] = dataclasses.field(default_factory=list)

    def find_in_hand(self, creature_id: str | None) -> Creature | None:
        return next((c for c in self.hand if c.id == creature_id), None)

    def find_on_field(self, creature_id: str | None) -> Creature | None:
        return next((c for c in self.field if c.id == creature_id), None)

    def find_tool(self, tool_id: str | None) -> ToolRecord | None:
        return next((t for t in self.tools if t.id == tool_id), None)

    def find_spell(self, spell_id: str | None) -> SpellRecord | None:
        return next((s for s in self.spells if s.id == spell_id), None)

    def replace_on_field(self, creature: Creature) -> None:
        """Swap in an updated copy of a field creature (matched by id)."""
        self.field = [creature if c.id == creature.id else c for c in self.field]

    def remove_defeated(self) -> list[Creature]:
        """Remove field creatures with no health left. Returns the removed ones."""
        defeated = [c for c in self.field if not c.is_alive()]
        if defeated:
            self.field = [c for c in self.field if c.is_alive()]
        return defeated

    def is_exhausted(self) -> bool:
        """True when field, hand and deck are all empty."""
        return not self.field and not self.hand and not self.deck

    def creature_count(self) -> int:
        return len(self.deck) + len(self.hand) + len(self.field)


@dataclass
class BattleState:
    """Canonical battle state. Transitions produce a new copy per action."""

    phase: BattlePhase = BattlePhase.SETUP
    difficulty: Difficulty = Difficulty.MEDIUM
    turn: int = 1
    active_side: Side = Side.PLAYER
    player: SideState = field(default_factory=SideState)
    enemy: SideState = field(default_factory=SideState)
    log: list["LogEntry"] = field(default_factory=list)
    enemies_defeated: int = 0
    player_creatures_lost: int = 0

    def side(self, side: Side) -> SideState:
        """Get the state of one side."""
        return self.player if side is Side.PLAYER else self.enemy

    def clone(self) -> "BattleState":
        """Deep copy used as the starting point of every transition."""
        return copy.deepcopy(self)

    @property
    def is_over(self) -> bool:
        return self.phase in (BattlePhase.VICTORY, BattlePhase.DEFEAT)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for rendering collaborators."""

        def side_dict(side: SideState) -> dict[str, Any]:
            return {
                "deck": [asdict(c) for c in side.deck],
                "hand": [asdict(c) for c in side.hand],
                "field": [asdict(c) for c in side.field],
                "energy": side.energy,
                "tools": [t.model_dump(mode="json") for t in side.tools],
                "spells": [s.model_dump(mode="json") for s in side.spells],
            }

        return {
            "phase": self.phase.value,
            "difficulty": self.difficulty.value,
            "turn": self.turn,
            "active_side": self.active_side.value,
            "player": side_dict(self.player),
            "enemy": side_dict(self.enemy),
            "enemies_defeated": self.enemies_defeated,
            "player_creatures_lost": self.player_creatures_lost,
            "log": [entry.to_dict() for entry in self.log],
        }


@dataclass
class Intent:
    """A discrete action requested by either side."""

    kind: IntentKind
    source_id: str | None = None
    target_id: str | None = None
    tool_id: str | None = None
    spell_id: str | None = None

    @classmethod
    def deploy(cls, creature: Creature) -> "Intent":
        return cls(kind=IntentKind.DEPLOY, source_id=creature.id)

    @classmethod
    def attack(cls, attacker: Creature, target: Creature) -> "Intent":
        return cls(kind=IntentKind.ATTACK, source_id=attacker.id, target_id=target.id)

    @classmethod
    def defend(cls, creature: Creature) -> "Intent":
        return cls(kind=IntentKind.DEFEND, source_id=creature.id)

    @classmethod
    def end_turn(cls) -> "Intent":
        return cls(kind=IntentKind.END_TURN)


@dataclass
class EffectPayload:
    """Concrete numeric effect produced by the item effect resolver."""

    stat_changes: dict[str, int] = field(default_factory=dict)
    health_change: int = 0  # Tool healing applied immediately and every tick
    healing: int = 0  # Spell healing applied once to the target
    damage: int = 0  # Spell damage applied once to the target
    self_heal: int = 0  # Spell healing applied once to the caster
    energy_gain: int = 0  # Energy granted to the caster's side
    health_over_time: int = 0  # Per-tick health delta of a spell effect
    duration: int = 0
    charge: ChargeEffect | None = None
    prepare: PrepareEffect | None = None

    def is_empty(self) -> bool:
        """True when the payload changes nothing."""
        return self == EffectPayload()


@dataclass
class DamageResult:
    """Outcome of the damage roll for one attack."""

    damage: int
    is_dodged: bool = False
    is_critical: bool = False
    effectiveness: str = "normal"
    multiplier: float = 1.0


@dataclass
class AttackResult:
    """Result of resolving one attack."""

    updated_attacker: Creature | None
    updated_defender: Creature | None
    message: str
    damage_result: DamageResult
    attack_type: AttackType | None = None


@dataclass
class BattleSummary:
    """Terminal result reported on Victory or Defeat."""

    outcome: BattlePhase
    turns_elapsed: int
    remaining_player_creatures: int
    enemies_defeated: int
    reward_multiplier: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "turns_elapsed": self.turns_elapsed,
            "remaining_player_creatures": self.remaining_player_creatures,
            "enemies_defeated": self.enemies_defeated,
            "reward_multiplier": self.reward_multiplier,
        }
