"""Battle engine - orchestrates a battle from setup to outcome."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from pydantic import ValidationError

from ..config import Settings, get_settings
from ..models.enums import BattlePhase, Difficulty, IntentKind, Side
from ..models.records import CreatureRecord, IntentRecord, SpellRecord, ToolRecord
from .difficulty import get_profile
from .logging import BattleLog
from .rng import BattleRandom
from .stats import build_roster
from .turn import TurnResolver
from .types import BattleState, BattleSummary, Creature, Intent

logger = logging.getLogger(__name__)

CreatureInput = Creature | CreatureRecord | dict[str, Any]


@dataclass
class BattleResult:
    """Result of a battle operation."""

    success: bool
    message: str
    state: BattleState | None = None
    summary: BattleSummary | None = None


def intent_from_record(record: IntentRecord) -> Intent:
    """Convert a validated boundary record into an engine intent."""
    return Intent(
        kind=record.kind,
        source_id=record.source_creature_id,
        target_id=record.target_creature_id,
        tool_id=record.tool_id,
        spell_id=record.spell_id,
    )


def normalize_creatures(creatures: Iterable[CreatureInput]) -> list[Creature]:
    """Build creatures from records, passing ready creatures through in order."""
    built: list[Creature] = []
    pending: list[CreatureRecord | dict[str, Any]] = []
    for item in creatures:
        if isinstance(item, Creature):
            built.extend(build_roster(pending))
            pending = []
            built.append(item)
        else:
            pending.append(item)
    built.extend(build_roster(pending))
    return _unique_ids(built)


def _unique_ids(creatures: list[Creature]) -> list[Creature]:
    """Re-key repeated creature ids so every card stays addressable."""
    seen: set[str] = set()
    unique: list[Creature] = []
    for creature in creatures:
        new_id = creature.id
        suffix = 2
        while new_id in seen:
            new_id = f"{creature.id}-{suffix}"
            suffix += 1
        if new_id != creature.id:
            logger.warning("Duplicate creature id %r renamed to %r", creature.id, new_id)
            creature = replace(creature, id=new_id)
        seen.add(new_id)
        unique.append(creature)
    return unique


def normalize_items(items: Iterable[Any], model: type[ToolRecord] | type[SpellRecord]) -> list[Any]:
    """Validate tool or spell records, skipping malformed ones."""
    records = []
    for raw in items:
        if isinstance(raw, model):
            records.append(raw)
            continue
        try:
            records.append(model.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed %s %r: %s", model.__name__, raw, exc.errors()[0]["msg"])
    return records


class BattleEngine:
    """Holds the current battle snapshot and routes intents to the turn resolver.

    Each accepted action replaces the snapshot with a new one. While an action
    (including the automatic enemy turn) is being resolved, further intents
    are rejected.
    """

    def __init__(
        self,
        rng: BattleRandom | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rng = rng or BattleRandom(self.settings.rng_seed)
        self.turn_resolver = TurnResolver(self.rng, self.settings)
        self.state = BattleState()
        self._action_in_progress = False

    @property
    def action_in_progress(self) -> bool:
        return self._action_in_progress

    def start_battle(
        self,
        player_creatures: Iterable[CreatureInput],
        enemy_creatures: Iterable[CreatureInput],
        difficulty: Difficulty | str | None = None,
        tools: Iterable[ToolRecord | dict[str, Any]] = (),
        spells: Iterable[SpellRecord | dict[str, Any]] = (),
    ) -> BattleResult:
        """Start a battle from the Setup phase.

        Args:
            player_creatures: Player roster (creatures or raw records)
            enemy_creatures: Enemy roster, usually from EnemyGenerator
            difficulty: Difficulty name; unknown values fall back to medium
            tools: Player tool inventory
            spells: Player spell inventory

        Returns:
            BattleResult with the opening snapshot
        """
        if self._action_in_progress:
            return BattleResult(success=False, message="Another action is in progress", state=self.state)
        if self.state.phase is BattlePhase.IN_BATTLE:
            return BattleResult(success=False, message="Battle already in progress", state=self.state)

        players = normalize_creatures(player_creatures)
        if not players:
            return BattleResult(success=False, message="You need creatures to battle!", state=self.state)
        enemies = normalize_creatures(enemy_creatures)

        if difficulty is None:
            difficulty = self.settings.default_difficulty
        profile = get_profile(difficulty)

        self.state = self.turn_resolver.start_battle(
            players,
            enemies,
            profile.difficulty,
            tools=normalize_items(tools, ToolRecord),
            spells=normalize_items(spells, SpellRecord),
        )
        logger.info(
            "Battle started: difficulty=%s player=%d enemy=%d seed=%r",
            profile.difficulty.value,
            len(players),
            len(enemies),
            self.rng.seed,
        )
        return BattleResult(
            success=True,
            message=self.state.log[0].message,
            state=self.state,
            summary=self.summary(),
        )

    def submit_intent(self, intent: Intent | IntentRecord | dict[str, Any]) -> BattleResult:
        """Submit a player intent.

        EndTurn also runs the enemy turn and the start of the next round
        before returning.

        Args:
            intent: Engine intent, boundary record or raw mapping

        Returns:
            BattleResult; success is False when the intent was rejected
        """
        if self._action_in_progress:
            return BattleResult(success=False, message="Another action is in progress", state=self.state)

        if not isinstance(intent, Intent):
            try:
                record = intent if isinstance(intent, IntentRecord) else IntentRecord.model_validate(intent)
            except ValidationError as exc:
                logger.warning("Malformed intent %r: %s", intent, exc.errors()[0]["msg"])
                self.state = self.turn_resolver.reject(self.state, Side.PLAYER, "Invalid intent").state
                return BattleResult(success=False, message="Invalid intent", state=self.state)
            intent = intent_from_record(record)

        self._action_in_progress = True
        try:
            if intent.kind is IntentKind.END_TURN:
                transition = self.turn_resolver.end_player_turn(self.state)
            else:
                transition = self.turn_resolver.apply_intent(self.state, Side.PLAYER, intent)
            self.state = transition.state
        finally:
            self._action_in_progress = False

        if self.state.is_over:
            logger.info("Battle finished: %s on turn %d", self.state.phase.value, self.state.turn)

        return BattleResult(
            success=transition.accepted,
            message=transition.message,
            state=self.state,
            summary=self.summary(),
        )

    def reset(self) -> BattleResult:
        """Discard the current battle and return to Setup."""
        if self._action_in_progress:
            return BattleResult(success=False, message="Another action is in progress", state=self.state)
        self.state = BattleState()
        return BattleResult(success=True, message="Battle reset", state=self.state)

    def snapshot(self) -> dict[str, Any]:
        """Current state as a plain dictionary."""
        return self.state.to_dict()

    def summary(self) -> BattleSummary | None:
        """Terminal summary, or None while the battle is not over."""
        if not self.state.is_over:
            return None
        return BattleSummary(
            outcome=self.state.phase,
            turns_elapsed=self.state.turn,
            remaining_player_creatures=self.state.player.creature_count(),
            enemies_defeated=self.state.enemies_defeated,
            reward_multiplier=get_profile(self.state.difficulty).reward_multiplier,
        )

    def get_log(self) -> BattleLog:
        """Get the battle log."""
        return BattleLog(entries=list(self.state.log))
