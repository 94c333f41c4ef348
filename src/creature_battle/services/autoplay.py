"""Auto-play service - drives the player side with the AI for simulations."""

import logging
from collections.abc import Iterable
from typing import Any

from ..config import Settings, get_settings
from ..engine.ai import AIDecisionEngine
from ..engine.battle import BattleEngine, BattleResult, CreatureInput, normalize_creatures
from ..engine.difficulty import get_profile
from ..engine.items import resolve_spell_effect
from ..engine.rng import BattleRandom
from ..engine.types import Intent
from ..models.enums import Difficulty, IntentKind
from ..models.records import SpellRecord, ToolRecord
from .enemies import EnemyGenerator

logger = logging.getLogger(__name__)

# Actions the simulated player takes before ending a turn
MAX_ACTIONS_PER_TURN = 3


class AutoPlayer:
    """Plays a whole battle with the AI deciding for both sides.

    The enemy roster and every random draw share one seeded random source, so
    the same seed and inputs always produce the same battle.
    """

    def __init__(
        self,
        seed: int | str | None = None,
        settings: Settings | None = None,
        player_policy: Difficulty = Difficulty.MEDIUM,
    ) -> None:
        self.settings = settings or get_settings()
        self.rng = BattleRandom(seed if seed is not None else self.settings.rng_seed)
        self.engine = BattleEngine(rng=self.rng, settings=self.settings)
        self.generator = EnemyGenerator(self.rng)
        self.policy = AIDecisionEngine(self.rng)
        self.player_policy = player_policy

    def play(
        self,
        player_creatures: Iterable[CreatureInput],
        difficulty: Difficulty | str | None = None,
        tools: Iterable[ToolRecord | dict[str, Any]] = (),
        spells: Iterable[SpellRecord | dict[str, Any]] = (),
        enemy_count: int | None = None,
    ) -> BattleResult:
        """Run a battle to completion or until the turn limit.

        Args:
            player_creatures: Player roster
            difficulty: Battle difficulty
            tools: Player tools
            spells: Player spells
            enemy_count: Enemy roster size (defaults to the difficulty's deck size)

        Returns:
            BattleResult with the final state; success is True when the
            battle reached Victory or Defeat
        """
        profile = get_profile(difficulty if difficulty is not None else self.settings.default_difficulty)
        players = normalize_creatures(player_creatures)
        enemies = self.generator.generate_roster(
            profile.difficulty,
            enemy_count if enemy_count is not None else profile.deck_size,
            players,
        )

        started = self.engine.start_battle(players, enemies, profile.difficulty, tools, spells)
        if not started.success:
            return started

        while not self.engine.state.is_over and self.engine.state.turn <= self.settings.autoplay_max_turns:
            self.play_turn()

        state = self.engine.state
        if not state.is_over:
            logger.info("Auto-play stopped at the turn limit (%d)", self.settings.autoplay_max_turns)
            return BattleResult(
                success=False,
                message=f"Turn limit reached after {state.turn - 1} turns",
                state=state,
            )

        return BattleResult(
            success=True,
            message=state.log[-1].message,
            state=state,
            summary=self.engine.summary(),
        )

    def play_turn(self) -> None:
        """Take up to MAX_ACTIONS_PER_TURN player actions, then end the turn."""
        for _ in range(MAX_ACTIONS_PER_TURN):
            if self.engine.state.is_over:
                return
            intent = self._next_intent()
            if intent.kind is IntentKind.END_TURN:
                break
            result = self.engine.submit_intent(intent)
            if not result.success:
                logger.debug("Simulated player intent rejected: %s", result.message)
                break

        if not self.engine.state.is_over:
            self.engine.submit_intent(Intent.end_turn())

    def _next_intent(self) -> Intent:
        """Use an item when one fits, otherwise ask the AI policy."""
        state = self.engine.state
        own = state.player
        opponent = state.enemy

        if own.field and own.tools:
            weakest = min(own.field, key=lambda c: c.health_fraction)
            return Intent(kind=IntentKind.USE_TOOL, source_id=weakest.id, tool_id=own.tools[0].id)

        if own.field and own.spells and own.energy >= self.settings.spell_energy_cost:
            spell = own.spells[0]
            caster = max(own.field, key=lambda c: c.stats.magic)
            payload = resolve_spell_effect(spell, caster.stats.magic)
            target = caster
            if payload.damage and opponent.field:
                target = min(opponent.field, key=lambda c: c.current_health)
            return Intent(kind=IntentKind.USE_SPELL, source_id=caster.id, target_id=target.id, spell_id=spell.id)

        return self.policy.decide(self.player_policy, own.hand, own.field, opponent.field, own.energy)
