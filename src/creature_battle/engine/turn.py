"""Turn resolver - pure battle state transitions.

Every public method takes a BattleState and returns a new one; the input
snapshot is never mutated.
"""

import copy
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from ..config import Settings, get_settings
from ..models.enums import BattlePhase, Difficulty, IntentKind, Side
from ..models.records import SpellRecord, ToolRecord
from .ai import AIDecisionEngine
from .combat import CombatResolver
from .difficulty import get_profile
from .effects import EffectEngine, creature_label
from .logging import BattleLogger, LogEventType
from .rng import BattleRandom
from .types import BattleState, Creature, Intent

logger = logging.getLogger(__name__)

AI_INTENTS = (IntentKind.DEPLOY, IntentKind.ATTACK, IntentKind.DEFEND)


@dataclass
class Transition:
    """Result of applying one intent."""

    state: BattleState
    accepted: bool
    message: str


class TurnResolver:
    """Applies intents and turn boundaries to battle states."""

    def __init__(self, rng: BattleRandom, settings: Settings | None = None) -> None:
        self.rng = rng
        self.settings = settings or get_settings()
        self.combat = CombatResolver(rng)
        self.effects = EffectEngine()
        self.ai = AIDecisionEngine(rng)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def start_battle(
        self,
        player_creatures: Sequence[Creature],
        enemy_creatures: Sequence[Creature],
        difficulty: Difficulty,
        tools: Sequence[ToolRecord] = (),
        spells: Sequence[SpellRecord] = (),
    ) -> BattleState:
        """Create the opening state: hands dealt, energy filled, player to act."""
        profile = get_profile(difficulty)
        player_deck = copy.deepcopy(list(player_creatures))
        enemy_deck = copy.deepcopy(list(enemy_creatures))
        player_hand_size = self.settings.player_initial_hand_size

        state = BattleState(
            phase=BattlePhase.IN_BATTLE,
            difficulty=profile.difficulty,
            turn=1,
            active_side=Side.PLAYER,
        )
        state.player.hand = player_deck[:player_hand_size]
        state.player.deck = player_deck[player_hand_size:]
        state.player.energy = self.settings.starting_energy
        state.player.tools = copy.deepcopy(list(tools))
        state.player.spells = copy.deepcopy(list(spells))
        state.enemy.hand = enemy_deck[: profile.initial_hand_size]
        state.enemy.deck = enemy_deck[profile.initial_hand_size :]
        state.enemy.energy = self.settings.starting_energy

        log = BattleLogger(state.log)
        log.log(1, f"Battle started! Difficulty: {profile.difficulty.value.capitalize()}", LogEventType.BATTLE_START)
        log.log(1, "Your turn. Select a creature to deploy or take action!", LogEventType.TURN_CHANGE, Side.PLAYER)

        self._check_outcome(state)
        return state

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def apply_intent(self, state: BattleState, side: Side, intent: Intent) -> Transition:
        """Apply one non-EndTurn intent for a side.

        Preconditions are validated first; a rejected intent only appends a
        log line explaining why.

        Args:
            state: Current snapshot
            side: Side submitting the intent
            intent: Requested action

        Returns:
            Transition with the new snapshot
        """
        new_state = state.clone()
        log = BattleLogger(new_state.log)

        if new_state.phase is not BattlePhase.IN_BATTLE:
            reason = f"Cannot act while the battle is {new_state.phase.value}."
        elif new_state.active_side is not side:
            reason = f"It is not the {side.value}'s turn."
        elif intent.kind is IntentKind.END_TURN:
            reason = "End turn must go through the turn boundary."
        else:
            reason = self._perform(new_state, side, intent)

        if reason is not None:
            logger.info("Rejected %s intent for %s: %s", intent.kind.value, side.value, reason)
            log.log(new_state.turn, reason, LogEventType.REJECTED, side)
            return Transition(state=new_state, accepted=False, message=reason)

        self._check_outcome(new_state)
        return Transition(state=new_state, accepted=True, message=new_state.log[-1].message)

    def reject(self, state: BattleState, side: Side, reason: str) -> Transition:
        """Record a rejection that never reached validation, leaving the game unchanged."""
        new_state = state.clone()
        BattleLogger(new_state.log).log(new_state.turn, reason, LogEventType.REJECTED, side)
        return Transition(state=new_state, accepted=False, message=reason)

    def _perform(self, state: BattleState, side: Side, intent: Intent) -> str | None:
        """Dispatch an intent. Returns a rejection reason, or None on success."""
        match intent.kind:
            case IntentKind.DEPLOY:
                return self._deploy(state, side, intent)
            case IntentKind.ATTACK:
                return self._attack(state, side, intent)
            case IntentKind.USE_TOOL:
                return self._use_tool(state, side, intent)
            case IntentKind.USE_SPELL:
                return self._use_spell(state, side, intent)
            case IntentKind.DEFEND:
                return self._defend(state, side, intent)
            case _:
                return "Invalid action"

    def _deploy(self, state: BattleState, side: Side, intent: Intent) -> str | None:
        own = state.side(side)
        creature = own.find_in_hand(intent.source_id)
        if creature is None:
            return "Invalid deploy - creature is not in hand"

        max_field = get_profile(state.difficulty).max_field_size
        if len(own.field) >= max_field:
            return "Battlefield is full! Cannot deploy more creatures."

        cost = creature.battle_stats.energy_cost
        if own.energy < cost:
            return f"Not enough energy to deploy {creature.species_name}. Needs {cost} energy."

        own.hand = [c for c in own.hand if c is not creature]
        own.field.append(creature)
        own.energy -= cost

        who = "You" if side is Side.PLAYER else "Enemy"
        BattleLogger(state.log).log(
            state.turn,
            f"{who} deployed {creature.species_name} to the battlefield! (-{cost} energy)",
            LogEventType.DEPLOY,
            side,
        )
        return None

    def _attack(self, state: BattleState, side: Side, intent: Intent) -> str | None:
        own = state.side(side)
        opponent = state.side(side.opponent)
        attacker = own.find_on_field(intent.source_id)
        defender = opponent.find_on_field(intent.target_id)
        if attacker is None or defender is None:
            return "Invalid attack - missing attacker or defender"

        result = self.combat.resolve_attack(attacker, defender)
        own.replace_on_field(result.updated_attacker)
        opponent.replace_on_field(result.updated_defender)

        BattleLogger(state.log).log(state.turn, result.message, LogEventType.ATTACK, side)
        self._remove_defeated(state, side.opponent, announce=False)
        return None

    def _use_tool(self, state: BattleState, side: Side, intent: Intent) -> str | None:
        own = state.side(side)
        tool = own.find_tool(intent.tool_id)
        creature = own.find_on_field(intent.source_id)
        if tool is None or creature is None:
            return "Invalid tool use - missing tool or target"

        outcome = self.effects.apply_tool(creature, tool)
        own.replace_on_field(outcome.creature)
        # One-time use
        own.tools = [t for t in own.tools if t.id != tool.id]

        BattleLogger(state.log).log(
            state.turn,
            f"{tool.name} was used on {creature_label(creature, side, capitalize=False)}.",
            LogEventType.TOOL,
            side,
        )
        return None

    def _use_spell(self, state: BattleState, side: Side, intent: Intent) -> str | None:
        own = state.side(side)
        spell = own.find_spell(intent.spell_id)
        caster = own.find_on_field(intent.source_id)
        if spell is None or caster is None:
            return "Invalid spell cast - missing spell or caster"

        cost = self.settings.spell_energy_cost
        if own.energy < cost:
            return f"Not enough energy to cast {spell.name}. Needs {cost} energy."

        target: Creature | None = None
        target_side = side
        if intent.target_id is not None and intent.target_id != caster.id:
            target = own.find_on_field(intent.target_id)
            if target is None:
                target = state.side(side.opponent).find_on_field(intent.target_id)
                target_side = side.opponent
            if target is None:
                return "Invalid spell cast - target is not on the battlefield"

        outcome = self.effects.apply_spell(caster, target, spell)
        own.replace_on_field(outcome.caster)
        if target is not None:
            state.side(target_side).replace_on_field(outcome.target)

        own.energy -= cost
        if outcome.payload and outcome.payload.energy_gain:
            own.energy = min(self.settings.max_energy, own.energy + outcome.payload.energy_gain)
        # One-time use
        own.spells = [s for s in own.spells if s.id != spell.id]

        message = f"{creature_label(caster, side)} cast {spell.name}"
        if target is not None:
            message += f" on {creature_label(target, target_side, capitalize=False)}"
        message += f". (-{cost} energy)"
        if outcome.payload and outcome.payload.damage:
            message += f" It dealt {outcome.payload.damage} damage."
        BattleLogger(state.log).log(state.turn, message, LogEventType.SPELL, side)

        self._remove_defeated(state, Side.PLAYER, announce=True)
        self._remove_defeated(state, Side.ENEMY, announce=True)
        return None

    def _defend(self, state: BattleState, side: Side, intent: Intent) -> str | None:
        own = state.side(side)
        creature = own.find_on_field(intent.source_id)
        if creature is None:
            return "Invalid defend action - no creature selected"
        if creature.is_defending:
            return f"{creature.species_name} is already defending."

        own.replace_on_field(self.effects.defend(creature))
        BattleLogger(state.log).log(
            state.turn,
            f"{creature_label(creature, side)} took a defensive stance!",
            LogEventType.DEFEND,
            side,
        )
        return None

    # ------------------------------------------------------------------
    # Turn boundaries
    # ------------------------------------------------------------------

    def end_player_turn(self, state: BattleState) -> Transition:
        """End the player's turn, play the enemy turn and start the next round.

        Order: outcome check, tick, enemy action, outcome check, tick, draw,
        energy regeneration, side switch.
        """
        new_state = state.clone()
        log = BattleLogger(new_state.log)

        if new_state.phase is not BattlePhase.IN_BATTLE or new_state.active_side is not Side.PLAYER:
            reason = "Cannot end the turn right now."
            log.log(new_state.turn, reason, LogEventType.REJECTED, Side.PLAYER)
            return Transition(state=new_state, accepted=False, message=reason)

        if not self._check_outcome(new_state):
            log.log(new_state.turn, f"Turn {new_state.turn} - Enemy's turn.", LogEventType.TURN_CHANGE, Side.ENEMY)
            self._tick_fields(new_state)
            if not self._check_outcome(new_state):
                new_state.active_side = Side.ENEMY
                new_state = self.run_enemy_turn(new_state)
                # A failed enemy turn hands control back on its own
                if not new_state.is_over and new_state.active_side is Side.ENEMY:
                    new_state = self.finish_round(new_state)

        return Transition(state=new_state, accepted=True, message=new_state.log[-1].message)

    def run_enemy_turn(self, state: BattleState) -> BattleState:
        """Let the AI take exactly one action.

        An unexpected failure is logged, the turn is force-ended and the
        player gets control of the next turn.
        """
        new_state = state.clone()
        try:
            self._enemy_action(new_state)
        except Exception:
            logger.exception("Enemy turn failed on turn %d", state.turn)
            new_state = state.clone()
            BattleLogger(new_state.log).log(
                new_state.turn,
                "Enemy turn encountered an error. Your turn now.",
                LogEventType.AI_ERROR,
                Side.ENEMY,
            )
            new_state.turn += 1
            new_state.active_side = Side.PLAYER
            return new_state

        self._check_outcome(new_state)
        return new_state

    def finish_round(self, state: BattleState) -> BattleState:
        """Tick, advance the turn counter, draw, regenerate energy, hand back control."""
        new_state = state.clone()
        self._tick_fields(new_state)
        if self._check_outcome(new_state):
            return new_state

        profile = get_profile(new_state.difficulty)
        new_state.turn += 1
        self._draw(new_state, Side.PLAYER, profile.max_hand_size)
        self._draw(new_state, Side.ENEMY, profile.initial_hand_size)
        self._regenerate_energy(new_state)
        new_state.active_side = Side.PLAYER
        BattleLogger(new_state.log).log(
            new_state.turn, f"Turn {new_state.turn} - Your turn.", LogEventType.TURN_CHANGE, Side.PLAYER
        )
        return new_state

    def evaluate_outcome(self, state: BattleState) -> BattleState:
        """Return a copy with Victory or Defeat set when one side is exhausted."""
        new_state = state.clone()
        self._check_outcome(new_state)
        return new_state

    def _enemy_action(self, state: BattleState) -> None:
        """Let the AI pick one intent and apply it like a player intent."""
        own = state.enemy
        log = BattleLogger(state.log)
        intent = self.ai.decide(state.difficulty, own.hand, own.field, state.player.field, own.energy)
        logger.debug("AI decided on %s (energy=%d)", intent.kind.value, own.energy)

        if intent.kind is IntentKind.END_TURN:
            log.log(state.turn, "Enemy ended their turn.", LogEventType.END_TURN, Side.ENEMY)
            return

        if intent.kind not in AI_INTENTS:
            log.log(state.turn, "Enemy AI error: Invalid action", LogEventType.AI_ERROR, Side.ENEMY)
            return

        reason = self._perform(state, Side.ENEMY, intent)
        if reason is not None:
            logger.warning("AI produced an inconsistent %s intent: %s", intent.kind.value, reason)
            log.log(state.turn, f"Enemy AI error: {reason}", LogEventType.AI_ERROR, Side.ENEMY)

    def _tick_fields(self, state: BattleState) -> None:
        log = BattleLogger(state.log)
        for side in (Side.PLAYER, Side.ENEMY):
            own = state.side(side)
            result = self.effects.tick(own.field, side)
            own.field = result.creatures
            self._count_defeated(state, side, len(result.defeated))
            log.log_many(state.turn, result.messages, LogEventType.EFFECT, side)

    def _draw(self, state: BattleState, side: Side, capacity: int) -> None:
        own = state.side(side)
        if len(own.hand) >= capacity or not own.deck:
            return
        card = own.deck.pop(0)
        own.hand.append(card)
        message = f"You drew {card.species_name}." if side is Side.PLAYER else "Enemy drew a card."
        BattleLogger(state.log).log(state.turn, message, LogEventType.DRAW, side)

    def energy_regen(self, state: BattleState, side: Side) -> int:
        """Energy regenerated by a side at the end of a round."""
        field_energy = sum(c.stats.energy for c in state.side(side).field)
        return self.settings.energy_regen_base + math.floor(0.2 * field_energy)

    def _regenerate_energy(self, state: BattleState) -> None:
        log = BattleLogger(state.log)
        for side in (Side.PLAYER, Side.ENEMY):
            own = state.side(side)
            regen = self.energy_regen(state, side)
            own.energy = max(0, min(self.settings.max_energy, own.energy + regen))
            who = "You" if side is Side.PLAYER else "Enemy"
            log.log(state.turn, f"{who} gained +{regen} energy.", LogEventType.ENERGY, side)

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _remove_defeated(self, state: BattleState, side: Side, announce: bool) -> None:
        defeated = state.side(side).remove_defeated()
        self._count_defeated(state, side, len(defeated))
        if announce:
            log = BattleLogger(state.log)
            for creature in defeated:
                log.log(state.turn, f"{creature_label(creature, side)} was defeated!", LogEventType.DEFEAT, side)

    @staticmethod
    def _count_defeated(state: BattleState, side: Side, count: int) -> None:
        if side is Side.ENEMY:
            state.enemies_defeated += count
        else:
            state.player_creatures_lost += count

    def _check_outcome(self, state: BattleState) -> bool:
        """Evaluate Victory/Defeat. Returns True when the battle is over."""
        if state.phase is not BattlePhase.IN_BATTLE:
            return state.is_over

        log = BattleLogger(state.log)
        if state.enemy.is_exhausted():
            state.phase = BattlePhase.VICTORY
            log.log(state.turn, "Victory! You've defeated all enemy creatures!", LogEventType.OUTCOME)
            return True
        if state.player.is_exhausted():
            state.phase = BattlePhase.DEFEAT
            log.log(state.turn, "Defeat! All your creatures have been defeated!", LogEventType.OUTCOME)
            return True
        return False
