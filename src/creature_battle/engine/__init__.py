"""Battle engine module - handles stat derivation, combat, effects, AI and turn flow."""

from .ai import AIDecisionEngine
from .battle import BattleEngine, BattleResult
from .combat import CombatResolver
from .difficulty import PROFILES, DifficultyProfile, get_profile
from .effects import EffectEngine, TickResult
from .items import resolve_spell_effect, resolve_tool_effect
from .logging import BattleLog, BattleLogger, LogEntry, LogEventType
from .rng import BattleRandom
from .stats import build_creature, build_roster, derive_battle_stats
from .turn import Transition, TurnResolver
from .types import BattleState, BattleSummary, Creature, Intent

__all__ = [
    "AIDecisionEngine",
    "BattleEngine",
    "BattleResult",
    "CombatResolver",
    "DifficultyProfile",
    "PROFILES",
    "get_profile",
    "EffectEngine",
    "TickResult",
    "resolve_tool_effect",
    "resolve_spell_effect",
    "BattleLog",
    "BattleLogger",
    "LogEntry",
    "LogEventType",
    "BattleRandom",
    "build_creature",
    "build_roster",
    "derive_battle_stats",
    "Transition",
    "TurnResolver",
    "BattleState",
    "BattleSummary",
    "Creature",
    "Intent",
]
