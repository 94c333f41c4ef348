"""Battle logging system.

Provides the append-only, human-readable battle log consumed by collaborators:
- Deployments, attacks, tool and spell use
- Effect application and expiry
- Defeats, draws, energy and turn changes
- Rejected intents and AI errors
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..models.enums import Side


class LogEventType(str, Enum):
    """Types of log events."""

    # Battle lifecycle
    BATTLE_START = "battle_start"
    TURN_CHANGE = "turn_change"
    OUTCOME = "outcome"

    # Actions
    DEPLOY = "deploy"
    ATTACK = "attack"
    TOOL = "tool"
    SPELL = "spell"
    DEFEND = "defend"
    END_TURN = "end_turn"

    # Effect engine
    EFFECT = "effect"
    DEFEAT = "defeat"

    # Turn bookkeeping
    DRAW = "draw"
    ENERGY = "energy"

    # Problems
    REJECTED = "rejected"
    AI_ERROR = "ai_error"


@dataclass
class LogEntry:
    """A single battle log line."""

    turn: int
    message: str
    event_type: LogEventType = LogEventType.EFFECT
    side: Side | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "turn": self.turn,
            "message": self.message,
            "event_type": self.event_type.value,
        }
        if self.side is not None:
            result["side"] = self.side.value
        return result


@dataclass
class BattleLog:
    """Read-only view over the entries of one battle."""

    entries: list[LogEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"entries": [entry.to_dict() for entry in self.entries]}

    def get_entries_by_type(self, event_type: LogEventType) -> list[LogEntry]:
        """Get all entries of a specific type."""
        return [e for e in self.entries if e.event_type == event_type]

    def get_entries_for_turn(self, turn: int) -> list[LogEntry]:
        """Get all entries for a specific turn."""
        return [e for e in self.entries if e.turn == turn]

    def messages(self) -> list[str]:
        return [e.message for e in self.entries]

    def format_readable(self) -> str:
        """Format the log in a human-readable format."""
        lines: list[str] = ["=== Battle Log ==="]

        current_turn = -1
        for entry in self.entries:
            if entry.turn != current_turn:
                current_turn = entry.turn
                lines.append(f"\n--- Turn {current_turn} ---")
            lines.append(f"  {self._marker(entry)} {entry.message}")

        return "\n".join(lines)

    @staticmethod
    def _marker(entry: LogEntry) -> str:
        match entry.event_type:
            case LogEventType.REJECTED | LogEventType.AI_ERROR:
                return "!"
            case LogEventType.OUTCOME:
                return "***"
            case LogEventType.TURN_CHANGE:
                return ">>"
            case _:
                return "-"


class BattleLogger:
    """Appends entries to a battle state's log.

    Usage:
        logger = BattleLogger(state.log)
        logger.log(state.turn, "You deployed Emberfox!", LogEventType.DEPLOY, Side.PLAYER)
    """

    def __init__(self, entries: list[LogEntry]) -> None:
        self._entries = entries

    def log(
        self,
        turn: int,
        message: str,
        event_type: LogEventType = LogEventType.EFFECT,
        side: Side | None = None,
    ) -> LogEntry:
        """Append one entry and return it."""
        entry = LogEntry(turn=turn, message=message, event_type=event_type, side=side)
        self._entries.append(entry)
        return entry

    def log_many(
        self,
        turn: int,
        messages: list[str],
        event_type: LogEventType = LogEventType.EFFECT,
        side: Side | None = None,
    ) -> None:
        for message in messages:
            self.log(turn, message, event_type, side)
