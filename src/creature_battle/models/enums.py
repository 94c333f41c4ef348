"""Enums for battle models."""

from enum import Enum


class Rarity(str, Enum):
    """Creature rarity tiers."""

    COMMON = "Common"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"

    @classmethod
    def parse(cls, value: object) -> "Rarity":
        """Parse a rarity name case-insensitively, falling back to COMMON."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for rarity in cls:
                if rarity.value.lower() == value.strip().lower():
                    return rarity
        return cls.COMMON


class Difficulty(str, Enum):
    """Battle difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @classmethod
    def parse(cls, value: object) -> "Difficulty":
        """Parse a difficulty name. Unknown values default to MEDIUM."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.MEDIUM


class BattlePhase(str, Enum):
    """Lifecycle phase of a battle."""

    SETUP = "setup"  # Difficulty not confirmed yet
    IN_BATTLE = "in_battle"  # Turns being played
    VICTORY = "victory"  # Enemy field, hand and deck are empty
    DEFEAT = "defeat"  # Player field, hand and deck are empty


class Side(str, Enum):
    """One of the two actors in a battle."""

    PLAYER = "player"
    ENEMY = "enemy"

    @property
    def opponent(self) -> "Side":
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


class IntentKind(str, Enum):
    """Type of action a side can request."""

    DEPLOY = "deploy"  # Move a creature from hand to field
    ATTACK = "attack"  # Field creature attacks an opposing field creature
    USE_TOOL = "useTool"  # Apply a tool to an own field creature
    USE_SPELL = "useSpell"  # Cast a spell from an own field creature
    DEFEND = "defend"  # Defensive stance for one turn
    END_TURN = "endTurn"  # Hand control to the other side


class EffectKind(str, Enum):
    """Closed set of tool/spell effect variants."""

    SURGE = "Surge"  # Stronger but shorter
    SHIELD = "Shield"  # Flat defensive bonus
    ECHO = "Echo"  # Weaker but longer, or health over time
    DRAIN = "Drain"  # Converts defense into offense / life drain
    CHARGE = "Charge"  # Builds up or prepares a delayed effect
    DEFAULT = "Default"  # Base effect of the item type

    @classmethod
    def parse(cls, value: object) -> "EffectKind":
        """Map any effect name onto the closed set. Unknown names map to DEFAULT."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for kind in cls:
                if kind.value.lower() == value.strip().lower():
                    return kind
        return cls.DEFAULT

    @property
    def description(self) -> str:
        match self:
            case EffectKind.SURGE:
                return "Powerful but short-lived boost"
            case EffectKind.SHIELD:
                return "Defensive protection"
            case EffectKind.ECHO:
                return "Repeating effect with longer duration"
            case EffectKind.DRAIN:
                return "Converts defensive stats to offense"
            case EffectKind.CHARGE:
                return "Builds up power over time"
            case _:
                return "Enhances creature abilities"


class AttributeFamily(str, Enum):
    """Base attributes. Tools and spells target one of these families."""

    ENERGY = "energy"
    STRENGTH = "strength"
    MAGIC = "magic"
    STAMINA = "stamina"
    SPEED = "speed"

    @classmethod
    def parse(cls, value: object) -> "AttributeFamily | None":
        """Parse a family name, returning None for unknown values."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


class AttackType(str, Enum):
    """Attack flavor, selecting which attack/defense pair is used."""

    PHYSICAL = "physical"  # Strength-based
    MAGICAL = "magical"  # Magic-based
