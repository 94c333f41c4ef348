"""Battle models: enums and boundary records."""

from .enums import (
    AttackType,
    AttributeFamily,
    BattlePhase,
    Difficulty,
    EffectKind,
    IntentKind,
    Rarity,
    Side,
)
from .records import (
    BaseAttributesRecord,
    CreatureRecord,
    IntentRecord,
    ItemRecord,
    SpellRecord,
    ToolRecord,
)

__all__ = [
    # Enums
    "AttackType",
    "AttributeFamily",
    "BattlePhase",
    "Difficulty",
    "EffectKind",
    "IntentKind",
    "Rarity",
    "Side",
    # Records
    "BaseAttributesRecord",
    "CreatureRecord",
    "IntentRecord",
    "ItemRecord",
    "SpellRecord",
    "ToolRecord",
]
