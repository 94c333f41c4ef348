"""Entry point for running a demonstration battle."""

import argparse
import logging
import sys

from creature_battle.config import get_settings
from creature_battle.engine.logging import BattleLog
from creature_battle.services.autoplay import AutoPlayer

DEMO_ROSTER = [
    {
        "id": "demo-1",
        "species_id": "emberfox",
        "species_name": "Emberfox",
        "rarity": "Rare",
        "form": 1,
        "stats": {"energy": 6, "strength": 8, "magic": 4, "stamina": 6, "speed": 7},
    },
    {
        "id": "demo-2",
        "species_id": "tidecrab",
        "species_name": "Tidecrab",
        "rarity": "Common",
        "form": 0,
        "stats": {"energy": 5, "strength": 5, "magic": 5, "stamina": 8, "speed": 3},
    },
    {
        "id": "demo-3",
        "species_id": "stormwing",
        "species_name": "Stormwing",
        "rarity": "Epic",
        "form": 2,
        "combination_level": 1,
        "stats": {"energy": 7, "strength": 4, "magic": 9, "stamina": 5, "speed": 8},
    },
    {
        "id": "demo-4",
        "species_id": "mossback",
        "species_name": "Mossback",
        "rarity": "Common",
        "form": 1,
        "stats": {"energy": 4, "strength": 6, "magic": 3, "stamina": 9, "speed": 2},
    },
]

DEMO_TOOLS = [{"id": "tool-1", "name": "Iron Shell", "type": "stamina", "effect": "shield"}]
DEMO_SPELLS = [{"id": "spell-1", "name": "Life Siphon", "type": "strength", "effect": "drain"}]


def main(argv: list[str] | None = None) -> int:
    """Run a seeded AI-vs-AI battle and print its log."""
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="creature_battle", description="Run a simulated creature battle.")
    parser.add_argument("--difficulty", default=settings.default_difficulty.value)
    parser.add_argument("--seed", type=int, default=settings.rng_seed)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logging.info("Starting demo battle (difficulty=%s, seed=%r)...", args.difficulty, args.seed)

    player = AutoPlayer(seed=args.seed, settings=settings)
    result = player.play(DEMO_ROSTER, args.difficulty, tools=DEMO_TOOLS, spells=DEMO_SPELLS)

    if result.state is not None:
        print(BattleLog(entries=result.state.log).format_readable())
    print()
    if result.summary is not None:
        summary = result.summary
        print(f"Outcome: {summary.outcome.value}")
        print(f"Turns elapsed: {summary.turns_elapsed}")
        print(f"Remaining creatures: {summary.remaining_player_creatures}")
        print(f"Enemies defeated: {summary.enemies_defeated}")
        print(f"Reward multiplier: x{summary.reward_multiplier}")
    else:
        print(result.message)

    return 0 if result.success else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
