"""Service layer for battle setup and simulation."""

from .autoplay import AutoPlayer
from .enemies import EnemyGenerator

__all__ = [
    "AutoPlayer",
    "EnemyGenerator",
]
