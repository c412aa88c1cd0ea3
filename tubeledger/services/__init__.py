"""
Services package exports.
"""
from .achievement_store import AchievementStore
from .bridge import MockSolanaBridge, SolanaBridge
from .minting_service import MintingService

__all__ = [
    "AchievementStore",
    "MockSolanaBridge",
    "SolanaBridge",
    "MintingService"
]
