"""
Models package exports.
"""
from .models import (
    AchievementSubmission,
    AchievementRecord,
    AchievementMetadata,
    Attribute,
    MintingRequest,
    MintingResponse,
    AchievementMintingRequest,
    SolanaTransaction,
    SolanaResponse,
)
from .milestones import Milestone, Rarity, MILESTONES

__all__ = [
    "AchievementSubmission",
    "AchievementRecord",
    "AchievementMetadata",
    "Attribute",
    "MintingRequest",
    "MintingResponse",
    "AchievementMintingRequest",
    "SolanaTransaction",
    "SolanaResponse",
    "Milestone",
    "Rarity",
    "MILESTONES",
]
