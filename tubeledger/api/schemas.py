"""
Pydantic request schemas for the ledger API.
"""
from typing import List

from pydantic import BaseModel, Field

from tubeledger.models.models import (
    AchievementMetadata,
    AchievementSubmission,
    Attribute,
    MintingRequest,
)

UINT32_MAX = 2**32 - 1


class AchievementDataIn(BaseModel):
    """Achievement data submitted for validation."""
    user_id: str
    achievement_id: str
    achievement_name: str = ""
    required_visits: int = Field(..., ge=0, le=UINT32_MAX)
    current_visits: int = Field(..., ge=0, le=UINT32_MAX)
    timestamp: str
    wallet_address: str = ""

    def to_submission(self) -> AchievementSubmission:
        return AchievementSubmission(**self.model_dump())


class AttributeIn(BaseModel):
    trait_type: str
    value: str


class AchievementMetadataIn(BaseModel):
    name: str
    symbol: str
    description: str = ""
    image: str = ""
    attributes: List[AttributeIn] = Field(default_factory=list)


class MintingRequestIn(BaseModel):
    achievement_data: AchievementDataIn
    metadata: AchievementMetadataIn

    def to_request(self) -> MintingRequest:
        meta = self.metadata
        return MintingRequest(
            achievement_data=self.achievement_data.to_submission(),
            metadata=AchievementMetadata(
                name=meta.name,
                symbol=meta.symbol,
                description=meta.description,
                image=meta.image,
                attributes=[Attribute(a.trait_type, a.value) for a in meta.attributes],
            ),
        )


class MilestoneCheckIn(BaseModel):
    """Current visit count for a user; every reached milestone gets minted."""
    user_id: str
    wallet_address: str = ""
    current_visits: int = Field(..., ge=0, le=UINT32_MAX)
    timestamp: str
