"""Minting workflow: validate and record the achievement, then call the bridge.

A failed validation short-circuits before the bridge is touched. A recorded
unlock is never rolled back, even when the bridge later fails.
"""
from __future__ import annotations

import logging
import time
from typing import List

from tubeledger.core.config import settings
from tubeledger.models.milestones import build_metadata, reached_milestones
from tubeledger.models.models import (
    AchievementMintingRequest,
    AchievementSubmission,
    MintingRequest,
    MintingResponse,
)
from tubeledger.services.achievement_store import AchievementStore
from tubeledger.services.bridge import SolanaBridge

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Achievement validation failed"


class MintingService:
    def __init__(self, store: AchievementStore, bridge: SolanaBridge):
        self.store = store
        self.bridge = bridge

    @staticmethod
    def metadata_uri(request: MintingRequest) -> str:
        if request.metadata.image:
            return request.metadata.image
        slug = request.metadata.name.strip().lower().replace(" ", "_")
        return f"{settings.METADATA_URI_SCHEME}://metadata/{request.achievement_data.achievement_id}/{slug}"

    async def request_minting(self, request: MintingRequest) -> MintingResponse:
        data = request.achievement_data
        if not await self.store.validate_and_record(data):
            return MintingResponse(success=False, error=VALIDATION_FAILED)

        bridge_response = await self.bridge.mint_achievement_token(AchievementMintingRequest(
            achievement_id=data.achievement_id,
            user_wallet=data.wallet_address,
            metadata_uri=self.metadata_uri(request),
        ))
        if not bridge_response.success:
            logger.warning("Bridge mint failed for %s/%s: %s", data.user_id, data.achievement_id, bridge_response.error)
            return MintingResponse(success=False, error=bridge_response.error or "Minting failed")

        token_mint = f"achievement_{data.achievement_id}_{time.time_ns()}"
        logger.info("Minted %s for %s", token_mint, data.user_id)
        return MintingResponse(
            success=True,
            token_mint=token_mint,
            transaction_signature=bridge_response.signature,
        )

    async def check_milestones(self, user_id: str, wallet_address: str, current_visits: int,
                               timestamp: str) -> List[MintingResponse]:
        """Mint every reached milestone the user has not unlocked yet."""
        results: List[MintingResponse] = []
        for milestone in reached_milestones(current_visits):
            if await self.store.has_achievement(user_id, milestone.id):
                continue
            submission = AchievementSubmission(
                user_id=user_id,
                achievement_id=milestone.id,
                achievement_name=milestone.name,
                required_visits=milestone.visits,
                current_visits=current_visits,
                timestamp=timestamp,
                wallet_address=wallet_address,
            )
            results.append(await self.request_minting(MintingRequest(submission, build_metadata(milestone))))
        return results
