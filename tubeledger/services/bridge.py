"""Solana bridge interface and the mock used until a real RPC bridge exists."""
from __future__ import annotations

import json
import logging
import time
from typing import Protocol

from tubeledger.core.config import settings
from tubeledger.core.errors import BridgeError
from tubeledger.models.models import AchievementMintingRequest, SolanaResponse, SolanaTransaction

logger = logging.getLogger(__name__)


class SolanaBridge(Protocol):
    async def mint_achievement_token(self, request: AchievementMintingRequest) -> SolanaResponse: ...

    async def send_solana_transaction(self, transaction: SolanaTransaction) -> SolanaResponse: ...

    async def get_solana_balance(self, wallet_address: str) -> int: ...

    async def get_solana_account_info(self, wallet_address: str) -> str: ...


class MockSolanaBridge:
    """Answers every call locally with fixed or timestamped data."""

    def __init__(self, balance_lamports: int = settings.MOCK_BALANCE_LAMPORTS):
        self.balance_lamports = balance_lamports
        self.minted: list[AchievementMintingRequest] = []

    def _signature(self) -> str:
        return f"mock_solana_tx_{time.time_ns()}"

    async def mint_achievement_token(self, request: AchievementMintingRequest) -> SolanaResponse:
        self.minted.append(request)
        signature = self._signature()
        logger.info("Mock mint for %s -> %s (%s)", request.achievement_id, request.user_wallet, signature)
        return SolanaResponse(success=True, signature=signature)

    async def send_solana_transaction(self, transaction: SolanaTransaction) -> SolanaResponse:
        logger.debug("Mock send of %d instruction bytes from %s", len(transaction.instruction), transaction.fee_payer)
        return SolanaResponse(success=True, signature=self._signature())

    async def get_solana_balance(self, wallet_address: str) -> int:
        if not wallet_address:
            raise BridgeError("wallet address is required")
        return self.balance_lamports

    async def get_solana_account_info(self, wallet_address: str) -> str:
        if not wallet_address:
            raise BridgeError("wallet address is required")
        return json.dumps({"lamports": self.balance_lamports, "owner": wallet_address})
