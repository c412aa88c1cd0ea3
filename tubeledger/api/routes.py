"""
HTTP API endpoints.
"""
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from tubeledger.api.schemas import AchievementDataIn, MilestoneCheckIn, MintingRequestIn
from tubeledger.core.errors import BridgeError, KeyCodecError
from tubeledger.models.milestones import MILESTONES, progress_to_next
from tubeledger.services import AchievementStore, MintingService, SolanaBridge

def get_store(request: Request) -> AchievementStore:
    return request.app.state.store

def get_minting_service(request: Request) -> MintingService:
    return request.app.state.minting_service

def get_bridge(request: Request) -> SolanaBridge:
    return request.app.state.bridge

def _bad_identifier(e: KeyCodecError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(e))

def create_api_router() -> APIRouter:
    """Create API router with endpoints"""
    router = APIRouter(prefix="/api", tags=["api"])

    @router.get("/health")
    async def health_check(store: AchievementStore = Depends(get_store)):
        """Health check endpoint (public)"""
        return {
            "status": "healthy",
            "records": await store.count(),
            "key_capacity": store.codec.capacity,
            "strict_keys": store.codec.strict,
        }

    # ==================== Achievements ====================
    @router.post("/achievements/validate")
    async def validate_achievement(payload: AchievementDataIn, store: AchievementStore = Depends(get_store)):
        """Validate and record an unlock. False means criteria unmet or already unlocked."""
        try:
            valid = await store.validate_and_record(payload.to_submission())
        except KeyCodecError as e:
            raise _bad_identifier(e)
        return {"valid": valid}

    @router.get("/achievements/{user_id}")
    async def get_user_achievements(user_id: str, store: AchievementStore = Depends(get_store)):
        try:
            records = await store.list_by_user(user_id)
        except KeyCodecError as e:
            raise _bad_identifier(e)
        return {"achievements": [asdict(r) for r in records]}

    @router.get("/achievements/{user_id}/history")
    async def get_achievement_history(user_id: str, store: AchievementStore = Depends(get_store)):
        """Unlocks in submission shape; name, visits and wallet are placeholders."""
        try:
            history = await store.list_history_by_user(user_id)
        except KeyCodecError as e:
            raise _bad_identifier(e)
        return {"history": [asdict(h) for h in history]}

    @router.get("/achievements/{user_id}/{achievement_id}")
    async def get_user_achievement(user_id: str, achievement_id: str, store: AchievementStore = Depends(get_store)):
        try:
            record = await store.get_record(user_id, achievement_id)
        except KeyCodecError as e:
            raise _bad_identifier(e)
        if record is None:
            raise HTTPException(status_code=404, detail="Achievement not unlocked")
        return asdict(record)

    # ==================== Minting ====================
    @router.post("/minting")
    async def request_minting(payload: MintingRequestIn, minting: MintingService = Depends(get_minting_service)):
        try:
            response = await minting.request_minting(payload.to_request())
        except KeyCodecError as e:
            raise _bad_identifier(e)
        return asdict(response)

    @router.get("/milestones")
    async def list_milestones():
        return {
            "milestones": [
                {
                    "id": m.id,
                    "name": m.name,
                    "description": m.description,
                    "required_visits": m.visits,
                    "rarity": m.rarity.value,
                } for m in MILESTONES
            ]
        }

    @router.get("/milestones/progress/{current_visits}")
    async def milestone_progress(current_visits: int = Path(..., ge=0)):
        """Progress from the last reached milestone towards the next one"""
        return asdict(progress_to_next(current_visits))

    @router.post("/milestones/check")
    async def check_milestones(payload: MilestoneCheckIn, minting: MintingService = Depends(get_minting_service)):
        try:
            results = await minting.check_milestones(
                payload.user_id, payload.wallet_address, payload.current_visits, payload.timestamp
            )
        except KeyCodecError as e:
            raise _bad_identifier(e)
        return {"minted": [asdict(r) for r in results]}

    # ==================== Bridge ====================
    @router.get("/bridge/balance/{wallet_address}")
    async def get_balance(wallet_address: str, bridge: SolanaBridge = Depends(get_bridge)):
        try:
            lamports = await bridge.get_solana_balance(wallet_address)
        except BridgeError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
        return {"wallet_address": wallet_address, "lamports": lamports}

    @router.get("/bridge/account/{wallet_address}")
    async def get_account_info(wallet_address: str, bridge: SolanaBridge = Depends(get_bridge)):
        try:
            info = await bridge.get_solana_account_info(wallet_address)
        except BridgeError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
        return {"wallet_address": wallet_address, "account": info}

    return router
