"""
FastAPI application factory and main application setup.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from tubeledger.core.config import settings
from tubeledger.core.keys import KeyCodec
from tubeledger.db.database import build_engine, build_session_factory, init_db
from tubeledger.services import AchievementStore, MintingService, MockSolanaBridge, SolanaBridge
from tubeledger.api import create_api_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

def create_app(database_url: Optional[str] = None, codec: Optional[KeyCodec] = None,
               bridge: Optional[SolanaBridge] = None) -> FastAPI:
    """Create and configure FastAPI application"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the store and its collaborators once, before serving"""
        logger.info("Starting achievement ledger...")
        engine = build_engine(database_url)
        await init_db(engine)
        store = AchievementStore(build_session_factory(engine), codec or KeyCodec())
        app.state.store = store
        app.state.bridge = bridge or MockSolanaBridge()
        app.state.minting_service = MintingService(store, app.state.bridge)
        logger.info("Achievement store ready (%d records)", await store.count())

        yield

        logger.info("Shutting down achievement ledger...")
        await engine.dispose()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Achievement Ledger",
        description="Station-visit achievement validation and token minting gateway",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan
    )
    app.include_router(create_api_router())
    return app

# Create app instance
app = create_app()
