import pytest
import pytest_asyncio

from tubeledger.core.keys import KeyCodec
from tubeledger.db.database import build_engine, build_session_factory, init_db
from tubeledger.models.models import AchievementSubmission
from tubeledger.services import AchievementStore, MintingService, MockSolanaBridge


def make_submission(user_id="alice", achievement_id="first_visit", required_visits=1,
                    current_visits=1, timestamp="2025-01-01T12:00:00Z", **extra) -> AchievementSubmission:
    return AchievementSubmission(
        user_id=user_id,
        achievement_id=achievement_id,
        achievement_name=extra.get("achievement_name", "First Steps"),
        required_visits=required_visits,
        current_visits=current_visits,
        timestamp=timestamp,
        wallet_address=extra.get("wallet_address", "wallet-1"),
    )


@pytest.fixture
def submission():
    return make_submission


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{(tmp_path / 'ledger.db').as_posix()}"


@pytest_asyncio.fixture
async def engine(database_url):
    engine = build_engine(database_url)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def store(engine):
    return AchievementStore(build_session_factory(engine), KeyCodec())


@pytest.fixture
def bridge():
    return MockSolanaBridge()


@pytest.fixture
def minting(store, bridge):
    return MintingService(store, bridge)
