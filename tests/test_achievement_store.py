"""
Tests for AchievementStore validation, idempotent insertion and prefix scans.
"""
import asyncio

import pytest
from sqlalchemy import update

from tubeledger.core.errors import CorruptRecordError, IdentifierTooLong, LedgerError, SchemaVersionError
from tubeledger.core.keys import KeyCodec
from tubeledger.db.database import (
    SCHEMA_VERSION,
    AchievementKeyORM,
    SchemaVersionORM,
    build_engine,
    build_session_factory,
    init_db,
)
from tubeledger.models.models import AchievementRecord
from tubeledger.services import AchievementStore


class TestValidateAndRecord:

    @pytest.mark.asyncio
    async def test_first_unlock_then_duplicate(self, store, submission):
        s = submission("alice", "first_visit", required_visits=1, current_visits=1)
        assert await store.validate_and_record(s) is True
        assert await store.validate_and_record(s) is False

        records = await store.list_by_user("alice")
        assert len(records) == 1
        assert records[0].achievement_id == "first_visit"
        assert records[0].verified is True
        assert records[0].unlocked_at == "2025-01-01T12:00:00Z"

    @pytest.mark.asyncio
    async def test_visit_threshold_rejects_without_mutation(self, store, submission):
        s = submission("bob", "five_visits", required_visits=5, current_visits=2)
        assert await store.validate_and_record(s) is False
        assert await store.list_by_user("bob") == []
        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_threshold_rejects_even_after_unlock(self, store, submission):
        assert await store.validate_and_record(submission("bob", "five_visits", 5, 5))
        assert await store.validate_and_record(submission("bob", "five_visits", 5, 4)) is False
        assert await store.count() == 1

    @pytest.mark.asyncio
    async def test_duplicate_keeps_first_timestamp(self, store, submission):
        await store.validate_and_record(submission(timestamp="2025-01-01T00:00:00Z"))
        await store.validate_and_record(submission(timestamp="2025-06-01T00:00:00Z"))
        record = await store.get_record("alice", "first_visit")
        assert record.unlocked_at == "2025-01-01T00:00:00Z"

    @pytest.mark.asyncio
    async def test_extra_fields_not_persisted(self, store, submission):
        await store.validate_and_record(submission(achievement_name="Fancy", wallet_address="w"))
        record = await store.get_record("alice", "first_visit")
        assert record == AchievementRecord("first_visit", "alice", "2025-01-01T12:00:00Z", True)

    @pytest.mark.asyncio
    async def test_concurrent_submissions_record_once(self, store, submission):
        s = submission("carol", "first_visit")
        results = await asyncio.gather(*[store.validate_and_record(s) for _ in range(10)])
        assert results.count(True) == 1
        assert await store.count() == 1

    @pytest.mark.asyncio
    async def test_oversized_identifier_raises(self, store, submission):
        with pytest.raises(IdentifierTooLong):
            await store.validate_and_record(submission("u" * 40, "a" * 40))
        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_state_survives_new_store(self, engine, store, submission):
        await store.validate_and_record(submission())
        reopened = AchievementStore(build_session_factory(engine), KeyCodec())
        assert await reopened.has_achievement("alice", "first_visit")
        assert await reopened.validate_and_record(submission()) is False


class TestListByUser:

    @pytest.mark.asyncio
    async def test_prefix_user_isolation(self, store, submission):
        assert await store.validate_and_record(submission("a", "x"))
        assert await store.validate_and_record(submission("ab", "x"))

        records_a = await store.list_by_user("a")
        assert [(r.user_id, r.achievement_id) for r in records_a] == [("a", "x")]
        records_ab = await store.list_by_user("ab")
        assert [(r.user_id, r.achievement_id) for r in records_ab] == [("ab", "x")]

    @pytest.mark.asyncio
    async def test_key_order(self, store, submission):
        for ach in ["station_c", "station_a", "station_b"]:
            await store.validate_and_record(submission("dave", ach))
        records = await store.list_by_user("dave")
        assert [r.achievement_id for r in records] == ["station_a", "station_b", "station_c"]

    @pytest.mark.asyncio
    async def test_unknown_user_is_empty(self, store):
        assert await store.list_by_user("nobody") == []

    @pytest.mark.asyncio
    async def test_restartable(self, store, submission):
        await store.validate_and_record(submission())
        first = await store.list_by_user("alice")
        first.clear()
        assert len(await store.list_by_user("alice")) == 1

    @pytest.mark.asyncio
    async def test_corrupt_record_is_fatal(self, engine, store, submission):
        await store.validate_and_record(submission())
        async with build_session_factory(engine)() as session:
            await session.execute(update(AchievementKeyORM).values(record={"v": 1}))
            await session.commit()
        with pytest.raises(CorruptRecordError):
            await store.list_by_user("alice")


class TestHistory:

    @pytest.mark.asyncio
    async def test_history_uses_placeholders(self, store, submission):
        await store.validate_and_record(submission(achievement_name="First Steps", wallet_address="w1"))
        history = await store.list_history_by_user("alice")
        assert len(history) == 1
        entry = history[0]
        assert entry.user_id == "alice"
        assert entry.achievement_id == "first_visit"
        assert entry.timestamp == "2025-01-01T12:00:00Z"
        assert entry.achievement_name == "Achievement"
        assert entry.required_visits == 0
        assert entry.current_visits == 0
        assert entry.wallet_address == ""


class TestLegacyStore:

    @pytest.mark.asyncio
    async def test_truncated_keys_collide(self, engine, submission):
        store = AchievementStore(build_session_factory(engine), KeyCodec(capacity=8, strict=False))
        assert await store.validate_and_record(submission("alice", "first_visit"))
        assert await store.validate_and_record(submission("alice", "fixed")) is False


class TestSchemaVersioning:

    @pytest.mark.asyncio
    async def test_init_db_is_repeatable(self, engine):
        assert await init_db(engine) == SCHEMA_VERSION

    @pytest.mark.asyncio
    async def test_newer_database_refused(self, engine):
        async with engine.begin() as conn:
            await conn.execute(SchemaVersionORM.__table__.insert().values(version=SCHEMA_VERSION + 1))
        with pytest.raises(SchemaVersionError):
            await init_db(engine)
        assert issubclass(SchemaVersionError, LedgerError)

    @pytest.mark.asyncio
    async def test_newer_record_format_is_fatal(self, engine, store, submission):
        await store.validate_and_record(submission())
        payload = AchievementRecord("first_visit", "alice", "2025-01-01T12:00:00Z").to_payload()
        payload["v"] = 2
        async with build_session_factory(engine)() as session:
            await session.execute(update(AchievementKeyORM).values(record=payload))
            await session.commit()
        with pytest.raises(CorruptRecordError, match="format version"):
            await store.list_by_user("alice")

    @pytest.mark.asyncio
    async def test_in_memory_database(self, submission):
        engine = build_engine("sqlite+aiosqlite:///:memory:")
        try:
            await init_db(engine)
            store = AchievementStore(build_session_factory(engine), KeyCodec())
            assert await store.validate_and_record(submission())
            assert len(await store.list_by_user("alice")) == 1
        finally:
            await engine.dispose()


class TestRecordPayload:

    def _payload(self, **overrides):
        payload = AchievementRecord("first_visit", "alice", "2025-01-01T12:00:00Z").to_payload()
        payload.update(overrides)
        return payload

    def test_round_trip(self):
        record = AchievementRecord.from_payload(self._payload())
        assert record == AchievementRecord("first_visit", "alice", "2025-01-01T12:00:00Z", True)

    @pytest.mark.parametrize("version", [None, 0, 2, "1", True])
    def test_bad_version(self, version):
        with pytest.raises(CorruptRecordError):
            AchievementRecord.from_payload(self._payload(v=version))

    def test_missing_version(self):
        payload = self._payload()
        del payload["v"]
        with pytest.raises(CorruptRecordError):
            AchievementRecord.from_payload(payload)

    @pytest.mark.parametrize("field,value", [
        ("achievement_id", 42),
        ("user_id", None),
        ("unlocked_at", 1700000000),
        ("verified", "yes"),
        ("verified", 1),
    ])
    def test_wrong_field_type(self, field, value):
        with pytest.raises(CorruptRecordError, match=field):
            AchievementRecord.from_payload(self._payload(**{field: value}))

    def test_not_an_object(self):
        with pytest.raises(CorruptRecordError):
            AchievementRecord.from_payload(["first_visit"])
