"""Achievement store: validation, idempotent insertion and per-user prefix scans.

The store owns the ``achievement_keys`` table. It is constructed once at
startup with a session factory and a KeyCodec and shared by every request
handler; tests build a fresh one per test.

A (user, achievement) pair moves from unrecorded to verified exactly once.
Rejections are returned as ``False`` and never written.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tubeledger.core.keys import KeyCodec
from tubeledger.db.repositories.achievement_repository import achievement_repository
from tubeledger.models.models import AchievementRecord, AchievementSubmission

logger = logging.getLogger(__name__)


class AchievementStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], codec: Optional[KeyCodec] = None):
        self.session_factory = session_factory
        self.codec = codec or KeyCodec()
        # Single writer for the check-then-insert sequence
        self._write_lock = asyncio.Lock()

    async def validate_and_record(self, submission: AchievementSubmission) -> bool:
        """Record the unlock if criteria are met and it is not already recorded.

        Returns True only for the call that actually inserted the record.
        """
        if not submission.criteria_met():
            logger.debug(
                "Rejected %s/%s: %s of %s visits",
                submission.user_id, submission.achievement_id,
                submission.current_visits, submission.required_visits,
            )
            return False

        key = self.codec.encode(submission.user_id, submission.achievement_id)
        record = AchievementRecord.from_submission(submission)

        async with self._write_lock:
            async with self.session_factory() as session:
                if await achievement_repository.exists(session, key):
                    logger.debug("Rejected %s/%s: already unlocked", submission.user_id, submission.achievement_id)
                    return False
                inserted = await achievement_repository.insert_if_absent(session, key, record.to_payload())
                await session.commit()

        if inserted:
            logger.info("Achievement unlocked: %s/%s", submission.user_id, submission.achievement_id)
        return inserted

    async def list_by_user(self, user_id: str) -> List[AchievementRecord]:
        """Every record stored under the user's key prefix, in key order."""
        low, high = self.codec.prefix_range(user_id)
        head = self.codec.significant(low)
        async with self.session_factory() as session:
            rows = await achievement_repository.scan_range(session, low, high)
        return [AchievementRecord.from_payload(payload) for key, payload in rows if key.startswith(head)]

    async def list_history_by_user(self, user_id: str) -> List[AchievementSubmission]:
        """Reduced projection of list_by_user in submission shape.

        Name, visit counts and wallet are not stored and come back as
        placeholders.
        """
        return [record.to_history() for record in await self.list_by_user(user_id)]

    async def get_record(self, user_id: str, achievement_id: str) -> Optional[AchievementRecord]:
        key = self.codec.encode(user_id, achievement_id)
        async with self.session_factory() as session:
            payload = await achievement_repository.get(session, key)
        return AchievementRecord.from_payload(payload) if payload is not None else None

    async def has_achievement(self, user_id: str, achievement_id: str) -> bool:
        key = self.codec.encode(user_id, achievement_id)
        async with self.session_factory() as session:
            return await achievement_repository.exists(session, key)

    async def count(self) -> int:
        async with self.session_factory() as session:
            return await achievement_repository.count(session)
