"""Achievement key-value repository for async DB operations."""
from __future__ import annotations
from typing import List, Tuple
from sqlalchemy import select, func
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from tubeledger.db.database import AchievementKeyORM

class AchievementRepository:
    async def exists(self, session: AsyncSession, key: bytes) -> bool:
        res = await session.execute(select(AchievementKeyORM.key).where(AchievementKeyORM.key == key))
        return res.first() is not None

    async def insert_if_absent(self, session: AsyncSession, key: bytes, record: dict) -> bool:
        """Compare-and-insert on the primary key. True only if a row was written."""
        stmt = sqlite_insert(AchievementKeyORM.__table__).values(key=key, record=record).on_conflict_do_nothing(
            index_elements=[AchievementKeyORM.__table__.c.key]
        )
        res = await session.execute(stmt)
        return res.rowcount == 1

    async def get(self, session: AsyncSession, key: bytes) -> dict | None:
        res = await session.execute(select(AchievementKeyORM.record).where(AchievementKeyORM.key == key))
        return res.scalar_one_or_none()

    async def scan_range(self, session: AsyncSession, low: bytes, high: bytes) -> List[Tuple[bytes, dict]]:
        """All (key, record) pairs with low <= key <= high, in key order."""
        res = await session.execute(
            select(AchievementKeyORM.key, AchievementKeyORM.record)
            .where(AchievementKeyORM.key >= low, AchievementKeyORM.key <= high)
            .order_by(AchievementKeyORM.key)
        )
        return [(row[0], row[1]) for row in res.all()]

    async def count(self, session: AsyncSession) -> int:
        res = await session.execute(select(func.count()).select_from(AchievementKeyORM))
        return res.scalar_one()

achievement_repository = AchievementRepository()
