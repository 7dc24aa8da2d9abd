# utils/seed_db.py
import asyncio
import logging
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import AsyncSessionLocal, engine
from models.base import Base
from models.photo import Photo  # noqa: F401  регистрирует таблицу photos
from models.role import Role

log = logging.getLogger(__name__)


async def seed_roles(db: AsyncSession, names: Iterable[str]) -> List[str]:
    """Создаёт недостающие роли и возвращает имена добавленных."""
    existing = set((await db.execute(select(Role.name))).scalars().all())
    created = [name for name in names if name not in existing]
    for name in created:
        db.add(Role(name=name))
    if created:
        await db.commit()
    return created


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        created = await seed_roles(db, settings.seed_roles)
    log.info("Roles created: %s", ", ".join(created) or "none")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
