import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.photo_store import AdminPhotos
from services.user_store import UserStore

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Общая сессия для хранилищ и единая точка commit."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.photos = AdminPhotos(db)
        self.users = UserStore(db)

    async def flush(self) -> None:
        await self.db.flush()

    async def rollback(self) -> None:
        await self.db.rollback()

    async def complete(self) -> bool:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            logger.exception("Commit failed, rolling back")
            await self.db.rollback()
            return False
        return True
