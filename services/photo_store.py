"""
Доступ к таблице photos.

VisiblePhotos - обычная выдача, видит только одобренные фото.
AdminPhotos - выдача для модерации, видит всё, в том числе фото на проверке.
"""
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from models.photo import Photo


class VisiblePhotos:

    def __init__(self, db: AsyncSession):
        self.db = db

    def _query(self):
        return select(Photo).where(Photo.is_approved.is_(True))

    async def get(self, photo_id: int) -> Optional[Photo]:
        result = await self.db.execute(self._query().where(Photo.id == photo_id))
        return result.scalar_one_or_none()

    async def for_user(self, user_id: int) -> List[Photo]:
        result = await self.db.execute(
            self._query()
            .where(Photo.user_id == user_id)
            .order_by(Photo.created_at.asc(), Photo.id.asc())
        )
        return list(result.scalars().all())


class AdminPhotos:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, photo_id: int) -> Optional[Photo]:
        return await self.db.get(Photo, photo_id)

    async def get_for_update(self, photo_id: int) -> Optional[Photo]:
        """Загружает фото и блокирует строку до конца транзакции (где диалект умеет FOR UPDATE)."""
        result = await self.db.execute(
            select(Photo)
            .where(Photo.id == photo_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def unapproved(self) -> List[Photo]:
        result = await self.db.execute(
            select(Photo)
            .where(Photo.is_approved.is_(False))
            .order_by(Photo.created_at.asc(), Photo.id.asc())
        )
        return list(result.scalars().all())

    async def promote_to_main_if_none(self, photo: Photo) -> bool:
        """
        Делает фото главным одним UPDATE, только если у владельца нет другого главного фото.
        Проверка и запись идут одной операцией, поэтому два параллельных одобрения
        не могут оба увидеть «главного фото нет».
        """
        other = aliased(Photo)
        has_main = (
            select(other.id)
            .where(other.user_id == photo.user_id, other.is_main.is_(True))
            .exists()
        )
        result = await self.db.execute(
            update(Photo)
            .where(Photo.id == photo.id, ~has_main)
            .values(is_main=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        await self.db.refresh(photo, attribute_names=["is_main"])
        return True

    async def remove_pending(self, photo: Photo) -> bool:
        """Удаляет запись, только пока фото ещё не одобрено. Возвращает, была ли удалена строка."""
        result = await self.db.execute(
            delete(Photo)
            .where(Photo.id == photo.id, Photo.is_approved.is_(False))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        self.db.expunge(photo)
        return True
