"""
Модерация фото: pending -> approved | rejected.

Одобрение ставит is_approved и, если у владельца ещё нет главного фото,
делает фото главным. Отклонение сначала удаляет файл во внешнем хранилище,
потом запись в БД; одобренное фото отклонить нельзя.
"""
import logging
from typing import List, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from core.exceptions import (
    AssetDeletionError,
    InvalidStateError,
    NotFoundError,
    PersistenceError,
)
from schemas.photo import PhotoForApproval
from services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AssetDeleter(Protocol):
    async def delete(self, public_id: str) -> None: ...


class ModerationService:

    def __init__(self, uow: UnitOfWork, asset_deleter: AssetDeleter):
        self.uow = uow
        self.asset_deleter = asset_deleter

    async def list_pending_photos(self) -> List[PhotoForApproval]:
        photos = await self.uow.photos.unapproved()

        result: List[PhotoForApproval] = []
        for photo in photos:
            item = PhotoForApproval(id=photo.id, url=photo.url, is_approved=photo.is_approved)

            # без владельца фото всё равно показываем, просто без username
            user = await self.uow.users.get(photo.user_id)
            if user is not None:
                item.username = user.username
            else:
                logger.warning("Owner %s of pending photo %s not found", photo.user_id, photo.id)

            result.append(item)
        return result

    async def approve_photo(self, photo_id: int) -> None:
        # блокируем строку: параллельное отклонение дождётся конца одобрения
        photo = await self.uow.photos.get_for_update(photo_id)
        if photo is None:
            raise NotFoundError("Could not find photo")

        photo.is_approved = True

        promoted = False
        try:
            await self.uow.flush()
            owner = await self.uow.users.get_for_update(photo.user_id)
            if owner is not None:
                promoted = await self.uow.photos.promote_to_main_if_none(photo)
            else:
                logger.warning("Owner %s of photo %s not found, skipping main photo check",
                               photo.user_id, photo.id)
        except StaleDataError as exc:
            # строку удалили между загрузкой и записью
            await self.uow.rollback()
            raise NotFoundError("Could not find photo") from exc
        except SQLAlchemyError as exc:
            logger.exception("Approving photo %s failed", photo_id)
            await self.uow.rollback()
            raise PersistenceError("Problem approving photo") from exc

        if not await self.uow.complete():
            raise PersistenceError("Problem approving photo")

        logger.info("Photo %s approved (owner=%s, promoted_to_main=%s)",
                    photo.id, photo.user_id, promoted)

    async def reject_photo(self, photo_id: int) -> None:
        photo = await self.uow.photos.get_for_update(photo_id)
        if photo is None:
            raise NotFoundError("Could not find photo")

        if photo.is_approved:
            raise InvalidStateError("Cannot reject approved photo")

        # сначала файл, потом запись: при ошибке хранилища запись остаётся
        if photo.public_id is not None:
            try:
                await self.asset_deleter.delete(photo.public_id)
            except AssetDeletionError as exc:
                logger.error("Asset %s of photo %s was not deleted: %s",
                             photo.public_id, photo.id, exc)
                raise

        if not await self.uow.photos.remove_pending(photo):
            # фото одобрили, пока удаляли файл
            logger.error("Photo %s stopped being pending during rejection, asset %s already removed",
                         photo.id, photo.public_id)
            raise InvalidStateError("Cannot reject approved photo")

        if not await self.uow.complete():
            logger.error("Photo %s record kept after its asset %s was removed",
                         photo.id, photo.public_id)
            raise PersistenceError("Problem rejecting photo")

        logger.info("Photo %s rejected (owner=%s)", photo.id, photo.user_id)
