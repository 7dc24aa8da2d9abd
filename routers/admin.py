import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import require_admin, require_photo_moderator
from core.database import get_db
from core.exceptions import ModerationError
from schemas.photo import PhotoForApproval
from schemas.user import UserWithRoles
from services.identity import IdentityStore
from services.moderation import ModerationService
from services.roles import RoleService
from services.unit_of_work import UnitOfWork
from utils.s3 import S3AssetDeleter, get_asset_deleter

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger("uvicorn.error")


def get_moderation_service(
    db: AsyncSession = Depends(get_db),
    asset_deleter: S3AssetDeleter = Depends(get_asset_deleter),
) -> ModerationService:
    return ModerationService(UnitOfWork(db), asset_deleter)


def get_role_service(db: AsyncSession = Depends(get_db)) -> RoleService:
    return RoleService(IdentityStore(db))


@router.get(
    "/users-with-roles",
    response_model=List[UserWithRoles],
    summary="Пользователи и их роли",
    dependencies=[Depends(require_admin)],
)
async def get_users_with_roles(db: AsyncSession = Depends(get_db)) -> List[UserWithRoles]:
    return await IdentityStore(db).users_with_roles()


@router.post(
    "/edit-roles/{username}",
    response_model=List[str],
    summary="Заменить набор ролей пользователя",
    dependencies=[Depends(require_admin)],
)
async def edit_roles(
    username: str,
    roles: Optional[str] = Query(None, description="Роли через запятую"),
    service: RoleService = Depends(get_role_service),
) -> List[str]:
    try:
        return await service.edit_roles(username, roles)
    except ModerationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get(
    "/photos-to-moderate",
    response_model=List[PhotoForApproval],
    response_model_exclude_none=True,
    summary="Фото, ожидающие модерации",
    dependencies=[Depends(require_photo_moderator)],
)
async def get_photos_to_moderate(
    service: ModerationService = Depends(get_moderation_service),
) -> List[PhotoForApproval]:
    return await service.list_pending_photos()


@router.post(
    "/approve-photo/{photo_id}",
    summary="Одобрить фото",
    dependencies=[Depends(require_photo_moderator)],
)
async def approve_photo(
    photo_id: int,
    service: ModerationService = Depends(get_moderation_service),
) -> Response:
    try:
        await service.approve_photo(photo_id)
    except ModerationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Одобрение фото %s завершилось ошибкой: %s", photo_id, exc)
        raise HTTPException(status_code=500, detail="Не удалось одобрить фото") from exc
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/reject-photo/{photo_id}",
    summary="Отклонить фото и удалить файл из S3",
    dependencies=[Depends(require_photo_moderator)],
)
async def reject_photo(
    photo_id: int,
    service: ModerationService = Depends(get_moderation_service),
) -> Response:
    try:
        await service.reject_photo(photo_id)
    except ModerationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Отклонение фото %s завершилось ошибкой: %s", photo_id, exc)
        raise HTTPException(status_code=500, detail="Не удалось отклонить фото") from exc
    return Response(status_code=status.HTTP_200_OK)
