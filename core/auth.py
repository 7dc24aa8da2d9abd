from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from core.database import get_db
from core.security import get_current_user
from models.user import User
from services.identity import IdentityStore

ADMIN_ROLE = "Admin"
MODERATOR_ROLE = "Moderator"


def require_roles(*allowed: str):
    """Зависимость: пускает пользователя, если у него есть хотя бы одна из ролей."""

    async def dependency(
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
    ) -> User:
        roles = await IdentityStore(db).roles_of(current_user)
        if not set(roles) & set(allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden: one of roles {', '.join(allowed)} required",
            )
        return current_user

    return dependency


# Редактирование ролей
require_admin = require_roles(ADMIN_ROLE)
# Модерация фото
require_photo_moderator = require_roles(ADMIN_ROLE, MODERATOR_ROLE)
