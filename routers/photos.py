from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from schemas.photo import PhotoRead
from services.identity import IdentityStore
from services.photo_store import VisiblePhotos

router = APIRouter(prefix="/users", tags=["photos"])


@router.get(
    "/{username}/photos",
    response_model=List[PhotoRead],
    summary="Одобренные фото пользователя",
)
async def list_user_photos(
    username: str = Path(..., description="Логин пользователя"),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
) -> List[PhotoRead]:
    user = await IdentityStore(db).find_by_username(username)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    # фото на модерации в обычной выдаче не видны
    photos = await VisiblePhotos(db).for_user(user.id)
    return [PhotoRead(id=p.id, url=p.url, is_main=p.is_main) for p in photos]
