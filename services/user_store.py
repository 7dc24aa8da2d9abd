from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User


class UserStore:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: Optional[int]) -> Optional[User]:
        if user_id is None:
            return None
        return await self.db.get(User, user_id)

    async def get_for_update(self, user_id: Optional[int]) -> Optional[User]:
        # блокировка строки владельца сериализует выбор главного фото по пользователю
        if user_id is None:
            return None
        result = await self.db.execute(
            select(User).where(User.id == user_id).with_for_update()
        )
        return result.scalar_one_or_none()
