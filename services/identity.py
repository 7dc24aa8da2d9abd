from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import IdentityError
from models.role import Role, UserRole
from models.user import User
from schemas.user import UserWithRoles


class IdentityStore:
    """Пользователи и их роли. add_roles/remove_roles коммитят каждый шаг отдельно."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.username == username.strip().lower())
        )
        return result.scalar_one_or_none()

    async def roles_of(self, user: User) -> List[str]:
        result = await self.db.execute(
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user.id)
            .order_by(Role.name)
        )
        return list(result.scalars().all())

    async def add_roles(self, user: User, names: Iterable[str]) -> None:
        names = set(names)
        if not names:
            return

        roles = (await self.db.execute(select(Role).where(Role.name.in_(names)))).scalars().all()
        missing = names - {role.name for role in roles}
        if missing:
            raise IdentityError(f"Unknown roles: {', '.join(sorted(missing))}")

        for role in roles:
            self.db.add(UserRole(user_id=user.id, role_id=role.id))
        await self._commit()

    async def remove_roles(self, user: User, names: Iterable[str]) -> None:
        names = set(names)
        if not names:
            return

        await self.db.execute(
            delete(UserRole)
            .where(
                UserRole.user_id == user.id,
                UserRole.role_id.in_(select(Role.id).where(Role.name.in_(names))),
            )
            .execution_options(synchronize_session=False)
        )
        await self._commit()

    async def users_with_roles(self) -> List[UserWithRoles]:
        users = (await self.db.execute(select(User).order_by(User.username))).scalars().all()

        rows = await self.db.execute(
            select(UserRole.user_id, Role.name)
            .join(Role, Role.id == UserRole.role_id)
            .order_by(Role.name)
        )
        roles_by_user: Dict[int, List[str]] = {}
        for user_id, role_name in rows.all():
            roles_by_user.setdefault(user_id, []).append(role_name)

        return [
            UserWithRoles(id=u.id, username=u.username, roles=roles_by_user.get(u.id, []))
            for u in users
        ]

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise IdentityError(str(exc)) from exc
