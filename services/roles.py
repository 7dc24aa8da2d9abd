import logging
from typing import List, Optional

from core.exceptions import (
    AddRolesError,
    IdentityError,
    NotFoundError,
    RemoveRolesError,
    ValidationError,
)
from services.identity import IdentityStore

logger = logging.getLogger(__name__)


def parse_roles(roles: Optional[str]) -> set:
    """'Admin, Moderator,,' -> {'Admin', 'Moderator'}"""
    if not roles:
        return set()
    return {name.strip() for name in roles.split(",") if name.strip()}


class RoleService:

    def __init__(self, identity: IdentityStore):
        self.identity = identity

    async def edit_roles(self, username: str, roles: Optional[str]) -> List[str]:
        selected = parse_roles(roles)
        if not selected:
            raise ValidationError("You must select at least one role")

        user = await self.identity.find_by_username(username)
        if user is None:
            raise NotFoundError("User not found")

        current = set(await self.identity.roles_of(user))

        # добавленные роли не откатываются, если потом не удалось удалить лишние
        try:
            await self.identity.add_roles(user, selected - current)
        except IdentityError as exc:
            logger.error("Adding roles %s to %s failed: %s", selected - current, user.username, exc)
            raise AddRolesError("Failed to add to roles") from exc

        try:
            await self.identity.remove_roles(user, current - selected)
        except IdentityError as exc:
            logger.error("Removing roles %s from %s failed: %s", current - selected, user.username, exc)
            raise RemoveRolesError("Failed to remove from roles") from exc

        logger.info("Roles of %s changed: +%s -%s",
                    user.username, sorted(selected - current), sorted(current - selected))
        return await self.identity.roles_of(user)
