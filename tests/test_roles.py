import asyncio

import pytest

from core.exceptions import (
    AddRolesError,
    IdentityError,
    NotFoundError,
    RemoveRolesError,
    ValidationError,
)
from services.identity import IdentityStore
from services.roles import RoleService, parse_roles
from utils.seed_db import seed_roles


def edit_roles(session_factory, username, roles):
    async def go():
        async with session_factory() as db:
            return await RoleService(IdentityStore(db)).edit_roles(username, roles)

    return asyncio.run(go())


def roles_of(session_factory, user):
    async def go():
        async with session_factory() as db:
            return await IdentityStore(db).roles_of(user)

    return asyncio.run(go())


def test_parse_roles_trims_and_drops_blanks():
    assert parse_roles(" Admin, Moderator,,Admin ") == {"Admin", "Moderator"}
    assert parse_roles(None) == set()
    assert parse_roles(" , ") == set()


def test_edit_roles_adds_missing_and_removes_extra(seed, session_factory):
    alice = seed.user("alice", roles=["Member", "Moderator"])

    result = edit_roles(session_factory, "alice", "Admin,Moderator")

    assert result == ["Admin", "Moderator"]
    assert roles_of(session_factory, alice) == ["Admin", "Moderator"]


def test_edit_roles_with_same_roles_changes_nothing(seed, session_factory):
    seed.user("alice", roles=["Member"])

    assert edit_roles(session_factory, "alice", "Member") == ["Member"]


@pytest.mark.parametrize("roles", [None, "", " , "])
def test_edit_roles_requires_at_least_one_role(seed, session_factory, roles):
    seed.user("alice", roles=["Member"])

    with pytest.raises(ValidationError, match="You must select at least one role"):
        edit_roles(session_factory, "alice", roles)


def test_edit_roles_for_unknown_user(seed, session_factory):
    with pytest.raises(NotFoundError, match="User not found"):
        edit_roles(session_factory, "nobody", "Member")


def test_edit_roles_with_unknown_role_keeps_current_roles(seed, session_factory):
    alice = seed.user("alice", roles=["Member"])

    with pytest.raises(AddRolesError, match="Failed to add to roles"):
        edit_roles(session_factory, "alice", "Superuser")

    assert roles_of(session_factory, alice) == ["Member"]


def test_users_with_roles_are_ordered_by_username(seed, session_factory):
    seed.user("zoe", roles=["Member"])
    seed.user("admin", roles=["Admin", "Moderator"])
    seed.user("bob")

    async def go():
        async with session_factory() as db:
            return await IdentityStore(db).users_with_roles()

    users = asyncio.run(go())

    assert [(u.username, u.roles) for u in users] == [
        ("admin", ["Admin", "Moderator"]),
        ("bob", []),
        ("zoe", ["Member"]),
    ]


def test_seed_roles_only_creates_missing(session_factory):
    async def go():
        async with session_factory() as db:
            return await seed_roles(db, ["Member", "Admin", "Moderator", "Support"])

    assert asyncio.run(go()) == ["Support"]


def test_failed_removal_keeps_added_roles(seed, session_factory, monkeypatch):
    alice = seed.user("alice", roles=["Member"])

    async def broken_remove(self, user, names):
        raise IdentityError("deadlock detected")

    monkeypatch.setattr(IdentityStore, "remove_roles", broken_remove)
    with pytest.raises(RemoveRolesError, match="Failed to remove from roles"):
        edit_roles(session_factory, "alice", "Admin")
    monkeypatch.undo()

    assert roles_of(session_factory, alice) == ["Admin", "Member"]
