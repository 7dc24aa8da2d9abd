import asyncio
import os

# core.config читает окружение при импорте
os.environ.setdefault("TOKEN_KEY", "test-token-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AWS_S3_ENDPOINT_URL", "http://localhost:9000")
os.environ.setdefault("AWS_S3_BUCKET_NAME", "test-photos")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from core.database import get_db
from core.exceptions import AssetDeletionError
from core.security import create_access_token
from main import app
from models.base import Base
from models.photo import Photo
from models.role import Role, UserRole
from models.user import User
from services.moderation import ModerationService
from services.unit_of_work import UnitOfWork
from utils.s3 import get_asset_deleter
from utils.seed_db import seed_roles

ROLES = ["Member", "Admin", "Moderator"]


class FakeAssetDeleter:

    def __init__(self, error=None, on_delete=None):
        self.error = error
        self.on_delete = on_delete
        self.calls = []
        self.deleted = []

    async def delete(self, public_id):
        self.calls.append(public_id)
        if self.on_delete is not None:
            await self.on_delete(public_id)
        if self.error is not None:
            raise AssetDeletionError(self.error)
        self.deleted.append(public_id)


class Seeder:
    """Готовит данные в отдельных сессиях, как это сделал бы другой запрос."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def _user(self, username, roles):
        async with self.session_factory() as db:
            user = User(username=username, known_as=username.title())
            db.add(user)
            await db.flush()
            for name in roles:
                role = (await db.execute(select(Role).where(Role.name == name))).scalar_one()
                db.add(UserRole(user_id=user.id, role_id=role.id))
            await db.commit()
            return user

    async def _photo(self, user, approved, main, public_id):
        async with self.session_factory() as db:
            photo = Photo(
                user_id=user.id if user is not None else None,
                url=f"http://localhost:9000/test-photos/{public_id or 'default'}.jpg",
                public_id=public_id,
                is_approved=approved,
                is_main=main,
            )
            db.add(photo)
            await db.commit()
            return photo

    async def _get_photo(self, photo_id):
        async with self.session_factory() as db:
            return await db.get(Photo, photo_id)

    async def _photos_of(self, user):
        async with self.session_factory() as db:
            result = await db.execute(
                select(Photo).where(Photo.user_id == user.id).order_by(Photo.id)
            )
            return list(result.scalars().all())

    def user(self, username, roles=()):
        return asyncio.run(self._user(username, roles))

    def photo(self, user, approved=False, main=False, public_id=None):
        return asyncio.run(self._photo(user, approved, main, public_id))

    def get_photo(self, photo_id):
        return asyncio.run(self._get_photo(photo_id))

    def photos_of(self, user):
        return asyncio.run(self._photos_of(user))


class ModerationRunner:

    def __init__(self, session_factory, asset_deleter):
        self.session_factory = session_factory
        self.asset_deleter = asset_deleter

    async def _call(self, action, *args):
        async with self.session_factory() as db:
            service = ModerationService(UnitOfWork(db), self.asset_deleter)
            return await getattr(service, action)(*args)

    def pending(self):
        return asyncio.run(self._call("list_pending_photos"))

    def approve(self, photo_id):
        return asyncio.run(self._call("approve_photo", photo_id))

    def reject(self, photo_id):
        return asyncio.run(self._call("reject_photo", photo_id))


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def prepare():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with factory() as db:
            await seed_roles(db, ROLES)

    asyncio.run(prepare())
    try:
        yield factory
    finally:
        asyncio.run(engine.dispose())


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)


@pytest.fixture
def asset_deleter():
    return FakeAssetDeleter()


@pytest.fixture
def moderation(session_factory, asset_deleter):
    return ModerationRunner(session_factory, asset_deleter)


@pytest.fixture
def client(session_factory, asset_deleter):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_asset_deleter] = lambda: asset_deleter
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def headers_for():
    return auth_headers
