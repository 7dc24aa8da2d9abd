import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.database import AsyncSessionLocal, engine
from models.base import Base
from models.photo import Photo  # noqa: F401
from models.role import Role, UserRole  # noqa: F401
from models.user import User  # noqa: F401
from utils.seed_db import seed_roles

from routers.admin import router as admin_router
from routers.health import router as health_router
from routers.photos import router as photos_router

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Сначала создаём все таблицы
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        created = await seed_roles(db, settings.seed_roles)
    if created:
        logger.info("Seeded roles: %s", ", ".join(created))

    yield

    # Закрываем все соединения пула
    await engine.dispose()


app = FastAPI(
    title="Dating App Admin Backend",
    version="0.1.0",
    description="Администрирование ролей и модерация фото",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_request_time(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} completed in {process_time:.2f} ms"
    )
    return response

app.include_router(admin_router)
app.include_router(photos_router)
app.include_router(health_router)


@app.get("/")
async def root():
    return {"message": "Dating App Admin Backend"}
