from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    DATABASE_URL: str = "sqlite+aiosqlite:///./datingapp.db"
    TOKEN_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_S3_BUCKET_NAME: str = "photos"
    AWS_S3_ENDPOINT_URL: str = "http://localhost:9000"
    AWS_S3_REGION: str = "us-east-1"
    AWS_S3_SECURE: bool = False

    # Роли, которые должны существовать в базе после старта
    SEED_ROLES: str = "Member,Admin,Moderator"
    DEBUG: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def seed_roles(self) -> List[str]:
        return [name.strip() for name in self.SEED_ROLES.split(",") if name.strip()]


# Создаём глобальный объект, который будем импортировать везде
settings = Settings()
