import logging
from typing import Optional

from minio import Minio
from minio.error import S3Error
from starlette.concurrency import run_in_threadpool
from urllib3.exceptions import HTTPError

from core.config import settings
from core.exceptions import AssetDeletionError

logger = logging.getLogger(__name__)

# ==== Настройка клиента MinIO ====
_endpoint = settings.AWS_S3_ENDPOINT_URL.replace("https://", "").replace("http://", "")
_s3 = Minio(
    endpoint=_endpoint,
    access_key=settings.AWS_ACCESS_KEY_ID,
    secret_key=settings.AWS_SECRET_ACCESS_KEY,
    region=settings.AWS_S3_REGION,
    secure=settings.AWS_S3_SECURE,
)


def delete_file_from_s3(s3_key: str, bucket_name: str) -> None:
    """
    Удаляет объект из MinIO/S3.
    Удаление уже отсутствующего объекта считается успешным.
    Бросает AssetDeletionError с текстом ошибки хранилища.
    """
    try:
        _s3.remove_object(bucket_name=bucket_name, object_name=s3_key)
    except S3Error as e:
        raise AssetDeletionError(getattr(e, "message", None) or str(e)) from e
    except HTTPError as e:
        # хранилище недоступно: обрыв соединения, таймаут, исчерпаны ретраи
        raise AssetDeletionError(str(e)) from e


class S3AssetDeleter:

    def __init__(self, bucket_name: Optional[str] = None):
        self.bucket_name = bucket_name or settings.AWS_S3_BUCKET_NAME

    async def delete(self, public_id: str) -> None:
        # клиент minio синхронный, не блокируем loop
        await run_in_threadpool(delete_file_from_s3, public_id, self.bucket_name)
        logger.info("Deleted asset %s from bucket %s", public_id, self.bucket_name)


def get_asset_deleter() -> S3AssetDeleter:
    return S3AssetDeleter()
