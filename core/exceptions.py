"""Ошибки сервисного слоя. Роутеры переводят их в HTTP 400 с текстом ошибки."""


class ModerationError(Exception):
    """Базовая ошибка админских операций."""


class NotFoundError(ModerationError):
    pass


class InvalidStateError(ModerationError):
    """Операция недопустима для текущего состояния фото."""


class AssetDeletionError(ModerationError):
    """Хранилище не смогло удалить файл; сообщение передаётся как есть."""


class PersistenceError(ModerationError):
    pass


class ValidationError(ModerationError):
    pass


class AddRolesError(ModerationError):
    pass


class RemoveRolesError(ModerationError):
    pass


class IdentityError(Exception):
    """Сбой хранилища ролей (неизвестная роль или неудачный commit)."""
