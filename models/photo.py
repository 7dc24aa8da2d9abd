# models/photo.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, text
from sqlalchemy.sql import func

from .base import Base
from .user import User  # noqa: F401  таблица users нужна для внешнего ключа


class Photo(Base):
    __tablename__ = "photos"
    __table_args__ = (
        # не больше одного главного фото на пользователя
        Index(
            "uq_photos_one_main_per_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_main"),
            sqlite_where=text("is_main = 1"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    # фото переживают удаление владельца (ON DELETE SET NULL)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    url = Column(String(length=512), nullable=False)
    # ключ объекта во внешнем хранилище; у дефолтных/сидовых фото его нет
    public_id = Column(String(length=255), nullable=True)
    is_main = Column(Boolean, default=False, nullable=False)
    is_approved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Photo id={self.id} approved={self.is_approved} main={self.is_main}>"
