from typing import Optional

from pydantic import BaseModel, Field


class PhotoRead(BaseModel):
    id: int = Field(..., description="PK в базе данных")
    url: str = Field(..., description="URL изображения")
    is_main: bool = Field(..., alias="isMain", description="Признак главной фотографии")

    class Config:
        from_attributes = True
        validate_by_name = True


class PhotoForApproval(BaseModel):
    id: int = Field(..., description="PK в базе данных")
    url: str = Field(..., description="URL изображения")
    is_approved: bool = Field(..., alias="isApproved", description="Одобрено ли фото")
    username: Optional[str] = Field(None, description="Владелец; нет, если владелец не найден")

    class Config:
        from_attributes = True
        validate_by_name = True
