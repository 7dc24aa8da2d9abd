from typing import List

from pydantic import BaseModel, Field


class UserWithRoles(BaseModel):
    id: int = Field(..., description="PK в базе данных")
    username: str = Field(..., description="Логин пользователя")
    roles: List[str] = Field([], description="Названия ролей")

    class Config:
        from_attributes = True
        validate_by_name = True
