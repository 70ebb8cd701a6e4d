from pydantic import BaseModel, EmailStr, Field
from uuid import UUID

from coursequiz.core.base_config import UTCDateTime


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8)


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: EmailStr
    created_at: UTCDateTime

    class Config:
        from_attributes = True
