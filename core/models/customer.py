"""Customer domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, EmailStr


class CustomerCreate(BaseModel):
    """Data required to create a customer."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)
    address: str = Field("", max_length=500)


class CustomerUpdate(BaseModel):
    """Data that can be updated on a customer. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=500)


class Customer(BaseModel):
    """Full customer entity as stored."""

    id: UUID
    user_id: UUID
    name: str
    email: str
    phone: str | None = None
    address: str = ""
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
