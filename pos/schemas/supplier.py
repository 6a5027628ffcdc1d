from datetime import datetime

from pydantic import BaseModel, Field


class SupplierCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    contact: str | None = None
    address: str | None = None


class SupplierUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    contact: str | None = None
    address: str | None = None


class SupplierResponse(BaseModel):
    id: int
    name: str
    contact: str | None
    address: str | None
    created_at: datetime

    class Config:
        from_attributes = True
