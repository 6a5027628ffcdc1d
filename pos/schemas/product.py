from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime

from pos.schemas.category import CategoryResponse
from pos.schemas.supplier import SupplierResponse


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    brand: str | None = None

    cost_price: Decimal = Field(
        ...,
        ge=0,
        lt=100_000_000,
        description="Cost price must be below 100 million"
    )

    sell_price: Decimal = Field(
        ...,
        ge=0,
        lt=100_000_000,
        description="Sell price must be below 100 million"
    )

    quantity: int = Field(0, ge=0)
    category_id: int | None = None
    supplier_id: int | None = None


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    brand: str | None = None
    cost_price: Decimal | None = Field(None, ge=0, lt=100_000_000)
    sell_price: Decimal | None = Field(None, ge=0, lt=100_000_000)
    quantity: int | None = Field(None, ge=0)
    category_id: int | None = None
    supplier_id: int | None = None


class ProductBrief(BaseModel):
    id: int
    name: str
    brand: str | None
    cost_price: float
    sell_price: float

    class Config:
        from_attributes = True


class ProductResponse(BaseModel):
    id: int
    name: str
    brand: str | None
    cost_price: float
    sell_price: float
    quantity: int
    category_id: int | None
    supplier_id: int | None
    category: CategoryResponse | None
    supplier: SupplierResponse | None
    created_at: datetime

    class Config:
        from_attributes = True
