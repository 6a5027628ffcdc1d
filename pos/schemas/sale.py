# schemas/sale.py

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from decimal import Decimal

from pos.schemas.product import ProductBrief


class SaleItemCreate(BaseModel):
    product_id: int
    quantity_sold: int = Field(..., gt=0)
    sell_price: Decimal = Field(..., ge=0)
    unit_discount: Decimal = Field(Decimal("0"), ge=0)
    total_price: Optional[Decimal] = None


class SaleCreate(BaseModel):
    items: List[SaleItemCreate]
    total_amount: Optional[Decimal] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None


class SaleItemResponse(BaseModel):
    id: int
    product_id: Optional[int]
    quantity_sold: int
    sell_price: Decimal
    unit_discount: Decimal
    total_price: Decimal
    product: Optional[ProductBrief]

    class Config:
        from_attributes = True


class SaleResponse(BaseModel):
    id: int
    customer_name: Optional[str]
    customer_phone: Optional[str]
    customer_address: Optional[str]
    subtotal: Decimal
    discount: Decimal
    total_amount: Decimal
    created_at: datetime
    items: List[SaleItemResponse]

    class Config:
        from_attributes = True
