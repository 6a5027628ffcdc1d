# schemas/billing.py

from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List, Optional

from pos.schemas.sale import SaleResponse


class CartLineRequest(BaseModel):
    product_id: int
    quantity: int = Field(1, gt=0)
    unit_discount: Decimal = Field(Decimal("0"), ge=0)


class CustomerInfo(BaseModel):
    name: str = ""
    phone: str = ""
    address: str = ""


class QuoteRequest(BaseModel):
    lines: List[CartLineRequest]


class CheckoutRequest(BaseModel):
    customer: CustomerInfo
    lines: List[CartLineRequest]


class CartLineResponse(BaseModel):
    product_id: int
    name: str
    sell_price: Decimal
    quantity: int
    unit_discount: Decimal
    line_total: Decimal
    stock: int


class CartAdjustment(BaseModel):
    line: int
    product_id: int
    name: str
    requested: int
    quantity: int
    available: int
    reason: str


class QuoteResponse(BaseModel):
    lines: List[CartLineResponse]
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    adjustments: List[CartAdjustment]


class InvoiceResponse(BaseModel):
    invoice_number: int
    amount_in_words: str
    text: str
    share_url: Optional[str]


class CheckoutResponse(BaseModel):
    sale: SaleResponse
    invoice: InvoiceResponse
