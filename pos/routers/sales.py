# =========================================================
# SALES ROUTER
#
# - POST creates a sale atomically (header + items + stock)
# - GET returns the full history with nested items/products
# - Invoice renders a printable HTML page for one sale
# =========================================================

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from pos.database import get_db
from pos.billing.invoice import render_invoice_html
from pos.core.config import settings
from pos.core.errors import PosError, to_http_exception
from pos.core.rate_limiter import limiter
from pos.schemas.sale import SaleCreate, SaleResponse
from pos.services import sales_service
from pos.services.sales_service import CheckoutLine

router = APIRouter(prefix="/api/sales", tags=["Sales"])


# =========================================================
# CREATE SALE
# =========================================================
@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.CHECKOUT_RATE_LIMIT)
def create_sale(
    request: Request,
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
):
    lines = [
        CheckoutLine(
            product_id=item.product_id,
            quantity_sold=item.quantity_sold,
            sell_price=item.sell_price,
            unit_discount=item.unit_discount,
            total_price=item.total_price,
        )
        for item in sale_data.items
    ]

    try:
        return sales_service.create_sale(
            db,
            lines,
            customer_name=sale_data.customer_name,
            customer_phone=sale_data.customer_phone,
            customer_address=sale_data.customer_address,
            total_amount=sale_data.total_amount,
        )

    except PosError as exc:
        raise to_http_exception(exc)

    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Error creating sale")


# =========================================================
# LIST SALES (FULL HISTORY)
# =========================================================
@router.get("", response_model=list[SaleResponse])
def list_sales(db: Session = Depends(get_db)):
    return sales_service.list_sales(db)


# =========================================================
# GET SINGLE SALE
# =========================================================
@router.get("/{sale_id}", response_model=SaleResponse)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
):
    try:
        return sales_service.get_sale(db, sale_id)
    except PosError as exc:
        raise to_http_exception(exc)


# =========================================================
# PRINTABLE INVOICE
# =========================================================
@router.get("/{sale_id}/invoice", response_class=HTMLResponse)
def sale_invoice(
    sale_id: int,
    db: Session = Depends(get_db),
):
    try:
        sale = sales_service.get_sale(db, sale_id)
    except PosError as exc:
        raise to_http_exception(exc)

    return HTMLResponse(content=render_invoice_html(sale))
