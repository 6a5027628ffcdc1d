# =========================================================
# BILLING ROUTER
#
# Quote: price a cart against current stock, no writes
# Checkout: customer details + cart -> sale + invoice
# =========================================================

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from pos.database import get_db
from pos.billing.cart import (
    AddItem,
    BillingState,
    ProductSnapshot,
    SetCustomer,
    SetQuantity,
    SetUnitDiscount,
    reduce,
)
from pos.billing.invoice import build_invoice
from pos.core.config import settings
from pos.core.errors import InsufficientStockError, PosError, to_http_exception
from pos.core.rate_limiter import limiter
from pos.models.products import Product
from pos.schemas.billing import (
    CheckoutRequest,
    CheckoutResponse,
    QuoteRequest,
    QuoteResponse,
)
from pos.services import sales_service
from pos.services.sales_service import CheckoutLine

router = APIRouter(prefix="/api/billing", tags=["Billing"])


# =========================================================
# CART ASSEMBLY
# =========================================================
def _build_cart(db: Session, lines, state: BillingState | None = None):
    """Replay requested lines through the reducer against fresh stock.

    Returns the resulting state and the lines whose quantity had to be
    lowered to the stock on hand. The cart holds one line per product, so
    a request naming a product twice is rejected.
    """
    state = state or BillingState()
    adjustments = []

    product_ids = {line.product_id for line in lines}
    if len(product_ids) != len(lines):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Duplicate products in cart are not allowed",
        )

    products = {
        product.id: product
        for product in db.query(Product).filter(Product.id.in_(product_ids)).all()
    }

    for index, line in enumerate(lines):
        product = products.get(line.product_id)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Product not found: {line.product_id}",
            )

        snapshot = ProductSnapshot.from_product(product)
        if snapshot.quantity <= 0:
            adjustments.append({
                "line": index,
                "product_id": snapshot.id,
                "name": snapshot.name,
                "requested": line.quantity,
                "quantity": 0,
                "available": snapshot.quantity,
                "reason": "out_of_stock",
            })
            continue

        state = reduce(state, AddItem(snapshot))
        state = reduce(state, SetQuantity(snapshot.id, line.quantity))
        state = reduce(state, SetUnitDiscount(snapshot.id, line.unit_discount))

        cart_line = state.line_for(snapshot.id)
        if cart_line.quantity != line.quantity:
            adjustments.append({
                "line": index,
                "product_id": snapshot.id,
                "name": snapshot.name,
                "requested": line.quantity,
                "quantity": cart_line.quantity,
                "available": snapshot.quantity,
                "reason": "insufficient_stock",
            })

    return state, adjustments


def _quote(state: BillingState, adjustments) -> dict:
    return {
        "lines": [
            {
                "product_id": line.product.id,
                "name": line.product.name,
                "sell_price": line.product.sell_price,
                "quantity": line.quantity,
                "unit_discount": line.unit_discount,
                "line_total": line.line_total,
                "stock": line.product.quantity,
            }
            for line in state.lines
        ],
        "subtotal": state.subtotal,
        "discount": state.discount,
        "total": state.total,
        "adjustments": adjustments,
    }


# =========================================================
# QUOTE
# =========================================================
@router.post("/quote", response_model=QuoteResponse)
def quote_cart(
    quote_data: QuoteRequest,
    db: Session = Depends(get_db),
):
    state, adjustments = _build_cart(db, quote_data.lines)
    db.rollback()
    return _quote(state, adjustments)


# =========================================================
# CHECKOUT
# =========================================================
@router.post("/checkout", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.CHECKOUT_RATE_LIMIT)
def checkout(
    request: Request,
    checkout_data: CheckoutRequest,
    db: Session = Depends(get_db),
):
    customer = checkout_data.customer
    state = reduce(
        BillingState(),
        SetCustomer(name=customer.name, phone=customer.phone, address=customer.address),
    )

    if not state.customer.is_complete:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter customer name and phone number",
        )

    if not checkout_data.lines:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cart is empty",
        )

    # The cart is priced from the stock read here; the checkout service
    # re-checks stock inside its own transaction.
    state, adjustments = _build_cart(db, checkout_data.lines, state)
    db.rollback()

    if adjustments:
        first = adjustments[0]
        raise to_http_exception(
            InsufficientStockError(
                line=first["line"],
                product_id=first["product_id"],
                product_name=first["name"],
                requested=first["requested"],
                available=first["available"],
            )
        )

    lines = [
        CheckoutLine(
            product_id=line.product.id,
            quantity_sold=line.quantity,
            sell_price=line.product.sell_price,
            unit_discount=line.unit_discount,
        )
        for line in state.lines
    ]

    try:
        sale = sales_service.create_sale(
            db,
            lines,
            customer_name=state.customer.name.strip(),
            customer_phone=state.customer.phone.strip(),
            customer_address=state.customer.address.strip() or None,
            total_amount=state.total,
        )

    except PosError as exc:
        raise to_http_exception(exc)

    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Error processing sale")

    return {
        "sale": sale,
        "invoice": build_invoice(sale),
    }
