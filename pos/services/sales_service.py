# =========================================================
# SALES SERVICE
#
# Checkout is a single storage-layer operation:
# - every stock decrement is a conditional UPDATE (quantity >= n)
# - header, line items and decrements commit together
# - any failure rolls the whole sale back
# =========================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from pos.core.errors import InsufficientStockError, NotFoundError, ValidationError
from pos.database import begin_write
from pos.models.products import Product
from pos.models.sale_items import SaleItem
from pos.models.sales import Sale

logger = logging.getLogger("pos.sales")

TWO_PLACES = Decimal("0.01")
TOTAL_TOLERANCE = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(TWO_PLACES)


@dataclass(frozen=True)
class CheckoutLine:
    product_id: int
    quantity_sold: int
    sell_price: Decimal
    unit_discount: Decimal = Decimal("0")
    # Amount the client computed for this line, checked against ours.
    total_price: Optional[Decimal] = None

    @property
    def line_subtotal(self) -> Decimal:
        return to_money(self.sell_price * self.quantity_sold)

    @property
    def line_discount(self) -> Decimal:
        return to_money(self.unit_discount * self.quantity_sold)

    @property
    def line_total(self) -> Decimal:
        return self.line_subtotal - self.line_discount


@dataclass(frozen=True)
class SaleTotals:
    subtotal: Decimal
    discount: Decimal
    total: Decimal


def compute_totals(lines: Iterable[CheckoutLine]) -> SaleTotals:
    subtotal = Decimal("0.00")
    discount = Decimal("0.00")
    for line in lines:
        subtotal += line.line_subtotal
        discount += line.line_discount
    return SaleTotals(
        subtotal=subtotal,
        discount=discount,
        total=max(Decimal("0.00"), subtotal - discount),
    )


def _validate_lines(lines: Sequence[CheckoutLine], total_amount: Optional[Decimal]) -> SaleTotals:
    if not lines:
        raise ValidationError("Sale must contain items")

    for index, line in enumerate(lines):
        if line.quantity_sold is None or line.quantity_sold <= 0:
            raise ValidationError(f"Line {index}: quantity must be greater than zero")
        if line.sell_price < 0:
            raise ValidationError(f"Line {index}: sell price cannot be negative")
        if line.unit_discount < 0 or line.unit_discount > line.sell_price:
            raise ValidationError(f"Line {index}: unit discount must be between 0 and the sell price")
        if line.total_price is not None and abs(Decimal(line.total_price) - line.line_total) > TOTAL_TOLERANCE:
            raise ValidationError(f"Line {index}: line total does not match price, quantity and discount")

    totals = compute_totals(lines)

    if total_amount is not None and abs(Decimal(total_amount) - totals.total) > TOTAL_TOLERANCE:
        raise ValidationError("Sale total does not match its line items")

    return totals


def create_sale(
    db: Session,
    lines: Sequence[CheckoutLine],
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
    customer_address: Optional[str] = None,
    total_amount: Optional[Decimal] = None,
) -> Sale:
    """Persist a sale, its line items and the stock decrements as one unit.

    Raises ``ValidationError`` for malformed lines or mismatched totals,
    ``NotFoundError`` for unknown products and ``InsufficientStockError``
    naming the first line that would drive stock negative. Lines are
    numbered from 0 in the order given. Nothing is written in any of
    those cases.
    """
    totals = _validate_lines(lines, total_amount)

    product_ids = {line.product_id for line in lines}

    try:
        begin_write(db)

        products = {
            product.id: product
            for product in db.query(Product).filter(Product.id.in_(product_ids)).all()
        }

        missing = sorted(product_ids - set(products))
        if missing:
            db.rollback()
            raise NotFoundError(f"Product not found: {missing[0]}")

        for index, line in enumerate(lines):
            result = db.execute(
                update(Product)
                .where(
                    Product.id == line.product_id,
                    Product.quantity >= line.quantity_sold,
                )
                .values(quantity=Product.quantity - line.quantity_sold)
                .execution_options(synchronize_session=False)
            )

            if result.rowcount != 1:
                available = (
                    db.query(Product.quantity)
                    .filter(Product.id == line.product_id)
                    .scalar()
                )
                product_name = products[line.product_id].name
                db.rollback()
                logger.info(
                    "Checkout rejected: product %s requested %s available %s",
                    line.product_id,
                    line.quantity_sold,
                    available,
                )
                raise InsufficientStockError(
                    line=index,
                    product_id=line.product_id,
                    product_name=product_name,
                    requested=line.quantity_sold,
                    available=int(available or 0),
                )

        sale = Sale(
            customer_name=customer_name,
            customer_phone=customer_phone,
            customer_address=customer_address,
            subtotal=totals.subtotal,
            discount=totals.discount,
            total_amount=totals.total,
        )
        sale.items = [
            SaleItem(
                product_id=line.product_id,
                quantity_sold=line.quantity_sold,
                sell_price=to_money(line.sell_price),
                unit_discount=to_money(line.unit_discount),
                total_price=line.line_total,
            )
            for line in lines
        ]

        db.add(sale)
        db.commit()

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Checkout failed, sale rolled back")
        raise

    logger.info(
        "Sale %s completed: %s lines, total %s",
        sale.id,
        len(lines),
        totals.total,
    )

    return get_sale(db, sale.id)


def get_sale(db: Session, sale_id: int) -> Sale:
    sale = (
        db.query(Sale)
        .options(joinedload(Sale.items).joinedload(SaleItem.product))
        .filter(Sale.id == sale_id)
        .first()
    )

    if not sale:
        raise NotFoundError("Sale not found")

    return sale


def list_sales(db: Session) -> list[Sale]:
    """Full sales history, newest first, with items and their products."""
    return (
        db.query(Sale)
        .options(joinedload(Sale.items).joinedload(SaleItem.product))
        .order_by(Sale.id.desc())
        .all()
    )
