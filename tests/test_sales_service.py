from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from pos.core.errors import InsufficientStockError, NotFoundError, ValidationError
from pos.models.sale_items import SaleItem
from pos.models.sales import Sale
from pos.services import sales_service
from pos.services.sales_service import CheckoutLine


def _count(session_factory, model) -> int:
    with session_factory() as db:
        return db.query(model).count()


def test_checkout_decrements_stock_and_persists_totals(session_factory, make_product, stock_of):
    pid = make_product(quantity=5, sell_price="100.00")

    with session_factory() as db:
        sale = sales_service.create_sale(
            db,
            [CheckoutLine(product_id=pid, quantity_sold=2, sell_price=Decimal("100"), unit_discount=Decimal("10"))],
            customer_name="Asha",
            customer_phone="9876543210",
        )
        sale_id = sale.id
        assert sale.subtotal == Decimal("200.00")
        assert sale.discount == Decimal("20.00")
        assert sale.total_amount == Decimal("180.00")
        assert sum(item.total_price for item in sale.items) == sale.total_amount

    assert stock_of(pid) == 3

    with session_factory() as db:
        persisted = db.get(Sale, sale_id)
        assert persisted.total_amount == sum(item.total_price for item in persisted.items)


def test_insufficient_stock_rejects_without_changes(session_factory, make_product, stock_of):
    pid = make_product(name="Linen Shirt", quantity=1)

    with session_factory() as db:
        with pytest.raises(InsufficientStockError) as excinfo:
            sales_service.create_sale(
                db,
                [CheckoutLine(product_id=pid, quantity_sold=2, sell_price=Decimal("100"))],
            )

    error = excinfo.value
    assert error.line == 0
    assert error.product_id == pid
    assert error.requested == 2
    assert error.available == 1
    assert "Linen Shirt" in str(error)

    assert stock_of(pid) == 1
    assert _count(session_factory, Sale) == 0
    assert _count(session_factory, SaleItem) == 0


def test_later_line_failure_rolls_back_earlier_decrements(session_factory, make_product, stock_of):
    plenty = make_product(name="Belt", quantity=10)
    scarce = make_product(name="Watch", quantity=1)

    with session_factory() as db:
        with pytest.raises(InsufficientStockError) as excinfo:
            sales_service.create_sale(
                db,
                [
                    CheckoutLine(product_id=plenty, quantity_sold=4, sell_price=Decimal("100")),
                    CheckoutLine(product_id=scarce, quantity_sold=3, sell_price=Decimal("100")),
                ],
            )

    assert excinfo.value.line == 1
    assert stock_of(plenty) == 10
    assert stock_of(scarce) == 1


def test_repeated_lines_for_same_product_cannot_oversell(session_factory, make_product, stock_of):
    pid = make_product(quantity=5)

    with session_factory() as db:
        with pytest.raises(InsufficientStockError):
            sales_service.create_sale(
                db,
                [
                    CheckoutLine(product_id=pid, quantity_sold=3, sell_price=Decimal("100")),
                    CheckoutLine(product_id=pid, quantity_sold=3, sell_price=Decimal("100")),
                ],
            )

    assert stock_of(pid) == 5


def test_storage_failure_after_decrement_rolls_everything_back(session_factory, make_product, stock_of):
    pid = make_product(quantity=5)

    with session_factory() as db:
        @event.listens_for(db, "before_flush")
        def _fail_insert(session, flush_context, instances):
            raise OperationalError("INSERT INTO sales", {}, Exception("disk I/O error"))

        with pytest.raises(SQLAlchemyError):
            sales_service.create_sale(
                db,
                [CheckoutLine(product_id=pid, quantity_sold=2, sell_price=Decimal("100"))],
            )

    assert stock_of(pid) == 5
    assert _count(session_factory, Sale) == 0


def test_unknown_product_is_not_found(session_factory):
    with session_factory() as db:
        with pytest.raises(NotFoundError):
            sales_service.create_sale(
                db,
                [CheckoutLine(product_id=999, quantity_sold=1, sell_price=Decimal("10"))],
            )


@pytest.mark.parametrize(
    "line, total_amount, message",
    [
        (CheckoutLine(product_id=1, quantity_sold=0, sell_price=Decimal("10")), None, "quantity"),
        (CheckoutLine(product_id=1, quantity_sold=1, sell_price=Decimal("10"), unit_discount=Decimal("11")), None, "discount"),
        (CheckoutLine(product_id=1, quantity_sold=2, sell_price=Decimal("10"), total_price=Decimal("25")), None, "line total"),
        (CheckoutLine(product_id=1, quantity_sold=2, sell_price=Decimal("10")), Decimal("30"), "Sale total"),
    ],
)
def test_malformed_payload_is_rejected_before_any_write(session_factory, make_product, stock_of, line, total_amount, message):
    pid = make_product(quantity=5)

    with session_factory() as db:
        with pytest.raises(ValidationError, match=message):
            sales_service.create_sale(db, [line], total_amount=total_amount)

    assert stock_of(pid) == 5


def test_empty_sale_is_rejected(session_factory):
    with session_factory() as db:
        with pytest.raises(ValidationError, match="must contain items"):
            sales_service.create_sale(db, [])


def test_concurrent_checkouts_do_not_lose_updates(session_factory, make_product, stock_of):
    pid = make_product(quantity=10)

    def buy_two():
        with session_factory() as db:
            return sales_service.create_sale(
                db,
                [CheckoutLine(product_id=pid, quantity_sold=2, sell_price=Decimal("100"))],
            ).id

    with ThreadPoolExecutor(max_workers=4) as pool:
        sale_ids = [future.result() for future in [pool.submit(buy_two) for _ in range(4)]]

    assert len(set(sale_ids)) == 4
    assert stock_of(pid) == 2


def test_concurrent_checkouts_never_oversell(session_factory, make_product, stock_of):
    pid = make_product(quantity=3)

    def buy_one():
        with session_factory() as db:
            try:
                sales_service.create_sale(
                    db,
                    [CheckoutLine(product_id=pid, quantity_sold=1, sell_price=Decimal("100"))],
                )
                return True
            except InsufficientStockError:
                return False

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(lambda _: buy_one(), range(6)))

    assert results.count(True) == 3
    assert results.count(False) == 3
    assert stock_of(pid) == 0
    assert _count(session_factory, Sale) == 3


def test_line_numbers_agree_between_validation_and_stock_errors(session_factory, make_product):
    pid = make_product(quantity=1)
    first = CheckoutLine(product_id=pid, quantity_sold=1, sell_price=Decimal("100"))

    with session_factory() as db:
        with pytest.raises(ValidationError, match="^Line 1: quantity"):
            sales_service.create_sale(
                db,
                [first, CheckoutLine(product_id=pid, quantity_sold=0, sell_price=Decimal("100"))],
            )

        with pytest.raises(InsufficientStockError) as excinfo:
            sales_service.create_sale(
                db,
                [first, CheckoutLine(product_id=pid, quantity_sold=1, sell_price=Decimal("100"))],
            )

    assert excinfo.value.line == 1
