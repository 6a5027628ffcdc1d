"""Billing screen state.

The cart, customer form and product search live in one immutable
``BillingState``. Every change goes through ``reduce(state, action)``, which
returns a new state and never mutates the old one.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, Optional, Union

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class ProductSnapshot:
    """A product as last fetched; ``quantity`` is stock at fetch time."""

    id: int
    name: str
    sell_price: Decimal
    quantity: int

    @classmethod
    def from_product(cls, product) -> "ProductSnapshot":
        return cls(
            id=product.id,
            name=product.name,
            sell_price=Decimal(str(product.sell_price)),
            quantity=int(product.quantity),
        )


@dataclass(frozen=True)
class CartLine:
    product: ProductSnapshot
    quantity: int
    unit_discount: Decimal = ZERO

    @property
    def line_subtotal(self) -> Decimal:
        return self.product.sell_price * self.quantity

    @property
    def line_discount(self) -> Decimal:
        return self.unit_discount * self.quantity

    @property
    def line_total(self) -> Decimal:
        return self.line_subtotal - self.line_discount


@dataclass(frozen=True)
class Customer:
    name: str = ""
    phone: str = ""
    address: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.name.strip()) and bool(self.phone.strip())


@dataclass(frozen=True)
class BillingState:
    lines: tuple = ()
    customer: Customer = field(default_factory=Customer)
    search: str = ""

    def line_for(self, product_id: int) -> Optional[CartLine]:
        for line in self.lines:
            if line.product.id == product_id:
                return line
        return None

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_subtotal for line in self.lines), ZERO)

    @property
    def discount(self) -> Decimal:
        return sum((line.line_discount for line in self.lines), ZERO)

    @property
    def total(self) -> Decimal:
        return max(ZERO, self.subtotal - self.discount)

    @property
    def is_empty(self) -> bool:
        return not self.lines


# Actions


@dataclass(frozen=True)
class AddItem:
    product: ProductSnapshot


@dataclass(frozen=True)
class RemoveItem:
    product_id: int


@dataclass(frozen=True)
class SetQuantity:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class SetUnitDiscount:
    product_id: int
    amount: Decimal


@dataclass(frozen=True)
class SetCustomer:
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class SetSearch:
    text: str


@dataclass(frozen=True)
class Clear:
    pass


Action = Union[AddItem, RemoveItem, SetQuantity, SetUnitDiscount, SetCustomer, SetSearch, Clear]


def _clamp_quantity(quantity: int, product: ProductSnapshot) -> int:
    return max(1, min(quantity, product.quantity))


def _clamp_discount(amount, product: ProductSnapshot) -> Decimal:
    amount = Decimal(str(amount))
    return max(ZERO, min(amount, product.sell_price))


def _replace_line(state: BillingState, product_id: int, build) -> BillingState:
    return replace(
        state,
        lines=tuple(
            build(line) if line.product.id == product_id else line
            for line in state.lines
        ),
    )


def reduce(state: BillingState, action: Action) -> BillingState:
    if isinstance(action, AddItem):
        product = action.product
        if product.quantity <= 0:
            return state

        existing = state.line_for(product.id)
        if existing is None:
            return replace(state, lines=state.lines + (CartLine(product=product, quantity=1),))

        return _replace_line(
            state,
            product.id,
            lambda line: replace(
                line,
                product=product,
                quantity=_clamp_quantity(line.quantity + 1, product),
            ),
        )

    if isinstance(action, RemoveItem):
        return replace(
            state,
            lines=tuple(line for line in state.lines if line.product.id != action.product_id),
        )

    if isinstance(action, SetQuantity):
        if action.quantity < 1 or state.line_for(action.product_id) is None:
            return state
        return _replace_line(
            state,
            action.product_id,
            lambda line: replace(line, quantity=_clamp_quantity(action.quantity, line.product)),
        )

    if isinstance(action, SetUnitDiscount):
        if state.line_for(action.product_id) is None:
            return state
        return _replace_line(
            state,
            action.product_id,
            lambda line: replace(line, unit_discount=_clamp_discount(action.amount, line.product)),
        )

    if isinstance(action, SetCustomer):
        customer = state.customer
        return replace(
            state,
            customer=Customer(
                name=customer.name if action.name is None else action.name,
                phone=customer.phone if action.phone is None else action.phone,
                address=customer.address if action.address is None else action.address,
            ),
        )

    if isinstance(action, SetSearch):
        return replace(state, search=action.text)

    if isinstance(action, Clear):
        return BillingState()

    raise TypeError(f"Unknown billing action: {action!r}")


def reduce_all(state: BillingState, actions: Iterable[Action]) -> BillingState:
    for action in actions:
        state = reduce(state, action)
    return state


def filter_products(products, search: str):
    needle = (search or "").strip().lower()
    if not needle:
        return list(products)
    return [product for product in products if needle in product.name.lower()]
