# =========================================================
# DASHBOARD AGGREGATION
#
# Pure aggregation over the full sales history:
# - revenue, cost, net profit, margin
# - top 5 products by units sold (grouped by product name)
# - revenue per calendar date, oldest first
# =========================================================

from collections import OrderedDict
from decimal import Decimal

from sqlalchemy.orm import Session

from pos.services.sales_service import list_sales

TOP_PRODUCTS_LIMIT = 5
DELETED_PRODUCT_LABEL = "Deleted product"


def _total_cost(sales) -> Decimal:
    total_cost = Decimal("0.00")

    for sale in sales:
        for item in sale.items:
            # Lines whose product was deleted carry no cost.
            if item.product is None:
                continue
            total_cost += Decimal(item.product.cost_price or 0) * int(item.quantity_sold or 0)

    return total_cost


def _best_selling_products(sales, limit: int = TOP_PRODUCTS_LIMIT) -> list[dict]:
    units_by_name = OrderedDict()

    for sale in sales:
        for item in sale.items:
            name = item.product.name if item.product is not None else DELETED_PRODUCT_LABEL
            units_by_name[name] = units_by_name.get(name, 0) + int(item.quantity_sold or 0)

    ranked = sorted(units_by_name.items(), key=lambda entry: entry[1], reverse=True)

    return [
        {"name": name, "total_sold": total_sold}
        for name, total_sold in ranked[:limit]
    ]


def _sales_by_date(sales) -> list[dict]:
    totals_by_date = {}

    for sale in sales:
        day = sale.created_at.date()
        totals_by_date[day] = totals_by_date.get(day, Decimal("0.00")) + Decimal(sale.total_amount or 0)

    return [
        {"date": day, "total": total}
        for day, total in sorted(totals_by_date.items())
    ]


def summarize_sales(sales) -> dict:
    """Aggregate a sales history into the dashboard summary.

    ``sales`` is any iterable of objects shaped like ``Sale`` with loaded
    ``items`` (each with ``quantity_sold`` and an optional ``product``).
    """
    sales = list(sales)

    total_sales = sum((Decimal(sale.total_amount or 0) for sale in sales), Decimal("0.00"))
    total_cost = _total_cost(sales)
    net_profit = total_sales - total_cost

    if total_sales == 0:
        profit_margin_percentage = Decimal("0.00")
    else:
        profit_margin_percentage = (
            (net_profit / total_sales) * 100
        ).quantize(Decimal("0.01"))

    return {
        "total_sales": total_sales,
        "total_cost": total_cost,
        "net_profit": net_profit,
        "profit_margin_percentage": profit_margin_percentage,
        "total_orders": len(sales),
        "total_items_sold": sum(
            int(item.quantity_sold or 0) for sale in sales for item in sale.items
        ),
        "best_selling_products": _best_selling_products(sales),
        "sales_by_date": _sales_by_date(sales),
    }


def build_dashboard(db: Session) -> dict:
    return summarize_sales(list_sales(db))
