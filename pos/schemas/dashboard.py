# schemas/dashboard.py

from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List


class BestSellingProduct(BaseModel):
    name: str
    total_sold: int


class SalesByDate(BaseModel):
    date: date
    total: Decimal


class DashboardSummaryResponse(BaseModel):
    total_sales: Decimal
    total_cost: Decimal
    net_profit: Decimal
    profit_margin_percentage: Decimal
    total_orders: int
    total_items_sold: int
    best_selling_products: List[BestSellingProduct]
    sales_by_date: List[SalesByDate]
