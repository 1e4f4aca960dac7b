"""ORM models for the inventory kernel."""

from inventory_kernel.models.expense import ExpenseModel
from inventory_kernel.models.product import ProductModel
from inventory_kernel.models.purchase import PurchaseModel
from inventory_kernel.models.sale import SaleItemModel, SaleModel
from inventory_kernel.models.stock_movement import StockMovementModel

__all__ = [
    "ExpenseModel",
    "ProductModel",
    "PurchaseModel",
    "SaleItemModel",
    "SaleModel",
    "StockMovementModel",
]
