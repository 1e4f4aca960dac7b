"""Write services.  Each flushes inside the caller's transaction."""

from inventory_kernel.services.base import BaseService
from inventory_kernel.services.expense_service import ExpenseService
from inventory_kernel.services.inventory_service import StockAdjustmentService
from inventory_kernel.services.product_service import ProductService
from inventory_kernel.services.purchase_service import PurchaseService
from inventory_kernel.services.sale_service import SaleService

__all__ = [
    "BaseService",
    "ExpenseService",
    "ProductService",
    "PurchaseService",
    "SaleService",
    "StockAdjustmentService",
]
