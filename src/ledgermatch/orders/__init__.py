"""
Retailer Orders Package

Normalized purchase records from any retailer, loaded from JSON or CSV.
"""

from .loader import load_orders
from .models import Order, OrderItem

__all__ = [
    "Order",
    "OrderItem",
    "load_orders",
]
