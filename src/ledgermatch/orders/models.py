#!/usr/bin/env python3
"""
Order Domain Models

Retailer purchase records normalized to one shape regardless of origin
(email receipt, CSV export, or scraped order page).
"""

from dataclasses import dataclass, field
from typing import Any

from ..core.currency import safe_currency_to_milliunits
from ..core.dates import FinancialDate, parse_date
from ..core.money import Money


@dataclass(frozen=True)
class OrderItem:
    """Single line item within an order."""

    title: str
    unit_price: Money
    quantity: int = 1

    @property
    def total_price(self) -> Money:
        return self.unit_price * self.quantity

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderItem":
        """Create from dict; unit_price is a dollar value (string or number)."""
        price = safe_currency_to_milliunits(data.get("unit_price", data.get("price")))
        return cls(
            title=str(data.get("title", "")),
            unit_price=Money.from_milliunits(price or 0),
            quantity=int(data.get("quantity", 1) or 1),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "unit_price": str(self.unit_price.to_decimal()),
            "quantity": self.quantity,
        }


@dataclass
class Order:
    """
    A retailer order.

    total_amount uses the ledger sign convention (purchases negative, refunds
    positive); matching compares magnitudes, so collaborators that report
    purchase totals as positive values still match. split_charge_amounts lists
    the separate card charges an order was settled with; fewer than two
    entries means the order was charged once.
    """

    order_id: str
    order_date: FinancialDate | None
    total_amount: Money | None
    items: list[OrderItem] = field(default_factory=list)
    is_return: bool = False
    split_charge_amounts: list[Money] = field(default_factory=list)

    @property
    def is_split(self) -> bool:
        """True when the order was settled across two or more charges."""
        return len(self.split_charge_amounts) >= 2

    @property
    def item_count(self) -> int:
        return len(self.items)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Order":
        """
        Create Order from a normalized dict.

        Dollar amounts may be strings ("$25.99") or numbers. A missing or
        unparseable order date or total becomes None rather than raising.
        """
        parsed_date = parse_date(data.get("order_date"))
        total = safe_currency_to_milliunits(data.get("total_amount"))

        charges: list[Money] = []
        for value in data.get("split_charge_amounts") or []:
            charge = safe_currency_to_milliunits(value)
            if charge is not None:
                charges.append(Money.from_milliunits(charge))

        return cls(
            order_id=str(data.get("order_id", "")),
            order_date=FinancialDate(date=parsed_date) if parsed_date else None,
            total_amount=Money.from_milliunits(total) if total is not None else None,
            items=[OrderItem.from_dict(item) for item in data.get("items") or []],
            is_return=bool(data.get("is_return", False)),
            split_charge_amounts=charges,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "order_id": self.order_id,
            "order_date": self.order_date.to_iso_string() if self.order_date else None,
            "total_amount": str(self.total_amount.to_decimal()) if self.total_amount is not None else None,
            "items": [item.to_dict() for item in self.items],
            "is_return": self.is_return,
            "split_charge_amounts": [str(charge.to_decimal()) for charge in self.split_charge_amounts],
        }
