#!/usr/bin/env python3
"""
Order Data Loader

Loads normalized retailer orders from JSON or CSV files.

JSON: a list of order dicts (or {"orders": [...]}) in the Order.from_dict shape.

CSV: one row per item. Rows sharing an order_id are grouped into one order.
Columns: order_id, order_date, total_amount, item_title, item_unit_price,
item_quantity, and optionally is_return and split_charge_amounts (charges
separated by ';').
"""

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from ..core.json_utils import read_json
from .models import Order

logger = logging.getLogger(__name__)

CSV_REQUIRED_COLUMNS = ["order_id", "order_date", "total_amount"]


def load_orders(path: str | Path) -> list[Order]:
    """
    Load orders from a .json or .csv file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file type is unsupported or a CSV lacks required columns
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Orders file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        orders = _load_json_orders(path)
    elif suffix == ".csv":
        orders = _load_csv_orders(path)
    else:
        raise ValueError(f"Unsupported orders file type: {path}")

    logger.info("Loaded %d orders from %s", len(orders), path)
    return orders


def _load_json_orders(path: Path) -> list[Order]:
    data: Any = read_json(path)
    rows = data.get("orders", []) if isinstance(data, dict) else data
    if not isinstance(rows, list):
        return []

    orders: list[Order] = []
    for row in rows:
        try:
            orders.append(Order.from_dict(row))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Failed to parse order in %s: %s", path, e)
    return orders


def _load_csv_orders(path: Path) -> list[Order]:
    df = pd.read_csv(path, dtype={"order_id": str})

    missing = [column for column in CSV_REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"Orders CSV {path} is missing columns: {', '.join(missing)}")

    orders: list[Order] = []
    for order_id, group in df.groupby("order_id", sort=False):
        first = group.iloc[0].to_dict()
        try:
            orders.append(Order.from_dict(_order_dict_from_rows(str(order_id), first, group)))
        except (ValueError, TypeError) as e:
            logger.warning("Failed to parse order %s in %s: %s", order_id, path, e)
    return orders


def _order_dict_from_rows(order_id: str, first: dict[str, Any], group: pd.DataFrame) -> dict[str, Any]:
    items = []
    if "item_title" in group.columns:
        for _, row in group.iterrows():
            title = row.get("item_title")
            if pd.isna(title):
                continue
            quantity = row.get("item_quantity", 1)
            items.append(
                {
                    "title": str(title),
                    "unit_price": row.get("item_unit_price"),
                    "quantity": 1 if pd.isna(quantity) else int(quantity),
                }
            )

    charges_value = first.get("split_charge_amounts")
    charges = []
    if isinstance(charges_value, str) and charges_value.strip():
        charges = [part.strip() for part in charges_value.split(";") if part.strip()]

    is_return = first.get("is_return", False)
    if isinstance(is_return, str):
        is_return = is_return.strip().lower() in ("true", "1", "yes")
    elif pd.isna(is_return):
        is_return = False

    return {
        "order_id": order_id,
        "order_date": first.get("order_date"),
        "total_amount": first.get("total_amount"),
        "items": items,
        "is_return": bool(is_return),
        "split_charge_amounts": charges,
    }
