#!/usr/bin/env python3
"""
Retailer Profiles

Per-retailer matching vocabulary: how the retailer shows up as a ledger payee,
how its recurring orders are identified, and how memos for it are formatted.
Profiles are immutable values handed to the scorer, matchers and memo
synthesizer; nothing in the engine reads retailer data from module state.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from ..orders.models import Order
    from ..ynab.models import Transaction

DEFAULT_MEMO_PUNCTUATION = "_-+:'|.,&"


@dataclass(frozen=True)
class RetailerProfile:
    """Immutable description of one retailer's ledger footprint and memo style."""

    name: str
    payee_aliases: tuple[str, ...]
    memo_keywords: tuple[str, ...] = ()
    payee_blacklist: tuple[str, ...] = ("TRANSFER",)
    subscription_prefix: str | None = None
    subscription_suffix: str | None = None
    subscription_marker: str = "S&S: "
    order_header: bool = False
    memo_allowed_punctuation: str = DEFAULT_MEMO_PUNCTUATION
    split_charges: bool = True
    match_individual_charges: bool = False

    @property
    def order_marker(self) -> str:
        """Text every memo written for this retailer's orders carries."""
        return f"{self.name} Order"

    def is_alias_payee(self, payee_name: str | None) -> bool:
        """Case-insensitive substring match against the payee aliases."""
        if not payee_name:
            return False
        payee = payee_name.upper().strip()
        return any(alias in payee for alias in self.payee_aliases)

    def is_blacklisted(self, payee_name: str | None) -> bool:
        if not payee_name:
            return False
        payee = payee_name.upper().strip()
        return any(term in payee for term in self.payee_blacklist)

    def is_retailer_payee(self, payee_name: str | None) -> bool:
        """Alias payee that is not blacklisted (e.g. "TRANSFER: AMAZON" is rejected)."""
        return self.is_alias_payee(payee_name) and not self.is_blacklisted(payee_name)

    def is_candidate(self, transaction: "Transaction") -> bool:
        """True if the payee or memo gives any signal that this retailer is involved."""
        if self.is_retailer_payee(transaction.payee_name):
            return True

        if transaction.has_memo:
            memo = transaction.memo.upper()  # type: ignore[union-attr]
            if any(keyword in memo for keyword in self.memo_keywords):
                return True

        return False

    def is_subscription(self, order: "Order") -> bool:
        """Recurring orders are recognized by an order-id prefix; no prefix means none are."""
        if not self.subscription_prefix or not order.order_id:
            return False
        return order.order_id.startswith(self.subscription_prefix)

    @classmethod
    def from_dict(cls, data: dict[str, Any], base: "RetailerProfile | None" = None) -> "RetailerProfile":
        """
        Build a profile from a config mapping, optionally overriding a built-in.

        List values are upper-cased where they are matched case-insensitively.
        """
        overrides: dict[str, Any] = {}
        for key in ("payee_aliases", "memo_keywords", "payee_blacklist"):
            if key in data:
                overrides[key] = tuple(str(value).upper() for value in data[key] or [])
        for key in (
            "subscription_prefix",
            "subscription_suffix",
            "subscription_marker",
            "memo_allowed_punctuation",
        ):
            if key in data:
                overrides[key] = data[key]
        for key in ("order_header", "split_charges", "match_individual_charges"):
            if key in data:
                overrides[key] = bool(data[key])

        if base is not None:
            return replace(base, **overrides)

        if "name" not in data or "payee_aliases" not in overrides:
            raise ValueError("Retailer profile needs at least 'name' and 'payee_aliases'")
        return cls(name=str(data["name"]), **overrides)


AMAZON = RetailerProfile(
    name="Amazon",
    payee_aliases=(
        "AMAZON.COM",
        "AMAZON",
        "AMZN",
        "AMAZON MKTPLACE",
        "AMAZON MARKETPLACE",
        "AMAZON RETAIL",
    ),
    memo_keywords=("AMAZON", "AMZN"),
    subscription_prefix="SUB-",
    subscription_suffix="(Subscribe & Save)",
)

WALMART = RetailerProfile(
    name="Walmart",
    payee_aliases=("WALMART", "WAL-MART", "WALMART.COM", "WALMART ONLINE"),
    memo_keywords=("WALMART", "WAL-MART"),
    order_header=True,
    memo_allowed_punctuation=DEFAULT_MEMO_PUNCTUATION + "()",
)

BUILTIN_PROFILES: dict[str, RetailerProfile] = {
    "amazon": AMAZON,
    "walmart": WALMART,
}


def load_profiles(path: str | Path) -> dict[str, RetailerProfile]:
    """
    Load retailer profiles from a YAML document.

    Entries whose key matches a built-in profile override only the fields they
    name; other entries define new retailers::

        retailers:
          amazon:
            payee_aliases: [AMAZON, AMZN]
          target:
            name: Target
            payee_aliases: [TARGET]

    Returns:
        Built-in profiles merged with the document's, keyed by lower-case name

    Raises:
        ValueError: If the document is malformed
    """
    with open(path, encoding="utf-8") as f:
        document = yaml.safe_load(f) or {}

    entries = document.get("retailers") if isinstance(document, dict) else None
    if entries is None:
        entries = {}
    if not isinstance(entries, dict):
        raise ValueError(f"'retailers' must be a mapping in {path}")

    profiles = dict(BUILTIN_PROFILES)
    for key, data in entries.items():
        key = str(key).lower()
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Retailer '{key}' must be a mapping in {path}")
        profiles[key] = RetailerProfile.from_dict(data, base=BUILTIN_PROFILES.get(key))
    return profiles


def resolve_profiles(
    names: list[str], available: dict[str, RetailerProfile] | None = None
) -> list[RetailerProfile]:
    """
    Look up profiles by name, preserving order.

    Raises:
        ValueError: If a name is not a known retailer
    """
    available = available if available is not None else BUILTIN_PROFILES
    profiles = []
    for name in names:
        profile = available.get(name.lower())
        if profile is None:
            raise ValueError(f"Unknown retailer '{name}'. Known: {', '.join(sorted(available))}")
        profiles.append(profile)
    return profiles
