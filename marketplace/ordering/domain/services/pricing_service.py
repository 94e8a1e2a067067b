"""
PricingService - Line pricing for print orders

unit_price = base_price + sum(price_delta of each resolved option)
line_total = unit_price * quantity

Option deltas always come from the service's variant catalog. A client-sent
``price_delta`` is ignored, and an option that cannot be resolved against the
catalog prices at zero while keeping what the client sent for the record.

``price`` and ``resolve_option`` are plain functions; ``PricingService`` wraps
them for injection into ``OrderService``.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from marketplace.services.base import BaseService

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Coerce a catalog number to a two-place Decimal. Unparseable values become 0."""
    if value is None or value == "":
        return Decimal("0.00")
    try:
        return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return Decimal("0.00")


@dataclass
class PriceQuote:
    unit_price: Decimal
    quantity: int
    line_total: Decimal
    options: List[Dict[str, Any]] = field(default_factory=list)


def resolve_option(service, option: Dict[str, Any]) -> Dict[str, Any]:
    """Look up one selected option in ``service.variants`` by label and index."""
    label = option.get("label")
    option_index = option.get("option_index")
    if isinstance(option_index, str) and option_index.strip().lstrip("-").isdigit():
        option_index = int(option_index)

    resolved = {
        "label": label,
        "option_index": option_index,
        "option_name": option.get("option_name"),
        "price_delta": Decimal("0.00"),
    }

    variant = next(
        (v for v in service.variants or [] if isinstance(v, dict) and v.get("label") == label),
        None,
    )
    choices = variant.get("options") or [] if variant else []

    if isinstance(option_index, int) and not isinstance(option_index, bool) and 0 <= option_index < len(choices):
        catalog_option = choices[option_index]
        resolved["option_name"] = catalog_option.get("name")
        resolved["price_delta"] = to_money(catalog_option.get("price_delta"))
    else:
        logger.info(f"Unresolved option label={label!r} index={option_index!r} for service {service.pk}; priced at 0")

    return resolved


def price(service, selected_options: Optional[Iterable[Dict[str, Any]]], quantity: int) -> PriceQuote:
    """
    Quote a single order line.

    Args:
        service: Catalog service (needs ``base_price`` and ``variants``)
        selected_options: ``[{"label": ..., "option_index": ...}, ...]``
        quantity: Units ordered, clamped to at least 1

    Example:
        >>> quote = price(service, [{"label": "Paper", "option_index": 0}], 3)
        >>> quote.unit_price, quote.line_total
        (Decimal('120.00'), Decimal('360.00'))
    """
    quantity = max(int(quantity or 1), 1)
    options = [resolve_option(service, option) for option in selected_options or []]

    unit_price = to_money(service.base_price) + sum((o["price_delta"] for o in options), Decimal("0.00"))
    unit_price = unit_price.quantize(CENT, rounding=ROUND_HALF_UP)
    line_total = (unit_price * quantity).quantize(CENT, rounding=ROUND_HALF_UP)

    return PriceQuote(unit_price=unit_price, quantity=quantity, line_total=line_total, options=options)


def order_subtotal(quotes: Iterable[PriceQuote]) -> Decimal:
    return sum((q.line_total for q in quotes), Decimal("0.00")).quantize(CENT, rounding=ROUND_HALF_UP)


class PricingService(BaseService):
    """
    Stateless price calculator. Performs no I/O, so a quote for the same
    inputs is always the same.
    """

    def price(self, service, selected_options: Optional[Iterable[Dict[str, Any]]], quantity: int) -> PriceQuote:
        return price(service, selected_options, quantity)

    def resolve_option(self, service, option: Dict[str, Any]) -> Dict[str, Any]:
        return resolve_option(service, option)

    @staticmethod
    def order_subtotal(quotes: Iterable[PriceQuote]) -> Decimal:
        return order_subtotal(quotes)
