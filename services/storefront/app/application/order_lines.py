"""Sanitization of client-supplied cart payloads.

Cart bodies come straight from the browser and are untrusted. Every rule
for turning them into ``OrderLine`` records lives here so the placement
service only ever sees clean input.
"""

import math
from collections.abc import Mapping
from typing import Any, List

from app.domain.orders import OrderLine

def parse_quantity(value: Any) -> int:
    """Parse a quantity the way the storefront cart sends it.

    Numbers and numeric strings are floored to an int. Anything that is
    not a finite, non-negative number becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
    else:
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, math.floor(number))

def _clean_text(value: Any) -> str:
    if value is None or isinstance(value, (bool, Mapping, list)):
        return ""
    return str(value).strip()

def sanitize_order_lines(raw_items: Any) -> List[OrderLine]:
    if not isinstance(raw_items, list):
        return []

    lines = []
    for raw in raw_items:
        if not isinstance(raw, Mapping):
            continue
        quantity = raw.get("quantity")
        if quantity is None:
            quantity = raw.get("qty")
        line = OrderLine(
            product_id=_clean_text(raw.get("productId")),
            size=_clean_text(raw.get("size")),
            quantity=parse_quantity(quantity),
        )
        if line.product_id and line.size and line.quantity > 0:
            lines.append(line)
    return lines
