"""
Quotation engine.

Pure Python math. No I/O, no database.
Given a package, guest count, event times and selected add-ons,
produce a priced quote with line items and a whole-peso total.
"""

from .catalog import DEFAULT_PRICE_LIST, PriceList
from .duration import compute_duration, compute_overage_hours
from .engine import QuotationEngine

__all__ = [
    "DEFAULT_PRICE_LIST",
    "PriceList",
    "QuotationEngine",
    "compute_duration",
    "compute_overage_hours",
]
