"""
Quotation Engine.

Combines package, overage hours and selected add-ons into a priced quote.
Pure math, no I/O, no hidden state. Called on every change of the quote form;
identical inputs always give identical output.

total = base_price + overage_hours × extra_hour_unit_price + Σ selected add-ons

Custom package: the planner types the total by hand. Under the default
MANUAL_WINS policy a non-empty manual total is never overwritten; only an
empty one is filled with the add-on sum.
"""

import logging
from typing import Iterable, Optional

from .catalog import DEFAULT_PRICE_LIST, CustomTotalPolicy, PackageTier, PriceList
from .coerce import is_blank, parse_money, parse_number
from .duration import compute_duration, compute_overage_hours, format_duration
from .extras import ExtraPriceResolver

logger = logging.getLogger(__name__)


def _normalize_selection(selected_extra_ids) -> list:
    """
    Accept a list/set of ids or the stored {id: bool} checkbox map.
    Keeps first-seen order, drops duplicates and blanks.
    """
    if not selected_extra_ids:
        return []
    if isinstance(selected_extra_ids, dict):
        candidates = [key for key, on in selected_extra_ids.items() if on]
    elif isinstance(selected_extra_ids, str):
        candidates = selected_extra_ids.split(",")
    else:
        try:
            candidates = list(selected_extra_ids)
        except TypeError:
            return []
    seen = []
    for candidate in candidates:
        key = str(candidate).strip()
        if key and key not in seen:
            seen.append(key)
    return seen


class QuotationEngine:
    """
    Stateless pricing engine bound to one PriceList.
    Safe to share across threads and requests.
    """

    def __init__(self, price_list: PriceList = DEFAULT_PRICE_LIST):
        self.price_list = price_list
        self.extras = ExtraPriceResolver(price_list)

    # --- single-step operations ---

    def compute_duration(self, start, end, start_meridiem=None, end_meridiem=None) -> float:
        return compute_duration(start, end, start_meridiem, end_meridiem)

    def compute_overage_hours(self, hours, base_hours=None) -> int:
        if base_hours is None:
            base_hours = self.price_list.base_duration_hours
        return compute_overage_hours(hours, base_hours)

    def resolve_extra_price(self, extra_id, guest_count, override_count=None) -> dict:
        return self.extras.resolve(extra_id, guest_count, override_count)

    def resolve_package(self, package_id) -> PackageTier:
        """Unknown or empty package ids fall back to the custom tier."""
        package = self.price_list.get_package(package_id)
        if package is None:
            logger.debug("Unknown package %r treated as custom", package_id)
            return self.price_list.custom_package()
        return package

    # --- total assembly ---

    def compute_total(self, package_id, hours, guest_count,
                      selected_extra_ids: Optional[Iterable] = None,
                      manual_total=None, makeup_override=None) -> dict:
        """
        Assemble the full priced quote.

        Args:
            package_id: "essential" | "memories" | "celebration" | "custom" (display names work too)
            hours: event duration in hours (0 = not computable yet)
            guest_count: number of guests, clamped to the price list's range
            selected_extra_ids: iterable of add-on ids, or the {id: bool} map the events store
            manual_total: planner-typed total, only honoured for the custom package
            makeup_override: explicit make-up artist count

        Returns:
            {
                package_id, package_name, is_custom,
                duration_hours, overage_hours, guest_count,
                line_items: [{kind, id, description, details, quantity, unit_price, line_total}],
                extras: [per-add-on breakdown for the whole catalog],
                calculated_total, total, total_source,
            }
        """
        package = self.resolve_package(package_id)
        duration = max(0.0, parse_number(hours, default=0.0))
        guests = self.extras.coerce_guests(guest_count)
        selected = _normalize_selection(selected_extra_ids)

        breakdown = self.extras.resolve_all(guests, makeup_override)
        by_id = {entry["id"]: entry for entry in breakdown}

        line_items = []
        if package.is_custom:
            overage = 0
        else:
            overage = self.compute_overage_hours(duration, package.base_duration_hours)
            line_items.append(self._make_line_item(
                kind="package",
                item_id=package.id,
                description="%s package" % package.display_name,
                details="%d hours included" % package.base_duration_hours,
                quantity=1,
                unit_price=package.base_price,
            ))
            if overage:
                line_items.append(self._make_line_item(
                    kind="overage",
                    item_id="extra_hour",
                    description="Additional event hours",
                    details="%s event, %d h over the %d h base" % (
                        format_duration(duration), overage, package.base_duration_hours),
                    quantity=overage,
                    unit_price=package.extra_hour_unit_price,
                ))

        extras_sum = 0
        for extra_id in selected:
            extra = self.price_list.get_extra(extra_id)
            if extra is None:
                logger.debug("Ignoring unknown selected extra %r", extra_id)
                continue
            entry = by_id[extra.id]
            if any(item["id"] == extra.id for item in line_items):
                continue
            line_items.append(self._make_line_item(
                kind="extra",
                item_id=extra.id,
                description=entry["name"],
                details=entry["description"],
                quantity=entry["quantity"],
                unit_price=entry["unit_price"],
                line_total=entry["price"],
            ))
            extras_sum += entry["price"]

        calculated = sum(item["line_total"] for item in line_items)
        total, source = self._apply_total_policy(package, calculated, extras_sum, manual_total)

        return {
            "package_id": package.id,
            "package_name": package.display_name,
            "is_custom": package.is_custom,
            "currency": self.price_list.currency,
            "duration_hours": round(duration, 4),
            "overage_hours": overage,
            "guest_count": guests,
            "line_items": line_items,
            "extras": breakdown,
            "calculated_total": calculated,
            "total": total,
            "total_source": source,
        }

    def quote(self, package_id, start_time=None, end_time=None, guest_count=None,
              selected_extra_ids=None, manual_total=None, makeup_override=None,
              start_meridiem=None, end_meridiem=None) -> dict:
        """
        compute_total with the duration taken from wall-clock start/end times.
        12-hour forms pass their AM/PM selectors as start_meridiem/end_meridiem.
        """
        hours = self.compute_duration(start_time, end_time, start_meridiem, end_meridiem)
        return self.compute_total(
            package_id, hours, guest_count, selected_extra_ids,
            manual_total=manual_total, makeup_override=makeup_override,
        )

    def _apply_total_policy(self, package: PackageTier, calculated: int,
                            extras_sum: int, manual_total) -> tuple:
        """Returns (total, source) where source is 'calculated' or 'manual'."""
        if not package.is_custom:
            return calculated, "calculated"

        policy = self.price_list.custom_total_policy
        if not is_blank(manual_total):
            return parse_money(manual_total), "manual"
        if policy == CustomTotalPolicy.ALWAYS_MANUAL:
            return 0, "manual"
        return extras_sum, "calculated"

    def _make_line_item(self, kind: str, item_id: str, description: str, details: str,
                        quantity: int, unit_price: int, line_total: int = None) -> dict:
        if line_total is None:
            line_total = unit_price * quantity
        return {
            "kind": kind,
            "id": item_id,
            "description": description,
            "details": details,
            "quantity": quantity,
            "unit_price": unit_price,
            "line_total": line_total,
        }
