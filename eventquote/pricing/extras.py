"""
Add-on price resolver.

Two kinds of add-on:
- Fixed multiplier (make-up artists): unit price × artist count. One artist
  per 50 guests unless the planner sets the count by hand.
- Guest scaled (accessory packs): fixed items (foam / confetti cannons) plus
  one of each party favour per guest, rounded to a 5,000 peso step.

Prices are recomputed from the current guest count on every call. A pack
never carries a frozen price.
"""

import logging
import math

from .catalog import ITEM_LABELS, ExtraOffering, PriceList, PricingKind, RoundingPolicy
from .coerce import clamp, parse_int

logger = logging.getLogger(__name__)


def round_to_increment(raw: int, increment: int, policy: RoundingPolicy) -> int:
    """Round a whole-unit amount to a multiple of increment."""
    if increment <= 0:
        return raw
    if policy == RoundingPolicy.NEAREST:
        return ((raw + increment // 2) // increment) * increment
    return math.ceil(raw / increment) * increment


def _item_label(key: str, quantity: int) -> str:
    singular, plural = ITEM_LABELS.get(key, (key.replace("_", " "), key.replace("_", " ")))
    return "%d %s" % (quantity, singular if quantity == 1 else plural)


class ExtraPriceResolver:
    """Prices every add-on in a PriceList for a given guest count."""

    def __init__(self, price_list: PriceList):
        self.price_list = price_list
        self._unit_costs = price_list.unit_costs()
        self._resolvers = {
            PricingKind.FIXED_MULTIPLIER: self._resolve_fixed_multiplier,
            PricingKind.GUEST_SCALED: self._resolve_guest_scaled,
        }

    def coerce_guests(self, guest_count) -> int:
        """Missing or garbage → minimum. Capped only when the price list sets max_guests."""
        guests = parse_int(guest_count, default=self.price_list.min_guests)
        if self.price_list.max_guests is None:
            return max(self.price_list.min_guests, guests)
        return clamp(guests, self.price_list.min_guests, self.price_list.max_guests)

    def recommended_count(self, extra: ExtraOffering, guests: int) -> int:
        per_unit = max(1, extra.guests_per_unit)
        return max(1, math.ceil(guests / per_unit))

    def resolve(self, extra_id, guest_count, override_count=None) -> dict:
        """
        Price one add-on.

        Returns: {id, name, pricing_kind, price, quantity, unit_price, description}
        Unknown ids price at 0 rather than raising.
        """
        extra = self.price_list.get_extra(extra_id)
        if extra is None:
            logger.debug("Unknown extra %r priced at 0", extra_id)
            return {
                "id": str(extra_id),
                "name": str(extra_id),
                "pricing_kind": None,
                "price": 0,
                "quantity": 0,
                "unit_price": 0,
                "description": "",
            }
        guests = self.coerce_guests(guest_count)
        return self._resolvers[extra.pricing_kind](extra, guests, override_count)

    def resolve_all(self, guest_count, override_count=None) -> list:
        """Price every catalog add-on, in catalog order."""
        return [
            self.resolve(extra.id, guest_count, override_count)
            for extra in self.price_list.extras
        ]

    def _resolve_fixed_multiplier(self, extra: ExtraOffering, guests: int, override_count) -> dict:
        recommended = self.recommended_count(extra, guests)
        override = parse_int(override_count, default=None)
        count = recommended if override is None else max(1, override)
        return {
            "id": extra.id,
            "name": extra.display_name,
            "pricing_kind": extra.pricing_kind.value,
            "price": extra.unit_price * count,
            "quantity": count,
            "unit_price": extra.unit_price,
            "recommended_quantity": recommended,
            "description": "%d artist(s) (1 per %d guests)" % (count, extra.guests_per_unit),
        }

    def _resolve_guest_scaled(self, extra: ExtraOffering, guests: int, override_count=None) -> dict:
        recipe = extra.recipe
        fixed_items = recipe.fixed_items if recipe else ()
        per_guest_items = recipe.per_guest_items if recipe else ()

        fixed_cost = sum(self._unit_costs.get(key, 0) * qty for key, qty in fixed_items)
        per_guest_cost = sum(self._unit_costs.get(key, 0) for key in per_guest_items)
        raw = fixed_cost + guests * per_guest_cost
        price = round_to_increment(
            raw, self.price_list.rounding_increment, self.price_list.rounding_policy,
        )

        fixed_desc = ", ".join(_item_label(key, qty) for key, qty in fixed_items)
        guest_desc = ", ".join(_item_label(key, guests) for key in per_guest_items)
        if fixed_desc and guest_desc:
            description = "%s + (%s)" % (fixed_desc, guest_desc)
        else:
            description = fixed_desc or guest_desc

        return {
            "id": extra.id,
            "name": extra.display_name,
            "pricing_kind": extra.pricing_kind.value,
            "price": price,
            "quantity": 1,
            "unit_price": price,
            "raw_price": raw,
            "description": description,
        }
