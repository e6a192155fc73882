"""
Price list: packages, add-ons and accessory unit costs.

The PriceList is immutable and handed to the QuotationEngine at construction,
so a second price list (another city, a promo season) is just another object.

DECISION: one canonical rule set. The client wizard and the manager app
drifted apart (nearest vs. ceiling rounding, 85k vs. 155k overage hours,
different accessory costs). The manager app's table below is the one that
was billed to clients; the alternatives stay reachable through
RoundingPolicy and per-package fields instead of hardcoded branches.
"""

import enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel


class RoundingPolicy(str, enum.Enum):
    CEILING = "ceiling"   # always round accessory packs UP to the increment
    NEAREST = "nearest"   # round half up to the nearest increment


class CustomTotalPolicy(str, enum.Enum):
    MANUAL_WINS = "manual_wins"        # manual total is authoritative once non-empty
    ALWAYS_MANUAL = "always_manual"    # never auto-sum extras into a custom total


class PricingKind(str, enum.Enum):
    FIXED_MULTIPLIER = "fixed_multiplier"   # unit price × count (make-up artists)
    GUEST_SCALED = "guest_scaled"           # recipe scaled by guest count (accessory packs)


class PackageTier(BaseModel):
    id: str
    display_name: str
    base_price: int
    base_duration_hours: int = 4
    extra_hour_unit_price: int = 0
    is_custom: bool = False

    class Config:
        frozen = True


class AccessoryRecipe(BaseModel):
    """Fixed-quantity items plus items handed out one per guest."""
    fixed_items: Tuple[Tuple[str, int], ...] = ()
    per_guest_items: Tuple[str, ...] = ()

    class Config:
        frozen = True


class ExtraOffering(BaseModel):
    id: str
    display_name: str
    pricing_kind: PricingKind
    unit_price: int = 0
    guests_per_unit: int = 50
    recipe: Optional[AccessoryRecipe] = None

    class Config:
        frozen = True


# Unit costs per accessory item (COP)
ITEM_UNIT_COSTS = {
    "foam_cannon": 13000,
    "confetti_cannon": 5000,
    "whistle": 200,
    "bracelet": 500,
    "necklace": 500,
    "mask": 500,
}

ITEM_LABELS = {
    "foam_cannon": ("foam cannon", "foam cannons"),
    "confetti_cannon": ("confetti cannon", "confetti cannons"),
    "whistle": ("whistle", "whistles"),
    "bracelet": ("bracelet", "bracelets"),
    "necklace": ("necklace", "necklaces"),
    "mask": ("mask", "masks"),
}


class PriceList(BaseModel):
    """Everything the engine needs to price a quote. Never mutated."""
    packages: Tuple[PackageTier, ...]
    extras: Tuple[ExtraOffering, ...]
    item_unit_costs: Tuple[Tuple[str, int], ...]
    rounding_increment: int = 5000
    rounding_policy: RoundingPolicy = RoundingPolicy.CEILING
    custom_total_policy: CustomTotalPolicy = CustomTotalPolicy.MANUAL_WINS
    base_duration_hours: int = 4
    min_guests: int = 10
    max_guests: Optional[int] = None
    currency: str = "COP"

    class Config:
        frozen = True

    def get_package(self, package_id) -> Optional[PackageTier]:
        key = str(package_id or "").strip().lower()
        for package in self.packages:
            if package.id == key or package.display_name.lower() == key:
                return package
        return None

    def get_extra(self, extra_id) -> Optional[ExtraOffering]:
        key = str(extra_id or "").strip().lower()
        key = EXTRA_ALIASES.get(key, key)
        for extra in self.extras:
            if extra.id == key:
                return extra
        return None

    def unit_costs(self) -> Dict[str, int]:
        return dict(self.item_unit_costs)

    def custom_package(self) -> PackageTier:
        for package in self.packages:
            if package.is_custom:
                return package
        return PackageTier(id="custom", display_name="Custom", base_price=0, is_custom=True)


PACKAGES = (
    PackageTier(id="essential", display_name="Essential",
                base_price=450000, extra_hour_unit_price=85000),
    PackageTier(id="memories", display_name="Memories",
                base_price=650000, extra_hour_unit_price=135000),
    PackageTier(id="celebration", display_name="Celebration",
                base_price=850000, extra_hour_unit_price=135000),
    PackageTier(id="custom", display_name="Custom",
                base_price=0, extra_hour_unit_price=0, is_custom=True),
)

EXTRAS = (
    ExtraOffering(
        id="makeup",
        display_name="Neon make-up",
        pricing_kind=PricingKind.FIXED_MULTIPLIER,
        unit_price=120000,
        guests_per_unit=50,
    ),
    ExtraOffering(
        id="acc_essential",
        display_name="Essential accessories",
        pricing_kind=PricingKind.GUEST_SCALED,
        recipe=AccessoryRecipe(
            fixed_items=(("foam_cannon", 1),),
            per_guest_items=("whistle", "bracelet"),
        ),
    ),
    ExtraOffering(
        id="acc_memories",
        display_name="Memories accessories",
        pricing_kind=PricingKind.GUEST_SCALED,
        recipe=AccessoryRecipe(
            fixed_items=(("foam_cannon", 2), ("confetti_cannon", 2)),
            per_guest_items=("whistle", "bracelet"),
        ),
    ),
    ExtraOffering(
        id="acc_celebration",
        display_name="Celebration accessories",
        pricing_kind=PricingKind.GUEST_SCALED,
        recipe=AccessoryRecipe(
            fixed_items=(("foam_cannon", 3), ("confetti_cannon", 3)),
            per_guest_items=("whistle", "bracelet", "necklace", "mask"),
        ),
    ),
)

# The manager app stored the make-up extra as "extra_makeup"
EXTRA_ALIASES = {
    "extra_makeup": "makeup",
}

DEFAULT_PRICE_LIST = PriceList(
    packages=PACKAGES,
    extras=EXTRAS,
    item_unit_costs=tuple(ITEM_UNIT_COSTS.items()),
)
