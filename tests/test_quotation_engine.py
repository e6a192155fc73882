"""
Quotation engine tests: total assembly.

Tests:
1-5.   Regular packages: base + overage hours + selected add-ons
6-8.   Idempotence and the total invariant
9-13.  Custom package under both manual-total policies
14-16. Never raises on garbage input
17-18. Price list built from settings
"""

import pytest

from eventquote.config import Settings, price_list_from_settings
from eventquote.pricing.catalog import DEFAULT_PRICE_LIST, CustomTotalPolicy
from eventquote.pricing.engine import QuotationEngine


def _always_manual_engine():
    return QuotationEngine(
        DEFAULT_PRICE_LIST.model_copy(update={"custom_total_policy": CustomTotalPolicy.ALWAYS_MANUAL})
    )


def _assert_invariant(engine, result, selected):
    package = engine.price_list.get_package(result["package_id"])
    extras = {e["id"]: e["price"] for e in result["extras"]}
    expected = (
        package.base_price
        + result["overage_hours"] * package.extra_hour_unit_price
        + sum(extras[engine.price_list.get_extra(x).id] for x in set(selected))
    )
    assert result["total"] == expected


# ============================================================
# Regular packages
# ============================================================

def test_essential_six_hours_no_extras(quote_engine):
    """450,000 + ceil(6 - 4) × 85,000 = 620,000."""
    result = quote_engine.compute_total("essential", 6, 50, [])
    assert result["total"] == 620000
    assert result["overage_hours"] == 2
    kinds = [item["kind"] for item in result["line_items"]]
    assert kinds == ["package", "overage"]
    overage = result["line_items"][1]
    assert overage["quantity"] == 2
    assert overage["unit_price"] == 85000
    assert overage["line_total"] == 170000


def test_base_block_has_no_overage_line(quote_engine):
    result = quote_engine.compute_total("essential", 4, 50, [])
    assert result["total"] == 450000
    assert [item["kind"] for item in result["line_items"]] == ["package"]


def test_memories_half_hour_over_bills_full_hour(quote_engine):
    result = quote_engine.compute_total("memories", 4.5, 80, [])
    assert result["total"] == 650000 + 135000


def test_celebration_with_extras(quote_engine):
    """
    850,000 base + 1 × 135,000 overage
    + 3 artists × 120,000 (120 guests)
    + celebration pack: 54,000 + 120 × 1,700 = 258,000 → 260,000
    """
    result = quote_engine.compute_total("celebration", 5, 120, ["makeup", "acc_celebration"])
    assert result["total"] == 850000 + 135000 + 360000 + 260000
    extra_lines = [item for item in result["line_items"] if item["kind"] == "extra"]
    assert [item["id"] for item in extra_lines] == ["makeup", "acc_celebration"]
    assert extra_lines[0]["quantity"] == 3
    assert extra_lines[0]["line_total"] == 360000


def test_display_name_and_checkbox_map_accepted(quote_engine):
    result = quote_engine.compute_total(
        "Essential", 4, 50, {"makeup": True, "acc_essential": False},
    )
    assert result["package_id"] == "essential"
    assert result["total"] == 450000 + 120000


def test_duplicate_and_unknown_extras(quote_engine):
    result = quote_engine.compute_total(
        "essential", 4, 50, ["makeup", "makeup", "extra_makeup", "dj_booth"],
    )
    assert result["total"] == 450000 + 120000
    assert len([i for i in result["line_items"] if i["kind"] == "extra"]) == 1


def test_makeup_override_flows_into_total(quote_engine):
    result = quote_engine.compute_total("essential", 4, 200, ["makeup"], makeup_override=1)
    assert result["total"] == 450000 + 120000


def test_manual_total_ignored_for_regular_packages(quote_engine):
    result = quote_engine.compute_total("essential", 4, 50, [], manual_total=1)
    assert result["total"] == 450000
    assert result["total_source"] == "calculated"


def test_quote_from_wall_clock_times(quote_engine):
    result = quote_engine.quote("essential", "20:00", "02:00", 50, [])
    assert result["duration_hours"] == 6.0
    assert result["total"] == 620000


def test_quote_with_separate_am_pm_selectors(quote_engine):
    """8:00 PM → 2:00 AM wraps midnight: 6 h."""
    result = quote_engine.quote("essential", "8:00", "2:00", 50, [],
                                start_meridiem="PM", end_meridiem="AM")
    assert result["duration_hours"] == 6.0
    assert result["total"] == 620000


# ============================================================
# Idempotence / invariant
# ============================================================

def test_same_input_same_output(quote_engine):
    args = ("memories", 7.25, 90, ["acc_memories", "makeup"])
    assert quote_engine.compute_total(*args) == quote_engine.compute_total(*args)


def test_engine_does_not_mutate_inputs(quote_engine):
    selected = {"makeup": True}
    quote_engine.compute_total("essential", 5, 60, selected)
    assert selected == {"makeup": True}


@pytest.mark.parametrize("package_id,hours,guests,selected", [
    ("essential", 0, 10, []),
    ("essential", 9.75, 300, ["acc_essential", "acc_memories", "acc_celebration", "makeup"]),
    ("memories", 4.01, 51, ["makeup"]),
    ("celebration", 12, 150, ["acc_celebration"]),
])
def test_total_invariant(quote_engine, package_id, hours, guests, selected):
    result = quote_engine.compute_total(package_id, hours, guests, selected)
    _assert_invariant(quote_engine, result, selected)


# ============================================================
# Custom package
# ============================================================

def test_custom_empty_total_is_extras_sum(quote_engine):
    result = quote_engine.compute_total("custom", 10, 50, ["acc_essential"])
    assert result["total"] == 50000
    assert result["overage_hours"] == 0
    assert result["total_source"] == "calculated"
    assert all(item["kind"] == "extra" for item in result["line_items"])


def test_custom_manual_total_wins_over_extras(quote_engine):
    """Once a manual total is set, toggling add-ons never changes it."""
    before = quote_engine.compute_total("custom", 6, 50, [], manual_total=900000)
    after_add = quote_engine.compute_total("custom", 6, 50, ["makeup", "acc_essential"],
                                           manual_total=900000)
    after_remove = quote_engine.compute_total("custom", 6, 50, ["makeup"], manual_total="900000")
    assert before["total"] == after_add["total"] == after_remove["total"] == 900000
    assert after_add["total_source"] == "manual"
    # Add-ons are still itemised for the sheet
    assert after_add["calculated_total"] == 120000 + 50000


@pytest.mark.parametrize("blank", [None, "", "   ", 0])
def test_custom_blank_manual_total_is_filled(quote_engine, blank):
    result = quote_engine.compute_total("custom", 6, 120, ["makeup"], manual_total=blank)
    assert result["total"] == 360000


def test_unknown_package_priced_as_custom(quote_engine):
    result = quote_engine.compute_total("platinum", 8, 50, ["acc_essential"])
    assert result["package_id"] == "custom"
    assert result["total"] == 50000


def test_always_manual_policy():
    engine = _always_manual_engine()
    assert engine.compute_total("custom", 6, 50, ["makeup"])["total"] == 0
    assert engine.compute_total("custom", 6, 50, ["makeup"], manual_total=500000)["total"] == 500000
    # Regular packages are unaffected by the custom policy
    assert engine.compute_total("essential", 6, 50, [])["total"] == 620000


# ============================================================
# Never raises
# ============================================================

@pytest.mark.parametrize("package_id,hours,guests,selected,manual", [
    (None, None, None, None, None),
    ("", "", "", "", ""),
    ("essential", "abc", "-10", 42, object()),
    ("essential", -5, -5, [None, ""], -100),
    ("custom", float("inf"), 10 ** 9, {"makeup": "yes"}, "abc"),
    (123, [], {}, "makeup,acc_essential", []),
])
def test_never_raises_on_garbage(quote_engine, package_id, hours, guests, selected, manual):
    result = quote_engine.compute_total(package_id, hours, guests, selected, manual_total=manual)
    assert isinstance(result["total"], int)
    assert result["total"] >= 0


def test_negative_hours_clamp_to_zero(quote_engine):
    result = quote_engine.compute_total("essential", -5, 50, [])
    assert result["duration_hours"] == 0.0
    assert result["total"] == 450000


def test_quote_with_missing_times(quote_engine):
    result = quote_engine.quote("essential", None, "", 50, ["acc_essential"])
    assert result["duration_hours"] == 0.0
    assert result["total"] == 450000 + 50000


# ============================================================
# Settings
# ============================================================

def test_price_list_from_settings_overrides_policies():
    config = Settings(
        ACCESSORY_ROUNDING="nearest",
        BASE_DURATION_HOURS=5,
        CUSTOM_TOTAL_POLICY="always_manual",
    )
    engine = QuotationEngine(price_list_from_settings(config))
    # 6h on a 5h base → one overage hour
    assert engine.compute_total("essential", 6, 50, [])["total"] == 450000 + 85000
    assert engine.resolve_extra_price("acc_essential", 40)["price"] == 40000
    assert engine.compute_total("custom", 6, 50, ["makeup"])["total"] == 0


def test_default_settings_match_canonical_list():
    price_list = price_list_from_settings(Settings())
    assert price_list.rounding_increment == 5000
    assert price_list.get_package("essential").extra_hour_unit_price == 85000
    assert price_list.get_package("memories").base_price == 650000
