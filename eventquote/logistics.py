"""
Event logistics: equipment checklists and stock conflicts.

Every package ships a fixed equipment list. Before an event is confirmed we
add up what overlapping confirmed events on the same day already took out of
the warehouse and flag any item where the new event would exceed stock.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .pricing.duration import MINUTES_PER_DAY, parse_time_of_day

logger = logging.getLogger(__name__)

SPEAKER = 'Active speaker 15"'
SUBWOOFER = 'Subwoofer 18"'
LED_PAR = "LED par 54x3"
BEAM = "Moving head beam"

EQUIPMENT_BY_PACKAGE = {
    "essential": [(SPEAKER, 2), (LED_PAR, 4)],
    "memories": [(SPEAKER, 2), (SUBWOOFER, 2), (LED_PAR, 6), (BEAM, 2)],
    "celebration": [(SPEAKER, 4), (SUBWOOFER, 2), (LED_PAR, 8), (BEAM, 4)],
    "custom": [(SPEAKER, 2), (LED_PAR, 2)],
}

# Statuses that hold equipment
RESERVING_STATUSES = ("CONFIRMED",)


def default_equipment(package_id) -> List[dict]:
    """Fresh checklist for a package. Unknown packages get the custom kit."""
    key = str(package_id or "").strip().lower()
    kit = EQUIPMENT_BY_PACKAGE.get(key, EQUIPMENT_BY_PACKAGE["custom"])
    return [{"name": name, "qty": qty, "checked": False} for name, qty in kit]


def time_window(start, end) -> Tuple[int, int]:
    """
    [start, end) in minutes since midnight, end past 1440 if the event
    crosses midnight. Missing times block the whole day.
    """
    start_min = parse_time_of_day(start)
    end_min = parse_time_of_day(end)
    if start_min is None or end_min is None:
        return 0, MINUTES_PER_DAY
    if end_min < start_min:
        end_min += MINUTES_PER_DAY
    return start_min, end_min


def windows_overlap(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    return a[0] < b[1] and a[1] > b[0]


def _status_value(status) -> str:
    return str(getattr(status, "value", status) or "")


def overlapping_events(event_date: str, start, end, events: Iterable,
                       exclude_id: Optional[str] = None) -> list:
    """Confirmed events on the same date whose time windows overlap."""
    window = time_window(start, end)
    matches = []
    for evt in events:
        if _status_value(evt.status) not in RESERVING_STATUSES:
            continue
        if exclude_id and evt.id == exclude_id:
            continue
        details = evt.event_details or {}
        if (details.get("date") or evt.event_date) != event_date:
            continue
        if windows_overlap(window, time_window(details.get("startTime"), details.get("endTime"))):
            matches.append(evt)
    return matches


def find_stock_conflicts(requested_items: list, event_date: str, start, end,
                         events: Iterable, inventory: Iterable,
                         exclude_id: Optional[str] = None) -> List[dict]:
    """
    Items where (qty already out at overlapping events + qty requested) > stock.

    Returns: [{name, stock, in_use, requested, event_ids}]
    Items not tracked in inventory are never flagged.
    """
    overlapping = overlapping_events(event_date, start, end, events, exclude_id)
    stock = {item.name: item.total or 0 for item in inventory}

    conflicts = []
    for requested in requested_items or []:
        name = requested.get("name")
        qty = int(requested.get("qty") or 0)
        if name not in stock or qty <= 0:
            continue

        in_use = 0
        event_ids = []
        for evt in overlapping:
            for item in (evt.logistics or {}).get("items", []):
                if item.get("name") == name and int(item.get("qty") or 0) > 0:
                    in_use += int(item["qty"])
                    event_ids.append(evt.id)

        if in_use + qty > stock[name]:
            conflicts.append({
                "name": name,
                "stock": stock[name],
                "in_use": in_use,
                "requested": qty,
                "event_ids": event_ids,
            })

    if conflicts:
        logger.warning("Stock conflicts on %s: %s", event_date,
                       ", ".join(c["name"] for c in conflicts))
    return conflicts
