"""
Magic-link intake.

The client wizard ends with a link into the manager app carrying the quote
as query parameters:

    ?client=Ana&phone=300...&date=2026-11-21&start=20:00&end=02:00
     &loc=Salon+Azul&pack=pack_memories&extras=makeup,acc_essential&guests=80

parse_magic_link turns those into an event draft. The total is left empty so
the quotation engine fills it when the draft is saved.
"""

from typing import Mapping

from .pricing.coerce import parse_int

PACKAGE_KEYWORDS = ("essential", "memories", "celebration")


def package_from_param(value) -> str:
    """Substring match on the wizard's package id. Anything else is custom."""
    text = str(value or "").lower()
    for keyword in PACKAGE_KEYWORDS:
        if keyword in text:
            return keyword
    return "custom"


def extras_from_param(value) -> dict:
    """'makeup,acc_essential' → {'makeup': True, 'acc_essential': True}"""
    selected = {}
    for extra_id in str(value or "").split(","):
        extra_id = extra_id.strip()
        if extra_id:
            selected[extra_id] = True
    return selected


def parse_magic_link(query: Mapping) -> dict:
    """
    Map wizard query parameters onto an EventCreate-shaped dict.
    Returns an empty dict when the link carries no client (not a magic link).
    """
    if not query or not query.get("client"):
        return {}

    guests = parse_int(query.get("guests"), default=0)
    return {
        "client_name": query.get("client", ""),
        "client_phone": query.get("phone", ""),
        "date": query.get("date", ""),
        "start_time": query.get("start", ""),
        "end_time": query.get("end", ""),
        "location": str(query.get("loc", "")).replace('"', ""),
        "package_id": package_from_param(query.get("pack")),
        "selected_extras": extras_from_param(query.get("extras")),
        "guest_count": guests if guests > 0 else None,
        "total_value": None,
        "deposit": None,
        "manager_name": "",
    }
