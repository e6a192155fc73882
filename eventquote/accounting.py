"""
Cash box: event profit and the general ledger summary.

Money in  = deposits collected on events + general income.
Money out = expenses logged against events + general expenses.
"""

from typing import Iterable

from .pricing.coerce import parse_money


def event_expenses_total(event) -> int:
    financials = event.financials or {}
    return sum(parse_money(exp.get("amount")) for exp in financials.get("extraExpenses", []))


def event_net_profit(event) -> int:
    """Contract value minus everything spent on the event. Can be negative."""
    financials = event.financials or {}
    return parse_money(financials.get("totalValue")) - event_expenses_total(event)


def _type_value(entry_type) -> str:
    return str(getattr(entry_type, "value", entry_type) or "")


def summarize_ledger(events: Iterable, ledger: Iterable) -> dict:
    """
    Totals plus a single history of general transactions and event expenses,
    newest date first.
    """
    events = list(events)
    ledger = list(ledger)

    total_deposits = sum(parse_money((evt.financials or {}).get("deposit")) for evt in events)
    event_expenses = sum(event_expenses_total(evt) for evt in events)
    global_income = sum(parse_money(tx.amount) for tx in ledger if _type_value(tx.type) == "IN")
    global_expenses = sum(parse_money(tx.amount) for tx in ledger if _type_value(tx.type) == "OUT")

    history = []
    for tx in ledger:
        history.append({
            "id": str(tx.id),
            "event_id": None,
            "client_name": None,
            "date": tx.date,
            "description": tx.description,
            "amount": parse_money(tx.amount),
            "type": _type_value(tx.type),
            "is_event": False,
        })
    for evt in events:
        client_name = (evt.client or {}).get("name")
        for exp in (evt.financials or {}).get("extraExpenses", []):
            history.append({
                "id": str(exp.get("id")),
                "event_id": evt.id,
                "client_name": client_name,
                "date": exp.get("date") or "",
                "description": exp.get("desc", ""),
                "amount": parse_money(exp.get("amount")),
                "type": "OUT",
                "is_event": True,
            })
    history.sort(key=lambda row: row["date"] or "", reverse=True)

    total_in = total_deposits + global_income
    total_out = event_expenses + global_expenses
    return {
        "total_deposits": total_deposits,
        "event_expenses": event_expenses,
        "global_income": global_income,
        "global_expenses": global_expenses,
        "total_in": total_in,
        "total_out": total_out,
        "balance": total_in - total_out,
        "history": history,
    }
