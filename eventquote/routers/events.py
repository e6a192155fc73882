from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified
from typing import List, Optional
from datetime import date
import copy
import logging
import uuid

from .. import models, schemas
from ..accounting import event_expenses_total, event_net_profit
from ..database import get_db
from ..intake import parse_magic_link
from ..logistics import default_equipment, find_stock_conflicts
from ..pricing.coerce import is_blank, parse_int, parse_money
from ..pricing.engine import QuotationEngine
from .quotes import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])

CONFIRM_REQUIRED_MESSAGE = "To confirm an event you need at least: client, date and total value."
DRAFT_REQUIRED_MESSAGE = "A draft needs at least a client name."


def generate_event_id(db: Session, event_date: str) -> str:
    """EVT-YYMMDD-NN, where NN is the event's sequence on that day."""
    date_code = event_date.replace("-", "")[2:] if event_date else "XXXXXX"
    sequence = db.query(models.Event).filter(models.Event.event_date == event_date).count() + 1
    while True:
        candidate = f"EVT-{date_code}-{str(sequence).zfill(2)}"
        if not db.get(models.Event, candidate):
            return candidate
        sequence += 1


def get_event_or_404(db: Session, event_id: str) -> models.Event:
    event = db.get(models.Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def _selected_extras_map(selected) -> dict:
    if isinstance(selected, dict):
        return {key: bool(on) for key, on in selected.items()}
    return {key: True for key in selected or []}


def resolve_total(payload: schemas.EventCreate, engine: QuotationEngine) -> int:
    """
    Planner-typed total wins. An empty total is filled by the engine once the
    schedule is known; without a duration a regular package stays at 0.
    """
    if not is_blank(payload.total_value):
        return parse_money(payload.total_value)

    package = engine.resolve_package(payload.package_id)
    hours = engine.compute_duration(payload.start_time, payload.end_time)
    if not package.is_custom and hours <= 0:
        return 0
    quote = engine.compute_total(
        package.id, hours, payload.guest_count, payload.selected_extras,
        makeup_override=payload.makeup_count,
    )
    return quote["total"]


def validate_for_status(status: models.EventStatus, client_name: str, event_date: str, total: int):
    if status == models.EventStatus.DRAFT:
        if not (client_name or "").strip():
            raise HTTPException(status_code=422, detail=DRAFT_REQUIRED_MESSAGE)
        return
    if not (client_name or "").strip() or not event_date or total <= 0:
        raise HTTPException(status_code=422, detail=CONFIRM_REQUIRED_MESSAGE)


def check_stock(db: Session, items: list, event_date: str, start_time: str, end_time: str,
                exclude_id: Optional[str] = None, force: bool = False):
    """409 when confirmed events overlapping this window already hold the stock."""
    same_day = db.query(models.Event).filter(models.Event.event_date == event_date).all()
    inventory = db.query(models.InventoryItem).all()
    conflicts = find_stock_conflicts(
        items, event_date, start_time, end_time,
        same_day, inventory, exclude_id=exclude_id,
    )
    if conflicts and not force:
        raise HTTPException(status_code=409, detail={
            "message": "Insufficient stock. Resend with force=true to confirm anyway.",
            "conflicts": conflicts,
        })


def _save_json(event: models.Event, column: str, value: dict):
    """Reassign a JSON column and mark it dirty; in-place edits aren't tracked."""
    setattr(event, column, value)
    flag_modified(event, column)


@router.get("/", response_model=List[schemas.Event])
def list_events(status: Optional[models.EventStatus] = None, event_date: Optional[str] = None,
                db: Session = Depends(get_db)):
    query = db.query(models.Event)
    if status:
        query = query.filter(models.Event.status == status)
    if event_date:
        query = query.filter(models.Event.event_date == event_date)
    return query.order_by(models.Event.id.desc()).all()


@router.get("/{event_id}", response_model=schemas.Event)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return get_event_or_404(db, event_id)


@router.post("/", response_model=schemas.Event)
def save_event(payload: schemas.EventCreate, db: Session = Depends(get_db),
               engine: QuotationEngine = Depends(get_engine)):
    """
    Create or update (upsert) an event.

    CONFIRMED needs client, date and a positive total, and is checked against
    warehouse stock for overlapping confirmed events. DRAFT only needs a name.
    """
    existing = get_event_or_404(db, payload.id) if payload.id else None

    total = resolve_total(payload, engine)
    validate_for_status(payload.status, payload.client_name, payload.date, total)
    deposit = parse_money(payload.deposit)
    package = engine.resolve_package(payload.package_id)

    if payload.items is not None:
        items = [item.model_dump() for item in payload.items]
    elif existing and (existing.logistics or {}).get("items"):
        items = copy.deepcopy(existing.logistics["items"])
    else:
        items = default_equipment(package.id)

    if payload.status == models.EventStatus.CONFIRMED:
        check_stock(db, items, payload.date, payload.start_time, payload.end_time,
                    exclude_id=payload.id, force=payload.force)

    old_financials = (existing.financials or {}) if existing else {}
    old_logistics = (existing.logistics or {}) if existing else {}

    client = {"name": payload.client_name.strip(), "phone": payload.client_phone}
    event_details = {
        "date": payload.date,
        "type": "Social event",
        "location": payload.location.replace('"', ""),
        "startTime": payload.start_time,
        "endTime": payload.end_time,
        "guestCount": parse_int(payload.guest_count, default=None),
    }
    financials = {
        "totalValue": total,
        "deposit": deposit,
        "balance": total - deposit,
        "extraExpenses": copy.deepcopy(old_financials.get("extraExpenses", [])),
    }
    logistics = {
        "packageId": package.id,
        "packName": package.display_name,
        "managerName": payload.manager_name or "To be assigned",
        "items": items,
        "flow": copy.deepcopy(old_logistics.get("flow")) or {step: False for step in models.FLOW_STEPS},
        "selectedExtras": _selected_extras_map(payload.selected_extras),
        "makeupCount": parse_int(payload.makeup_count, default=None),
    }

    if existing:
        event = existing
        event.status = payload.status
        event.event_date = payload.date
        _save_json(event, "client", client)
        _save_json(event, "event_details", event_details)
        _save_json(event, "financials", financials)
        _save_json(event, "logistics", logistics)
        logger.info("Event %s updated (%s)", event.id, payload.status.value)
    else:
        event = models.Event(
            id=generate_event_id(db, payload.date),
            status=payload.status,
            event_date=payload.date,
            client=client,
            event_details=event_details,
            financials=financials,
            logistics=logistics,
        )
        db.add(event)
        logger.info("Event %s created (%s)", event.id, payload.status.value)

    db.commit()
    db.refresh(event)
    return event


@router.post("/intake")
def intake_magic_link(payload: schemas.MagicLinkIntake, engine: QuotationEngine = Depends(get_engine)):
    """Turn a client-wizard link into a draft for review, with a price preview."""
    draft = parse_magic_link(payload.query)
    if not draft:
        raise HTTPException(status_code=400, detail="Link carries no client, not a quote link")
    quote = engine.quote(
        draft["package_id"], draft["start_time"], draft["end_time"],
        draft["guest_count"], draft["selected_extras"],
    )
    return {"draft": draft, "quote": quote}


@router.patch("/{event_id}/status", response_model=schemas.Event)
def update_status(event_id: str, update: schemas.StatusUpdate, db: Session = Depends(get_db)):
    """Confirming here runs the same client/date/total and stock checks as a save."""
    event = get_event_or_404(db, event_id)
    if update.status == models.EventStatus.CONFIRMED and event.status != models.EventStatus.CONFIRMED:
        details = event.event_details or {}
        event_date = event.event_date or details.get("date", "")
        total = parse_money((event.financials or {}).get("totalValue"))
        validate_for_status(update.status, (event.client or {}).get("name", ""), event_date, total)
        check_stock(db, (event.logistics or {}).get("items", []), event_date,
                    details.get("startTime", ""), details.get("endTime", ""),
                    exclude_id=event.id, force=update.force)
    event.status = update.status
    logger.info("Event %s moved to %s", event.id, update.status.value)
    db.commit()
    db.refresh(event)
    return event


@router.post("/{event_id}/items/{index}/toggle", response_model=schemas.Event)
def toggle_checklist_item(event_id: str, index: int, db: Session = Depends(get_db)):
    event = get_event_or_404(db, event_id)
    logistics = copy.deepcopy(event.logistics or {})
    items = logistics.get("items", [])
    if not 0 <= index < len(items):
        raise HTTPException(status_code=404, detail="Checklist item not found")
    items[index]["checked"] = not items[index].get("checked", False)
    _save_json(event, "logistics", logistics)
    db.commit()
    db.refresh(event)
    return event


@router.post("/{event_id}/flow/{step}/toggle", response_model=schemas.Event)
def toggle_flow_step(event_id: str, step: str, db: Session = Depends(get_db)):
    if step not in models.FLOW_STEPS:
        raise HTTPException(status_code=400, detail=f"Unknown flow step: {step}. Available: {models.FLOW_STEPS}")
    event = get_event_or_404(db, event_id)
    logistics = copy.deepcopy(event.logistics or {})
    flow = logistics.setdefault("flow", {})
    flow[step] = not flow.get(step, False)
    _save_json(event, "logistics", logistics)
    db.commit()
    db.refresh(event)
    return event


@router.post("/{event_id}/expenses", response_model=schemas.Event)
def add_expense(event_id: str, expense: schemas.ExpenseCreate, db: Session = Depends(get_db)):
    event = get_event_or_404(db, event_id)
    financials = copy.deepcopy(event.financials or {})
    financials.setdefault("extraExpenses", []).append({
        "id": uuid.uuid4().hex[:12],
        "date": date.today().isoformat(),
        "desc": expense.description,
        "amount": expense.amount,
    })
    _save_json(event, "financials", financials)
    db.commit()
    db.refresh(event)
    return event


@router.delete("/{event_id}/expenses/{expense_id}", response_model=schemas.Event)
def remove_expense(event_id: str, expense_id: str, db: Session = Depends(get_db)):
    event = get_event_or_404(db, event_id)
    financials = copy.deepcopy(event.financials or {})
    expenses = financials.get("extraExpenses", [])
    remaining = [exp for exp in expenses if str(exp.get("id")) != expense_id]
    if len(remaining) == len(expenses):
        raise HTTPException(status_code=404, detail="Expense not found")
    financials["extraExpenses"] = remaining
    _save_json(event, "financials", financials)
    db.commit()
    db.refresh(event)
    return event


@router.get("/{event_id}/profit")
def get_event_profit(event_id: str, db: Session = Depends(get_db)):
    event = get_event_or_404(db, event_id)
    return {
        "event_id": event.id,
        "total_value": parse_money((event.financials or {}).get("totalValue")),
        "expenses": event_expenses_total(event),
        "net_profit": event_net_profit(event),
    }


@router.delete("/{event_id}")
def delete_event(event_id: str, db: Session = Depends(get_db)):
    event = get_event_or_404(db, event_id)
    db.delete(event)
    db.commit()
    logger.info("Event %s deleted", event_id)
    return {"ok": True, "deleted": event_id}
