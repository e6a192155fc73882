from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union
from datetime import datetime
from .models import EventStatus, DamageStatus, TransactionType

# Form fields arrive half-typed; the engine coerces them, so accept anything numeric-ish
Numberish = Optional[Union[int, float, str]]


# --- Quotes ---

class QuoteRequest(BaseModel):
    package_id: str = "essential"
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    start_meridiem: Optional[str] = None
    end_meridiem: Optional[str] = None
    guest_count: Numberish = None
    selected_extras: Union[List[str], Dict[str, bool]] = []
    makeup_override: Numberish = None
    manual_total: Numberish = None


class QuoteLineItem(BaseModel):
    kind: str
    id: str
    description: str
    details: str = ""
    quantity: int
    unit_price: int
    line_total: int


class ExtraPrice(BaseModel):
    id: str
    name: str
    pricing_kind: Optional[str] = None
    price: int
    quantity: int
    unit_price: int
    description: str = ""
    recommended_quantity: Optional[int] = None
    raw_price: Optional[int] = None


class QuoteResult(BaseModel):
    package_id: str
    package_name: str
    is_custom: bool
    currency: str
    duration_hours: float
    overage_hours: int
    guest_count: int
    line_items: List[QuoteLineItem]
    extras: List[ExtraPrice]
    calculated_total: int
    total: int
    total_source: str


# --- Events ---

class ChecklistItem(BaseModel):
    name: str
    qty: int = Field(default=1, ge=0)
    checked: bool = False


class EventCreate(BaseModel):
    id: Optional[str] = None  # set when editing an existing event
    status: EventStatus = EventStatus.CONFIRMED
    client_name: str = ""
    client_phone: str = ""
    date: str = ""  # YYYY-MM-DD
    start_time: str = ""
    end_time: str = ""
    location: str = ""
    guest_count: Numberish = None
    package_id: str = "essential"
    manager_name: str = ""
    total_value: Numberish = None
    deposit: Numberish = None
    selected_extras: Union[Dict[str, bool], List[str]] = {}
    makeup_count: Numberish = None
    items: Optional[List[ChecklistItem]] = None
    force: bool = False  # confirm even with stock conflicts


class MagicLinkIntake(BaseModel):
    query: Dict[str, str]


class StatusUpdate(BaseModel):
    status: EventStatus
    force: bool = False  # confirm even with stock conflicts


class ExpenseCreate(BaseModel):
    description: str
    amount: int = Field(gt=0)


class Event(BaseModel):
    id: str
    status: EventStatus
    event_date: Optional[str] = None
    client: Dict[str, Any]
    event_details: Dict[str, Any]
    financials: Dict[str, Any]
    logistics: Dict[str, Any]
    created_at: datetime
    updated_at: datetime
    class Config:
        from_attributes = True


class StockConflict(BaseModel):
    name: str
    stock: int
    in_use: int
    requested: int
    event_ids: List[str] = []


# --- Inventory ---

class InventoryItemBase(BaseModel):
    category: str
    name: str
    total: int = Field(default=0, ge=0)

class InventoryItemCreate(InventoryItemBase):
    pass

class InventoryItemUpdate(BaseModel):
    category: Optional[str] = None
    name: Optional[str] = None
    total: Optional[int] = Field(default=None, ge=0)
    available: Optional[int] = Field(default=None, ge=0)
    status: Optional[str] = None

class InventoryItem(InventoryItemBase):
    id: str
    available: int
    status: str
    class Config:
        from_attributes = True


class DamageReportCreate(BaseModel):
    item_id: str
    description: str

class DamageReport(DamageReportCreate):
    id: int
    date: str
    status: DamageStatus
    class Config:
        from_attributes = True


# --- Accounting ---

class LedgerEntryCreate(BaseModel):
    description: str
    amount: int = Field(gt=0)
    type: TransactionType

class LedgerEntry(LedgerEntryCreate):
    id: int
    date: str
    class Config:
        from_attributes = True


class LedgerHistoryRow(BaseModel):
    id: str
    event_id: Optional[str] = None
    client_name: Optional[str] = None
    date: str
    description: str
    amount: int
    type: str
    is_event: bool


class AccountingSummary(BaseModel):
    total_deposits: int
    event_expenses: int
    global_income: int
    global_expenses: int
    total_in: int
    total_out: int
    balance: int
    history: List[LedgerHistoryRow]
