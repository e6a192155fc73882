from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


class EventStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    FINISHED = "FINISHED"


class DamageStatus(str, enum.Enum):
    PENDING = "PENDING"
    SOLVED = "SOLVED"


class TransactionType(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"


# Operational checklist steps on every event sheet
FLOW_STEPS = [
    "staffConfirmed",
    "equipmentDelivered",
    "equipmentReturned",
    "staffPaid",
]


class Event(Base):
    """
    One booked (or drafted) party.

    DECISION: the nested document shape (client / eventDetails / financials /
    logistics) is kept as JSON columns so engine output drops straight into
    financials.totalValue. event_date is duplicated as a real column for
    per-day ID sequencing and the stock overlap query.
    """
    __tablename__ = "events"

    id = Column(String, primary_key=True)  # EVT-YYMMDD-NN
    status = Column(Enum(EventStatus), default=EventStatus.DRAFT, nullable=False)
    event_date = Column(String, index=True, nullable=True)  # YYYY-MM-DD
    client = Column(JSON, default=dict)          # {name, phone}
    event_details = Column(JSON, default=dict)   # {date, type, location, startTime, endTime, guestCount}
    financials = Column(JSON, default=dict)      # {totalValue, deposit, balance, extraExpenses}
    logistics = Column(JSON, default=dict)       # {packName, managerName, items, flow, selectedExtras, makeupCount}
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class InventoryItem(Base):
    """Rental equipment stock: cabinets, subs, lights."""
    __tablename__ = "inventory_items"

    id = Column(String, primary_key=True)  # inv-<n>
    category = Column(String, nullable=False)  # 'Sonido' | 'Luces' | 'Efectos' | etc.
    name = Column(String, nullable=False)
    total = Column(Integer, default=0)
    available = Column(Integer, default=0)
    status = Column(String, default="OK")
    created_at = Column(DateTime, default=datetime.utcnow)

    damage_reports = relationship("DamageReport", back_populates="item", cascade="all, delete-orphan")


class DamageReport(Base):
    __tablename__ = "damage_reports"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(String, ForeignKey("inventory_items.id"), nullable=False)
    date = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(Enum(DamageStatus), default=DamageStatus.PENDING)

    item = relationship("InventoryItem", back_populates="damage_reports")


class LedgerEntry(Base):
    """General cash-box transaction not tied to an event."""
    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(String, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Integer, default=0)
    type = Column(Enum(TransactionType), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
