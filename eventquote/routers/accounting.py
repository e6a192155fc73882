from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from datetime import date

from .. import models, schemas
from ..accounting import summarize_ledger
from ..database import get_db

router = APIRouter(prefix="/accounting", tags=["accounting"])


@router.get("/transactions", response_model=List[schemas.LedgerEntry])
def list_transactions(db: Session = Depends(get_db)):
    return db.query(models.LedgerEntry).order_by(models.LedgerEntry.id.desc()).all()


@router.post("/transactions", response_model=schemas.LedgerEntry)
def add_transaction(entry: schemas.LedgerEntryCreate, db: Session = Depends(get_db)):
    db_entry = models.LedgerEntry(date=date.today().isoformat(), **entry.model_dump())
    db.add(db_entry)
    db.commit()
    db.refresh(db_entry)
    return db_entry


@router.delete("/transactions/{entry_id}")
def remove_transaction(entry_id: int, db: Session = Depends(get_db)):
    entry = db.get(models.LedgerEntry, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Transaction not found")
    db.delete(entry)
    db.commit()
    return {"ok": True, "deleted": entry_id}


@router.get("/summary", response_model=schemas.AccountingSummary)
def get_summary(db: Session = Depends(get_db)):
    """Cash box: deposits + income in, event expenses + general expenses out."""
    events = db.query(models.Event).all()
    ledger = db.query(models.LedgerEntry).all()
    return summarize_ledger(events, ledger)
