from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from .. import models, schemas
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["inventory"])


def generate_item_id(db: Session) -> str:
    count = db.query(models.InventoryItem).count()
    sequence = count + 1
    while db.get(models.InventoryItem, f"inv-{sequence}"):
        sequence += 1
    return f"inv-{sequence}"


def get_item_or_404(db: Session, item_id: str) -> models.InventoryItem:
    item = db.get(models.InventoryItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return item


@router.get("/", response_model=List[schemas.InventoryItem])
def list_items(category: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(models.InventoryItem)
    if category and category != "All":
        query = query.filter(models.InventoryItem.category == category)
    return query.order_by(models.InventoryItem.category, models.InventoryItem.name).all()


@router.post("/", response_model=schemas.InventoryItem)
def add_item(item: schemas.InventoryItemCreate, db: Session = Depends(get_db)):
    """New stock is fully available."""
    db_item = models.InventoryItem(
        id=generate_item_id(db),
        available=item.total,
        status="OK",
        **item.model_dump(),
    )
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item


@router.patch("/{item_id}", response_model=schemas.InventoryItem)
def update_item(item_id: str, update: schemas.InventoryItemUpdate, db: Session = Depends(get_db)):
    item = get_item_or_404(db, item_id)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(item, field, value)
    if item.available is not None and item.total is not None and item.available > item.total:
        raise HTTPException(status_code=422, detail="available cannot exceed total stock")
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}")
def delete_item(item_id: str, db: Session = Depends(get_db)):
    item = get_item_or_404(db, item_id)
    db.delete(item)
    db.commit()
    return {"ok": True, "deleted": item_id}


# --- Damage reports ---

@router.get("/damage-reports/", response_model=List[schemas.DamageReport])
def list_damage_reports(status: Optional[models.DamageStatus] = None, db: Session = Depends(get_db)):
    query = db.query(models.DamageReport)
    if status:
        query = query.filter(models.DamageReport.status == status)
    return query.order_by(models.DamageReport.id.desc()).all()


@router.post("/damage-reports/", response_model=schemas.DamageReport)
def report_damage(report: schemas.DamageReportCreate, db: Session = Depends(get_db)):
    get_item_or_404(db, report.item_id)
    db_report = models.DamageReport(
        date=date.today().isoformat(),
        status=models.DamageStatus.PENDING,
        **report.model_dump(),
    )
    db.add(db_report)
    db.commit()
    db.refresh(db_report)
    logger.warning("Damage reported on %s: %s", report.item_id, report.description)
    return db_report


@router.post("/damage-reports/{report_id}/solve", response_model=schemas.DamageReport)
def solve_damage_report(report_id: int, db: Session = Depends(get_db)):
    report = db.get(models.DamageReport, report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Damage report not found")
    report.status = models.DamageStatus.SOLVED
    db.commit()
    db.refresh(report)
    return report
