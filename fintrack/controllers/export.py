# controllers/export.py
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user, get_user_email
from ..dependencies import get_db
from ..models import TransactionType
from ..schemas import report as schemas
from ..services import export as service

router = APIRouter()

ExportFormat = Literal["json", "csv"]


@router.get("/transactions", response_model=schemas.ExportPayload, summary="Export transactions")
def export_transactions(
    format: ExportFormat = "json",
    type: Optional[TransactionType] = None,
    category_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.export_transactions(db, current_user, format, type, category_id, start_date, end_date)


@router.get("/budgets", response_model=schemas.ExportPayload, summary="Export budgets")
def export_budgets(
    format: ExportFormat = "json",
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.export_budgets(db, current_user, format)


@router.get("/categories", response_model=schemas.ExportPayload, summary="Export categories")
def export_categories(
    format: ExportFormat = "json",
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.export_categories(db, current_user, format)


@router.get("/full", summary="Export all data")
def export_full(
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user),
    user_email: Optional[str] = Depends(get_user_email)
):
    """Profile, transactions, budgets and categories as one JSON document."""
    return service.export_full(db, current_user, user_email)
