# controllers/transactions.py
"""Transaction API endpoints."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..dependencies import get_db
from ..models import TransactionType
from ..schemas import finance as schemas
from ..schemas import report as report_schemas
from ..services import transactions as service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=schemas.Transaction, status_code=201, summary="Create a transaction")
def create_transaction(
    transaction: schemas.TransactionCreate,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """Record a new income or expense; expense budgets in the same category are refreshed."""
    return service.create_transaction(db, current_user, transaction)


@router.get("/", response_model=List[schemas.Transaction], summary="List transactions")
def read_transactions(
    type: Optional[TransactionType] = None,
    category_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """List transactions, newest first, filtered by type, category and inclusive date range."""
    logger.debug(f"Fetching transactions (type={type}, category={category_id}, {start_date}..{end_date})")
    return service.list_transactions(db, current_user, type, category_id, start_date, end_date)


@router.get("/stats", response_model=report_schemas.TransactionStats, summary="Income/expense totals")
def read_stats(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.transaction_stats(db, current_user, start_date, end_date)


@router.get("/{transaction_id}", response_model=schemas.Transaction, summary="Get a transaction")
def read_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.get_transaction(db, current_user, transaction_id)


@router.patch("/{transaction_id}", response_model=schemas.Transaction, summary="Update a transaction")
def update_transaction(
    transaction_id: int,
    data: schemas.TransactionUpdate,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """Update transaction details."""
    return service.update_transaction(db, current_user, transaction_id, data)


@router.delete("/{transaction_id}", summary="Delete a transaction")
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """Delete a single transaction."""
    return service.delete_transaction(db, current_user, transaction_id)
