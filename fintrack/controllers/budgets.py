# controllers/budgets.py
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..dependencies import get_db
from ..schemas import finance as schemas
from ..services import budgets as service

router = APIRouter()


@router.post("/", response_model=schemas.BudgetView, status_code=201, summary="Create a new budget")
def create_budget(
    budget_data: schemas.BudgetCreate,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """Create a spending limit for one of the user's categories."""
    return service.create_budget(db, current_user, budget_data)


@router.get("/", response_model=List[schemas.BudgetView], summary="List my budgets")
def list_my_budgets(
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """List budgets, newest first, with spend recomputed from transactions."""
    return service.list_budgets(db, current_user)


@router.get("/{budget_id}", response_model=schemas.BudgetView, summary="Get a budget")
def read_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.get_budget(db, current_user, budget_id)


@router.patch("/{budget_id}", response_model=schemas.BudgetView, summary="Update budget")
def update_budget(
    budget_id: int,
    update_data: schemas.BudgetUpdate,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.update_budget(db, current_user, budget_id, update_data)


@router.delete("/{budget_id}", summary="Delete budget")
def delete_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.delete_budget(db, current_user, budget_id)
