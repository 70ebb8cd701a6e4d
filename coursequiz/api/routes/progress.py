from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursequiz.api.deps import get_current_user
from coursequiz.crud import crud_progress
from coursequiz.db.models import User
from coursequiz.db.session import get_db
from coursequiz.schemas.module_progress import ModuleProgressResponse, ModuleProgressUpdate

router = APIRouter(prefix="/progress", tags=["Progress"])


@router.get("", response_model=List[ModuleProgressResponse])
def list_module_progress(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_progress.list_progress(db, current_user.id)


@router.put("/{module_id}", response_model=ModuleProgressResponse)
def update_module_progress(
    module_id: str,
    payload: ModuleProgressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Record how far the caller is through a module, replacing the previous value."""
    return crud_progress.upsert_progress(db, current_user.id, module_id, payload)
