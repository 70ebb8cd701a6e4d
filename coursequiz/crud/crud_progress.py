import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from coursequiz.db.models import ModuleProgress
from coursequiz.schemas.module_progress import ModuleProgressUpdate

logger = logging.getLogger(__name__)


def get_progress(db: Session, user_id: UUID, module_id: str) -> Optional[ModuleProgress]:
    result = db.execute(
        select(ModuleProgress).where(ModuleProgress.user_id == user_id, ModuleProgress.module_id == module_id)
    )
    return result.scalar_one_or_none()


def upsert_progress(db: Session, user_id: UUID, module_id: str, data: ModuleProgressUpdate) -> ModuleProgress:
    """A module counts as completed once its progress reaches 100%."""
    progress = get_progress(db, user_id, module_id)
    if progress is None:
        progress = ModuleProgress(user_id=user_id, module_id=module_id)
        db.add(progress)

    progress.progress_percentage = data.progress_percentage
    progress.completed = data.completed

    db.commit()
    db.refresh(progress)
    logger.info("Module %s at %d%% for user %s", module_id, data.progress_percentage, user_id)
    return progress


def list_progress(db: Session, user_id: UUID) -> List[ModuleProgress]:
    result = db.execute(
        select(ModuleProgress)
        .where(ModuleProgress.user_id == user_id)
        .order_by(ModuleProgress.module_id)
    )
    return list(result.scalars().all())
