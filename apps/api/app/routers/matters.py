"""Matters router - role-scoped matters, pillar progress and sub-resources."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.core.matter_access import check_matter_access
from app.core.pillars import matter_progress, parse_pillar
from app.db.models import Matter, User
from app.schemas.document import DocumentRead
from app.schemas.matter import (
    MatterCreate,
    MatterRead,
    MatterUpdate,
    PillarProgressRead,
    PillarUpdate,
)
from app.schemas.task import TaskRead
from app.services import document_service, matter_service, task_service

router = APIRouter()


def _visible_matter(db: Session, user: User, matter_id: UUID) -> Matter:
    return check_matter_access(matter_service.get_matter(db, matter_id), user)


@router.get("", response_model=list[MatterRead])
def list_matters(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List matters visible to the caller.

    CLIENT sees owned matters, CONVEYANCER assigned ones, BROKER/ADMIN all.
    """
    return [matter_service.to_matter_read(m) for m in matter_service.list_matters(db, user)]


@router.post("", response_model=MatterRead, status_code=201)
def create_matter(
    data: MatterCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    matter = matter_service.create_matter(db, user, data)
    return matter_service.to_matter_read(matter)


@router.get("/{matter_id}", response_model=MatterRead)
def get_matter(
    matter_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return matter_service.to_matter_read(_visible_matter(db, user, matter_id))


@router.patch("/{matter_id}", response_model=MatterRead)
def update_matter(
    matter_id: UUID,
    data: MatterUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    matter = _visible_matter(db, user, matter_id)
    matter = matter_service.update_matter(db, user, matter, data)
    return matter_service.to_matter_read(matter)


@router.get("/{matter_id}/progress", response_model=PillarProgressRead)
def get_progress(
    matter_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    matter = _visible_matter(db, user, matter_id)
    return matter_service.to_progress_read(matter_progress(matter))


@router.patch("/{matter_id}/pillars/{pillar}", response_model=MatterRead)
def update_pillar(
    matter_id: UUID,
    pillar: str,
    data: PillarUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Set one pillar's status. Other pillars are untouched."""
    pillar_key = parse_pillar(pillar)
    matter = _visible_matter(db, user, matter_id)
    matter = matter_service.set_matter_pillar(db, user, matter, pillar_key, data.status)
    return matter_service.to_matter_read(matter)


@router.get("/{matter_id}/tasks", response_model=list[TaskRead])
def list_matter_tasks(
    matter_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    matter = _visible_matter(db, user, matter_id)
    return task_service.list_tasks_for_matter(db, matter.id)


@router.get("/{matter_id}/documents", response_model=list[DocumentRead])
def list_matter_documents(
    matter_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    matter = _visible_matter(db, user, matter_id)
    return document_service.list_documents_for_matter(db, matter.id)
