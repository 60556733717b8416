"""Chat router - per-matter message thread."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.core.matter_access import check_matter_access
from app.db.models import User
from app.schemas.integrations import ChatMessageCreate, ChatMessageRead
from app.services import chat_service, matter_service

router = APIRouter()


@router.get("/{matter_id}", response_model=list[ChatMessageRead])
def list_messages(
    matter_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    matter = check_matter_access(matter_service.get_matter(db, matter_id), user)
    return chat_service.list_messages(matter.id)


@router.post("/{matter_id}", response_model=ChatMessageRead, status_code=201)
def post_message(
    matter_id: UUID,
    data: ChatMessageCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    matter = check_matter_access(matter_service.get_matter(db, matter_id), user)
    return chat_service.post_message(matter, user, data.text)
