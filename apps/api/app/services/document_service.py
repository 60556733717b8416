"""Document vault service."""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, NotFound, ValidationError
from app.core.matter_access import check_matter_access
from app.db.enums import NotificationTrigger, Role
from app.db.models import Document, Matter, User
from app.schemas.document import DocumentCreate, DocumentUpdate

logger = logging.getLogger(__name__)


def list_documents_for_matter(db: Session, matter_id: UUID) -> list[Document]:
    return (
        db.query(Document)
        .filter(Document.matter_id == matter_id)
        .order_by(Document.uploaded_at.desc())
        .all()
    )


def get_visible_document(db: Session, user: User, document_id: UUID) -> Document:
    document = db.get(Document, document_id)
    if not document:
        raise NotFound("Document not found")
    check_matter_access(db.get(Matter, document.matter_id), user)
    return document


def create_document(db: Session, user: User, data: DocumentCreate) -> Document:
    """Record an uploaded file. Only staff roles may lock on upload."""
    matter = check_matter_access(db.get(Matter, data.matter_id), user)
    if data.locked and user.role == Role.CLIENT.value:
        raise Forbidden("Clients cannot lock documents")

    document = Document(
        matter_id=matter.id,
        name=data.name,
        size_label=data.size_label,
        category=data.category,
        uploaded_by_user_id=user.id,
        locked=data.locked,
        file_key=data.file_key,
        file_url=data.file_url,
    )
    db.add(document)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("A document with this storage key already exists", field="fileKey")
    db.refresh(document)

    if user.id != matter.client_user_id:
        from app.services import notification_service

        client = db.get(User, matter.client_user_id)
        if client:
            notification_service.notify(
                db,
                NotificationTrigger.DOCUMENT_UPLOADED,
                recipient=client,
                matter=matter,
                extra={"document_name": document.name},
            )
    return document


def update_document(db: Session, user: User, document: Document, data: DocumentUpdate) -> Document:
    update_data = data.model_dump(exclude_unset=True)
    if "locked" in update_data and user.role == Role.CLIENT.value:
        raise Forbidden("Clients cannot change document locks")

    for field, value in update_data.items():
        if value is None:
            continue
        setattr(document, field, value)
    db.commit()
    db.refresh(document)
    return document


def delete_document(db: Session, document: Document) -> None:
    """Hard delete. Locked documents are refused for every role."""
    if document.locked:
        raise Forbidden("Document is locked and cannot be deleted")
    db.delete(document)
    db.commit()
    logger.info("Document %s deleted", document.id)
