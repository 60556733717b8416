"""Documents router - vault records with lock enforcement."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.db.models import User
from app.schemas.document import DocumentCreate, DocumentRead, DocumentUpdate
from app.services import document_service

router = APIRouter()


@router.post("", response_model=DocumentRead, status_code=201)
def create_document(
    data: DocumentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return document_service.create_document(db, user, data)


@router.patch("/{document_id}", response_model=DocumentRead)
def update_document(
    document_id: UUID,
    data: DocumentUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    document = document_service.get_visible_document(db, user, document_id)
    return document_service.update_document(db, user, document, data)


@router.delete("/{document_id}", status_code=204)
def delete_document(
    document_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a document. Locked documents return 403."""
    document = document_service.get_visible_document(db, user, document_id)
    document_service.delete_document(db, document)
    return Response(status_code=204)
