"""Playbook router - public educational articles."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_roles
from app.db.enums import Pillar, Role
from app.db.models import User
from app.schemas.playbook import ArticleCreate, ArticleListItem, ArticleRead
from app.services import playbook_service

router = APIRouter()


@router.get("", response_model=list[ArticleListItem])
def list_articles(
    category: str | None = Query(None, max_length=50),
    pillar: Pillar | None = None,
    db: Session = Depends(get_db),
):
    return playbook_service.list_articles(db, category=category, pillar=pillar)


@router.get("/{slug}", response_model=ArticleRead)
def get_article(slug: str, db: Session = Depends(get_db)):
    return playbook_service.get_article(db, slug)


@router.post("", response_model=ArticleRead, status_code=201)
def create_article(
    data: ArticleCreate,
    user: User = Depends(require_roles([Role.ADMIN])),
    db: Session = Depends(get_db),
):
    return playbook_service.create_article(db, data)
