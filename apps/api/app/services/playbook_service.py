"""Playbook articles."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import NotFound, ValidationError
from app.db.enums import Pillar
from app.db.models import PlaybookArticle
from app.schemas.playbook import ArticleCreate


def list_articles(
    db: Session,
    category: str | None = None,
    pillar: Pillar | None = None,
) -> list[PlaybookArticle]:
    """Published articles, optionally filtered."""
    query = db.query(PlaybookArticle).filter(PlaybookArticle.published.is_(True))
    if category:
        query = query.filter(PlaybookArticle.category == category)
    if pillar:
        query = query.filter(PlaybookArticle.pillar == pillar.value)
    return query.order_by(PlaybookArticle.category, PlaybookArticle.title).all()


def get_article(db: Session, slug: str) -> PlaybookArticle:
    article = (
        db.query(PlaybookArticle)
        .filter(PlaybookArticle.slug == slug, PlaybookArticle.published.is_(True))
        .first()
    )
    if not article:
        raise NotFound("Article not found")
    return article


def create_article(db: Session, data: ArticleCreate) -> PlaybookArticle:
    values = data.model_dump()
    if values.get("pillar") is not None:
        values["pillar"] = values["pillar"].value
    article = PlaybookArticle(**values)
    db.add(article)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("An article with this slug already exists", field="slug")
    db.refresh(article)
    return article
