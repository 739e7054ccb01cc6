"""Culture articles: public reads, admin-only writes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..auth import require_admin
from ..database import Database
from ..dependencies import get_db, success
from ..errors import NotFoundError
from ..merge import KEEP_IF_FALSY, NULLABLE, merge_with_defaults

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/culture", tags=["culture"])

ARTICLE_POLICIES = {
    "title": KEEP_IF_FALSY,
    "content": KEEP_IF_FALSY,
    "category": KEEP_IF_FALSY,
    "image": NULLABLE,
}


class ArticleCreate(BaseModel):
    title: str
    content: str
    category: str
    image: Optional[str] = None


class ArticleUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None


def _get_article(db: Database, article_id: str) -> dict:
    article = db.get_article(article_id)
    if article is None:
        raise NotFoundError("Article not found")
    return article


@router.get("")
async def list_articles(
    category: Optional[str] = Query(None), db: Database = Depends(get_db)
):
    articles = db.list_articles(category)
    return success(articles, count=len(articles))


@router.get("/{article_id}")
async def get_article(article_id: str, db: Database = Depends(get_db)):
    return success(_get_article(db, article_id))


@router.post("", status_code=201)
async def create_article(
    body: ArticleCreate,
    db: Database = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    article = db.create_article(body.model_dump())
    logger.info(f"Article {article['id']} created by {admin['email']}")
    return success(article)


@router.put("/{article_id}")
async def update_article(
    article_id: str,
    body: ArticleUpdate,
    db: Database = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    article = _get_article(db, article_id)
    merged = merge_with_defaults(
        article, body.model_dump(exclude_unset=True), ARTICLE_POLICIES
    )
    return success(db.update_article(article_id, merged))


@router.delete("/{article_id}")
async def delete_article(
    article_id: str,
    db: Database = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    _get_article(db, article_id)
    db.delete_article(article_id)
    return success({})
