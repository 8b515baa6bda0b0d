"""Community posts: CRUD, like toggle and comments."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .ownership import ensure_author, get_or_404
from ...deps import get_current_user
from ...models.post import Post, PostComment
from ...models.user import User
from ...platform.database import get_db
from ...schemas.post import CommentCreate, PostCreate, PostResponse
from ...shared.errors import NotFoundError

logger = logging.getLogger("prompt_judge.community")

router = APIRouter(prefix="/posts", tags=["Community"])


def _post_query(db: Session):
    return db.query(Post).options(
        selectinload(Post.author),
        selectinload(Post.likes),
        selectinload(Post.comments).selectinload(PostComment.author),
    )


@router.get("", response_model=List[PostResponse])
def list_posts(
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    query = _post_query(db)
    if category:
        query = query.filter(Post.category == category)
    return query.order_by(Post.created_at.desc(), Post.id.desc()).all()


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    data: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    post = Post(author_id=current_user.id, **data.model_dump())
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Post created id=%s author_id=%s", post.id, current_user.id)
    return post


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: int, db: Session = Depends(get_db)):
    post = _post_query(db).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    return post


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    post = get_or_404(db, Post, post_id, "Post")
    ensure_author(post.author_id, current_user.id, "Post")
    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete post id=%s", post_id)
        raise HTTPException(status_code=500, detail="Failed to delete post")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/like", response_model=PostResponse)
def toggle_post_like(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Like the post, or remove the like if the user already liked it."""
    post = get_or_404(db, Post, post_id, "Post")
    user = db.get(User, current_user.id)
    if user in post.likes:
        post.likes.remove(user)
    else:
        post.likes.append(user)
    db.commit()
    db.refresh(post)
    return post


@router.post("/{post_id}/comments", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    post_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    post = get_or_404(db, Post, post_id, "Post")
    post.comments.append(PostComment(author_id=current_user.id, content=data.content))
    db.commit()
    db.refresh(post)
    return post


@router.delete("/{post_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    post_id: int,
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = (
        db.query(PostComment)
        .filter(PostComment.id == comment_id, PostComment.post_id == post_id)
        .first()
    )
    if not comment:
        raise NotFoundError("Comment not found")
    ensure_author(comment.author_id, current_user.id, "Comment")
    db.delete(comment)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
