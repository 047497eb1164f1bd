# artify/api/routes/posts.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from artify.core.security import Principal, get_current_user, require_customer, require_editor
from artify.db.base import get_db
from artify.db.models.post import PostStatus
from artify.schemas.post import (
    BidCreate,
    BidDecisionRequest,
    BidDecisionResponse,
    BidResponse,
    PostCreate,
    PostDetailResponse,
    PostResponse,
)
from artify.services import posts

router = APIRouter(prefix="/posts", tags=["posts"])


# Customer creates a post

@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    return posts.create_post(db, customer, **payload.model_dump())


# Customer views their posts

@router.get("/mine", response_model=List[PostResponse])
def my_posts(
    status: Optional[PostStatus] = Query(None),
    db: Session = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    return posts.list_customer_posts(db, customer, status)


# Editor browses open posts

@router.get("/open", response_model=List[PostResponse])
def open_posts(
    category_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    editor: Principal = Depends(require_editor),
):
    return posts.list_open_posts(db, editor, category_id)


@router.get("/{post_id}", response_model=PostDetailResponse)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    post, bids = posts.get_post(db, principal, post_id)
    return PostDetailResponse(
        **PostResponse.model_validate(post).model_dump(),
        bids=[BidResponse.model_validate(b) for b in bids],
        project_id=post.project.id if post.project else None,
    )


# Customer closes an open post

@router.post("/{post_id}/close", response_model=PostResponse)
def close_post(
    post_id: int,
    db: Session = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    return posts.close_post(db, customer, post_id)


# Editor bids on an open post

@router.post("/{post_id}/bids", response_model=BidResponse, status_code=status.HTTP_201_CREATED)
def submit_bid(
    post_id: int,
    payload: BidCreate,
    db: Session = Depends(get_db),
    editor: Principal = Depends(require_editor),
):
    return posts.submit_bid(db, editor, post_id, payload.price, payload.comment)


# Customer approves or declines a bid

@router.post("/{post_id}/bids/{bid_id}/decision", response_model=BidDecisionResponse)
def decide_bid(
    post_id: int,
    bid_id: int,
    payload: BidDecisionRequest,
    db: Session = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    bid, project = posts.decide_bid(db, customer, post_id, bid_id, payload.decision)
    return BidDecisionResponse(
        bid=BidResponse.model_validate(bid),
        project_id=project.id if project else None,
    )
