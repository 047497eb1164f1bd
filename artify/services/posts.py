# artify/services/posts.py
"""
Post and bid side of the engagement lifecycle.

    open --(approve bid)--> in_progress --(payment captured)--> completed
    open --(close)--> closed

A post is in_progress exactly when one of its bids is approved. Approval
writes the bid, the new project and the post status in one transaction,
and the partial unique index on approved bids rejects a racing second
approval.
"""
import enum
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from artify.core.errors import AuthorizationError, ConflictError, InvalidStateError, NotFoundError
from artify.core.logger import kv
from artify.core.security import Principal, Role
from artify.db.base import utcnow
from artify.db.models.category import Category
from artify.db.models.post import Bid, Post, PostStatus
from artify.db.models.project import Project, ProjectStatus
from artify.services.guards import is_blank, is_positive, is_unique_violation, is_whole, raise_for, require_role

logger = logging.getLogger(__name__)

# unique constraint markers: PostgreSQL constraint name, SQLite column list
_BID_PER_EDITOR = ("uq_bids_post_editor", "bids.post_id, bids.editor_id")
_ONE_APPROVAL = ("uq_bids_one_approved_per_post", "projects_post_id_key", "bids.post_id", "projects.post_id")


class BidDecision(str, enum.Enum):
    approve = "approve"
    decline = "decline"


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _load_post(db: Session, post_id: int, lock: bool = False) -> Post:
    q = db.query(Post).filter(Post.id == post_id)
    if lock:
        q = q.with_for_update()
    post = q.first()
    if not post:
        raise NotFoundError("Post not found")
    return post


def approved_bid(db: Session, post_id: int) -> Optional[Bid]:
    return db.query(Bid).filter(Bid.post_id == post_id, Bid.approved.is_(True)).first()


# -------------------------
# Customer: posts
# -------------------------
def create_post(
    db: Session,
    customer: Principal,
    category_id: int,
    title: str,
    description: str,
    budget: float,
    duration: int,
    deadline: Optional[datetime] = None,
) -> Post:
    require_role(customer, Role.customer)

    errors = {}
    if is_blank(title):
        errors["title"] = "Title is required"
    if is_blank(description):
        errors["description"] = "Description is required"
    if not is_positive(budget):
        errors["budget"] = "Budget must be a positive number"
    if not is_whole(duration):
        errors["duration"] = "Duration must be a positive number"

    now = utcnow()
    if deadline is not None:
        deadline = _naive_utc(deadline)
        if deadline < now:
            errors["deadline"] = "Deadline must be in the future"
    raise_for(errors)

    if db.get(Category, category_id) is None:
        raise NotFoundError("Category not found")

    post = Post(
        customer_id=customer.id,
        category_id=category_id,
        title=title.strip(),
        description=description.strip(),
        budget=float(budget),
        duration=int(duration),
        deadline=deadline or now + timedelta(days=int(duration)),
        status=PostStatus.open,
        created_at=now,
    )
    db.add(post)
    db.commit()
    db.refresh(post)

    logger.info(kv("post.created", post_id=post.id, customer_id=customer.id, budget=post.budget))
    return post


def close_post(db: Session, customer: Principal, post_id: int) -> Post:
    require_role(customer, Role.customer)
    post = _load_post(db, post_id, lock=True)
    if post.customer_id != customer.id:
        raise AuthorizationError()
    if post.status != PostStatus.open:
        raise InvalidStateError(f"Cannot close post because it is already {post.status.value}")

    post.status = PostStatus.closed
    db.commit()
    db.refresh(post)
    logger.info(kv("post.closed", post_id=post.id))
    return post


# -------------------------
# Editor: bids
# -------------------------
def submit_bid(db: Session, editor: Principal, post_id: int, price: float, comment: Optional[str] = None) -> Bid:
    require_role(editor, Role.editor)

    if not is_positive(price):
        raise_for({"price": "Price must be a positive number"})

    post = _load_post(db, post_id)
    if post.status != PostStatus.open:
        raise InvalidStateError("Post is not open for bidding")

    existing = db.query(Bid).filter(Bid.post_id == post.id, Bid.editor_id == editor.id).first()
    if existing:
        raise ConflictError("You have already placed a bid on this post")

    bid = Bid(
        post_id=post.id,
        editor_id=editor.id,
        price=float(price),
        comment=None if is_blank(comment) else comment.strip(),
        approved=False,
        declined=False,
    )
    db.add(bid)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, *_BID_PER_EDITOR):
            raise
        raise ConflictError("You have already placed a bid on this post")
    db.refresh(bid)

    logger.info(kv("bid.submitted", bid_id=bid.id, post_id=post.id, editor_id=editor.id, price=bid.price))
    return bid


# -------------------------
# Customer: decide on a bid
# -------------------------
def decide_bid(
    db: Session,
    customer: Principal,
    post_id: int,
    bid_id: int,
    decision: BidDecision,
) -> Tuple[Bid, Optional[Project]]:
    """
    Approve or decline one bid. Returns the bid and, on approval, the
    project created for it.
    """
    require_role(customer, Role.customer)
    decision = BidDecision(decision)

    post = _load_post(db, post_id, lock=True)
    if post.customer_id != customer.id:
        raise AuthorizationError()

    bid = db.query(Bid).filter(Bid.id == bid_id, Bid.post_id == post.id).first()
    if not bid:
        raise NotFoundError("Bid not found")

    if approved_bid(db, post.id) is not None:
        raise InvalidStateError("A bid has already been approved for this post")
    if post.status != PostStatus.open:
        raise InvalidStateError("Post is not open")
    if bid.declined:
        raise InvalidStateError("Bid has already been declined")

    if decision == BidDecision.decline:
        bid.approved = False
        bid.declined = True
        db.commit()
        db.refresh(bid)
        logger.info(kv("bid.declined", bid_id=bid.id, post_id=post.id))
        return bid, None

    bid.approved = True
    bid.declined = False
    project = Project(
        post_id=post.id,
        customer_id=post.customer_id,
        editor_id=bid.editor_id,
        status=ProjectStatus.in_progress,
    )
    post.status = PostStatus.in_progress
    db.add(project)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, *_ONE_APPROVAL):
            raise
        raise InvalidStateError("A bid has already been approved for this post")
    db.refresh(bid)
    db.refresh(project)

    logger.info(kv("bid.approved", bid_id=bid.id, post_id=post.id, project_id=project.id, editor_id=bid.editor_id))
    return bid, project


# -------------------------
# Reads
# -------------------------
def get_post(db: Session, principal: Principal, post_id: int) -> Tuple[Post, List[Bid]]:
    """
    Post plus the bids the caller may see: the owner and admins see every
    bid, an editor sees only their own.
    """
    post = _load_post(db, post_id)

    if principal.is_admin:
        return post, list(post.bids)
    if principal.is_customer:
        if post.customer_id != principal.id:
            raise AuthorizationError()
        return post, list(post.bids)
    if principal.is_editor:
        own = [b for b in post.bids if b.editor_id == principal.id]
        if post.status != PostStatus.open and not own:
            raise AuthorizationError()
        return post, own
    raise AuthorizationError()


def list_customer_posts(db: Session, customer: Principal, status: Optional[PostStatus] = None) -> List[Post]:
    require_role(customer, Role.customer)
    q = db.query(Post).filter(Post.customer_id == customer.id)
    if status:
        q = q.filter(Post.status == status)
    return q.order_by(Post.created_at.desc()).all()


def list_open_posts(db: Session, editor: Principal, category_id: Optional[int] = None) -> List[Post]:
    require_role(editor, Role.editor)
    q = db.query(Post).filter(Post.status == PostStatus.open)
    if category_id:
        q = q.filter(Post.category_id == category_id)
    return q.order_by(Post.created_at.desc()).all()


def list_posts(db: Session, admin: Principal, status: Optional[PostStatus] = None) -> List[Post]:
    require_role(admin, Role.admin)
    q = db.query(Post)
    if status:
        q = q.filter(Post.status == status)
    return q.order_by(Post.created_at.desc()).all()
