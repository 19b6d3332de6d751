"""
Post service: the only way microposts get written.

Every write runs the validator first. Callers get back a dict:
    Success:  {"success": True, "post": {...}}
    Rejected: {"success": False, "violations": [...], "errors": [...],
               "errors_by_field": {...}}
    Error:    {"success": False, "error": "..."}

A post from an unknown author is rejected with "User must exist" in
`errors` (alongside any rule violations) and also as `error`.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError

from microposts.config import load_config
from microposts.database import get_session, init_db
from microposts.models import Micropost, User
from microposts.validation import (
    errors_by_field,
    full_messages,
    is_present,
    validate,
    violation_tags,
)

logger = logging.getLogger(__name__)

USER_MUST_EXIST = "User must exist"


# ── Users ────────────────────────────────────────────────────────────

def create_user(user_id: Any, name: Optional[str] = None) -> Dict[str, Any]:
    """
    Register an author.

    Args:
        user_id: Identifier posts will reference (stored as a string)
        name: Optional display name

    Returns:
        {"success": True, "user": {...}} or {"success": False, "error": "..."}
    """
    if not is_present(user_id):
        return {"success": False, "error": "user id can't be blank."}
    user_id = str(user_id)

    init_db()
    session = get_session()
    try:
        if session.get(User, user_id) is not None:
            return {"success": False, "error": f"User '{user_id}' already exists."}

        user = User(id=user_id, name=name)
        session.add(user)
        session.commit()
        logger.info("Created user %s", user_id)
        return {"success": True, "user": user.to_dict()}
    finally:
        session.close()


# ── Posts ────────────────────────────────────────────────────────────

def _rejection(violations, unknown_author: bool) -> Dict[str, Any]:
    """Build the rejected-post result, folding in a missing author record."""
    errors = full_messages(violations)
    by_field = errors_by_field(violations)
    result: Dict[str, Any] = {
        "success": False,
        "violations": violation_tags(violations),
        "errors": errors,
        "errors_by_field": by_field,
    }
    if unknown_author:
        errors.insert(0, USER_MUST_EXIST)
        by_field.setdefault("user", []).insert(0, USER_MUST_EXIST)
        result["error"] = USER_MUST_EXIST
    return result


def create_post(content: Optional[str], author_reference: Any) -> Dict[str, Any]:
    """
    Validate and persist a micropost.

    Every rule is checked, and a present author is looked up, before
    anything is written. A rejected post is never written.

    Args:
        content: Post text
        author_reference: Id of the owning user

    Returns:
        See module docstring.
    """
    violations = validate(content, author_reference)

    # An absent author can't be looked up; the validator already flagged it
    if not is_present(author_reference):
        logger.info("Rejected post: %s", ", ".join(violation_tags(violations)))
        return _rejection(violations, unknown_author=False)

    init_db()
    session = get_session()
    try:
        user = session.get(User, str(author_reference))
        if violations or user is None:
            logger.info(
                "Rejected post from %r: %s (user exists: %s)",
                author_reference,
                ", ".join(violation_tags(violations)) or "no rule violations",
                user is not None,
            )
            return _rejection(violations, unknown_author=user is None)

        post = Micropost(content=content, user_id=user.id)
        session.add(post)
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            return {"success": False, "error": f"Could not save post: {e.orig}"}

        logger.info("Saved post #%s for user %s", post.id, user.id)
        return {"success": True, "post": post.to_dict()}
    finally:
        session.close()


def get_post(post_id: int) -> Optional[Dict[str, Any]]:
    """Get a single post by id, or None."""
    init_db()
    session = get_session()
    try:
        post = session.get(Micropost, post_id)
        return post.to_dict() if post else None
    finally:
        session.close()


def list_posts(author_reference: Any = None, last: Optional[int] = None) -> Dict[str, Any]:
    """
    List posts, newest first.

    Args:
        author_reference: Only posts by this user
        last: Maximum number of posts (default from config list_limit)
    """
    if last is None:
        last = load_config().list_limit
    if last < 0:
        return {"success": False, "error": f"last must be 0 or more, got {last}."}

    init_db()
    session = get_session()
    try:
        query = session.query(Micropost).order_by(
            desc(Micropost.created_at), desc(Micropost.id)
        )
        if author_reference is not None:
            query = query.filter(Micropost.user_id == str(author_reference))
        posts: List[Micropost] = query.limit(last).all()
        return {
            "posts": [p.to_dict() for p in posts],
            "count": len(posts),
        }
    finally:
        session.close()


def delete_post(post_id: int) -> Dict[str, Any]:
    """Delete a post by id."""
    init_db()
    session = get_session()
    try:
        post = session.get(Micropost, post_id)
        if post is None:
            return {"success": False, "error": f"Post #{post_id} not found."}
        session.delete(post)
        session.commit()
        logger.info("Deleted post #%s", post_id)
        return {"success": True, "deleted": post_id}
    finally:
        session.close()
