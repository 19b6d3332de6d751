"""
Validation rules for microposts.

A post is accepted only when it has an author, has content, and the
content fits in MAX_CONTENT_LENGTH characters. All rules run on every call
so callers can surface every problem at once. Violations come back as data,
never as exceptions.
"""
import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 140


class ViolationKind(Enum):
    """A rule a candidate post failed."""

    MISSING_AUTHOR = "missing_author"
    MISSING_CONTENT = "missing_content"
    CONTENT_TOO_LONG = "content_too_long"

    @property
    def field(self) -> str:
        return "user" if self is ViolationKind.MISSING_AUTHOR else "content"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ViolationKind.MISSING_AUTHOR: "User can't be blank",
    ViolationKind.MISSING_CONTENT: "Content can't be blank",
    ViolationKind.CONTENT_TOO_LONG: (
        f"Content is too long (maximum is {MAX_CONTENT_LENGTH} characters)"
    ),
}

# Order used when rendering messages
_MESSAGE_ORDER = (
    ViolationKind.MISSING_AUTHOR,
    ViolationKind.MISSING_CONTENT,
    ViolationKind.CONTENT_TOO_LONG,
)


def is_present(value: Any) -> bool:
    """None and "" are absent. Anything else (including 0) is present."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True


def validate(content: Optional[str], author_reference: Any) -> FrozenSet[ViolationKind]:
    """
    Check a candidate post against every rule.

    Args:
        content: Post text, may be None
        author_reference: Identifier of the owning account, may be None

    Returns:
        Set of violated rules. Empty means the post is acceptable.
    """
    violations = set()

    if not is_present(author_reference):
        violations.add(ViolationKind.MISSING_AUTHOR)

    if not is_present(content):
        violations.add(ViolationKind.MISSING_CONTENT)
    elif len(content) > MAX_CONTENT_LENGTH:
        violations.add(ViolationKind.CONTENT_TOO_LONG)

    if violations:
        logger.debug("Post rejected: %s", sorted(v.value for v in violations))
    return frozenset(violations)


def validate_post(post: Any) -> FrozenSet[ViolationKind]:
    """Validate any object exposing `content` and `user_id` (e.g. a Micropost row)."""
    return validate(getattr(post, "content", None), getattr(post, "user_id", None))


def full_messages(violations: Iterable[ViolationKind]) -> List[str]:
    """Human-readable messages for a violation set, in a stable order."""
    found = set(violations)
    return [kind.message for kind in _MESSAGE_ORDER if kind in found]


def violation_tags(violations: Iterable[ViolationKind]) -> List[str]:
    """Stable string tags for a violation set, same order as full_messages()."""
    found = set(violations)
    return [kind.value for kind in _MESSAGE_ORDER if kind in found]


def errors_by_field(violations: Iterable[ViolationKind]) -> Dict[str, List[str]]:
    """Messages grouped by the field they concern, e.g. {"content": [...]}."""
    grouped: Dict[str, List[str]] = {}
    found = set(violations)
    for kind in _MESSAGE_ORDER:
        if kind in found:
            grouped.setdefault(kind.field, []).append(kind.message)
    return grouped


class InvalidPostError(ValueError):
    """Raised when an invalid post reaches the database layer."""

    def __init__(self, violations: Iterable[ViolationKind]):
        self.violations = frozenset(violations)
        super().__init__("; ".join(full_messages(self.violations)))
