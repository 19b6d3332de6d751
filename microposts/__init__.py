"""
Microposts - short text posts with all-at-once validation.

A post needs an author and between 1 and 140 characters of content.
validate() reports every broken rule; create_post() refuses to save
anything validate() rejects.
"""

__version__ = "1.0.0"

from microposts.validation import (
    MAX_CONTENT_LENGTH,
    InvalidPostError,
    ViolationKind,
    errors_by_field,
    full_messages,
    validate,
)

__all__ = [
    "__version__",
    "MAX_CONTENT_LENGTH",
    "InvalidPostError",
    "ViolationKind",
    "errors_by_field",
    "full_messages",
    "validate",
]
