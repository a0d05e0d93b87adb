"""
Servicios de aplicacion (politicas puras, sin I/O).
"""
from .post_sync_policy import (
    AUTHOR_TAG_PATTERN,
    PublishDecision,
    decide_publication,
    extract_author,
    is_excluded_category,
)

__all__ = [
    "AUTHOR_TAG_PATTERN",
    "PublishDecision",
    "decide_publication",
    "extract_author",
    "is_excluded_category",
]
