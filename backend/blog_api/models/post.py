"""
Blog API Backend — Post Model and Field Rules
==============================================

What:  ORM model for the `blogs` table plus the field rules every stored
       post must satisfy.
Why:   The rules live next to the table they protect. Both gateways (SQL and
       in-memory) call `normalize_fields()` and `validate_post_fields()`
       before a write, so the two stores reject exactly the same documents
       with exactly the same messages.
Who:   services/sql_gateway.py, services/memory_gateway.py, tests.

Field Rules:
    title   required, trimmed, 3..200 characters after trimming
    body    required, at least 10 characters, NOT trimmed
    author  optional, trimmed, "Anonymous" when absent on create
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from blog_api.database import Base

DEFAULT_AUTHOR = "Anonymous"

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
BODY_MIN_LENGTH = 10

# Fields a client may write; everything else is owned by the store
WRITABLE_FIELDS = ("title", "body", "author")

# Fields the store trims before validating
TRIMMED_FIELDS = ("title", "author")


def normalize_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Apply store-side normalization to a candidate or patch.

    Trims `title` and `author` when they are strings; `body` is kept
    verbatim. Unknown keys are dropped.
    """
    normalized: Dict[str, Any] = {}
    for name in WRITABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name in TRIMMED_FIELDS and isinstance(value, str):
            value = value.strip()
        normalized[name] = value
    return normalized


def _check_title(title: Optional[str]) -> List[str]:
    if not title:
        return ["Title is required"]
    if len(title) < TITLE_MIN_LENGTH:
        return [f"Title must be at least {TITLE_MIN_LENGTH} characters"]
    if len(title) > TITLE_MAX_LENGTH:
        return [f"Title cannot exceed {TITLE_MAX_LENGTH} characters"]
    return []


def _check_body(body: Optional[str]) -> List[str]:
    if not body:
        return ["Body is required"]
    if len(body) < BODY_MIN_LENGTH:
        return [f"Body must be at least {BODY_MIN_LENGTH} characters long"]
    return []


def validate_post_fields(fields: Mapping[str, Any], partial: bool = False) -> List[str]:
    """
    Check normalized fields against the post rules.

    Args:
        fields:  Normalized values (see normalize_fields)
        partial: When True only the keys present in `fields` are checked,
                 which is how patches are validated before merging.

    Returns:
        One message per violated constraint; empty when valid.
    """
    errors: List[str] = []
    if not partial or "title" in fields:
        errors.extend(_check_title(fields.get("title")))
    if not partial or "body" in fields:
        errors.extend(_check_body(fields.get("body")))
    return errors


class Post(Base):
    """
    A short text post.

    Lifecycle:
        1. Inserted by the create operation (id and both timestamps set here)
        2. Mutated only by the update operation, which refreshes updated_at
        3. Removed permanently by the delete operation
    """

    __tablename__ = "blogs"

    # Generic Uuid type: native UUID on PostgreSQL, CHAR(32) on SQLite
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)

    # TEXT: no upper bound on body length
    body: Mapped[str] = mapped_column(Text, nullable=False)

    author: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_AUTHOR,
    )

    # Both timestamps are written by the gateway from its clock so that the
    # SQL and in-memory stores behave identically.
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"


# Serves the only list query: ORDER BY created_at DESC
Index("idx_blogs_created_at", Post.created_at.desc())
