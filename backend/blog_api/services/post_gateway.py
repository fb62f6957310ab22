"""
Blog API Backend — Abstract Post Gateway Interface
===================================================

What:  Abstract base class defining the contract for post persistence.
Why:   BlogService talks to a store through this interface only, so the
       handlers run unchanged against PostgreSQL (SqlPostGateway) or an
       in-process dictionary (InMemoryPostGateway).
How:   Concrete gateways implement the five document operations plus a
       health probe. Every failure surfaces as a StoreFault subclass.
Who:   Called by BlogService; constructed per request by routes/dependencies.py.

Contract shared by all implementations:
    - ids are generated by the gateway on insert, never by callers
    - ids are canonical UUID strings; anything else raises IdentifierFormatFault
      (never "not found")
    - inserts and updates are validated with models.post rules and raise
      StoreValidationFault carrying one message per violated constraint
    - created_at is written once; updated_at on insert and every update
    - find_all returns posts newest first by created_at
    - each write is atomic; concurrent updates are last-write-wins
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from blog_api.exceptions import IdentifierFormatFault
from blog_api.schemas.blog import BlogPost

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_post_id(post_id: str) -> uuid.UUID:
    """
    Parse a client-supplied identifier into a store key.

    Raises:
        IdentifierFormatFault: `post_id` is not a lowercase hyphenated UUID.
            uuid.UUID also accepts hex, braces, urn: and uppercase forms;
            those are rejected too.
    """
    text = str(post_id)
    try:
        key = uuid.UUID(text)
    except (ValueError, TypeError, AttributeError):
        raise IdentifierFormatFault(text)
    if str(key) != text:
        raise IdentifierFormatFault(text)
    return key


class PostGateway(ABC):
    """Abstract interface over the post document store."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or utc_now

    @abstractmethod
    async def insert(self, candidate: Mapping[str, Any]) -> BlogPost:
        """
        Validate and insert a new post.

        Args:
            candidate: title, body and author as supplied by the handler.

        Raises:
            StoreValidationFault: A field rule is violated; nothing is written.
            StoreFault: The store failed.
        """
        ...

    @abstractmethod
    async def find_all(self) -> List[BlogPost]:
        """Return every post, newest first."""
        ...

    @abstractmethod
    async def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        """Return the post or None. Raises IdentifierFormatFault."""
        ...

    @abstractmethod
    async def find_by_id_and_update(
        self, post_id: str, patch: Dict[str, Any]
    ) -> Optional[BlogPost]:
        """
        Apply a sparse patch and return the post as it is AFTER the update.

        Only keys present in `patch` change. Returns None when no post has
        this id.

        Raises:
            IdentifierFormatFault, StoreValidationFault, StoreFault
        """
        ...

    @abstractmethod
    async def find_by_id_and_delete(self, post_id: str) -> Optional[BlogPost]:
        """Remove the post and return its last state, or None."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """True when the store is reachable."""
        ...
