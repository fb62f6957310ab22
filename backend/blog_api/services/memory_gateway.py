"""
Blog API Backend — In-Memory Post Gateway
==========================================

What:  PostGateway backed by a dictionary living in the process.
Why:   Lets the handlers run without a database: the test suite uses it,
       and STORAGE_BACKEND=memory uses it for local demos.
How:   Every operation runs under one asyncio.Lock, which gives the same
       per-document atomicity the SQL gateway gets from transactions.

Data is lost on restart. Not for production use.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

from blog_api.exceptions import StoreValidationFault
from blog_api.models.post import normalize_fields, validate_post_fields
from blog_api.schemas.blog import BlogPost
from blog_api.services.post_gateway import Clock, PostGateway, parse_post_id

logger = logging.getLogger(__name__)


class InMemoryPostGateway(PostGateway):
    """Dictionary-backed store keyed by UUID."""

    def __init__(self, clock: Optional[Clock] = None):
        super().__init__(clock)
        self._posts: Dict[uuid.UUID, BlogPost] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._posts)

    async def insert(self, candidate: Mapping[str, Any]) -> BlogPost:
        fields = normalize_fields(candidate)
        errors = validate_post_fields(fields)
        if errors:
            raise StoreValidationFault(errors)

        async with self._lock:
            now = self._clock()
            post = BlogPost(
                id=uuid.uuid4(),
                title=fields["title"],
                body=fields["body"],
                author=fields.get("author") or "",
                created_at=now,
                updated_at=now,
            )
            self._posts[post.id] = post
        logger.debug("Inserted post %s", post.id)
        return post

    async def find_all(self) -> List[BlogPost]:
        async with self._lock:
            posts = list(self._posts.values())
        # Newest first; insertion order breaks ties so equal clocks stay stable
        indexed = list(enumerate(posts))
        indexed.sort(key=lambda item: (item[1].created_at, item[0]), reverse=True)
        return [post for _, post in indexed]

    async def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        key = parse_post_id(post_id)
        async with self._lock:
            return self._posts.get(key)

    async def find_by_id_and_update(
        self, post_id: str, patch: Dict[str, Any]
    ) -> Optional[BlogPost]:
        key = parse_post_id(post_id)
        changes = normalize_fields(patch)
        errors = validate_post_fields(changes, partial=True)
        if errors:
            raise StoreValidationFault(errors)

        async with self._lock:
            current = self._posts.get(key)
            if current is None:
                return None

            if "author" in changes and changes["author"] is None:
                changes["author"] = ""
            changes["updated_at"] = self._clock()
            updated = current.model_copy(update=changes)
            self._posts[key] = updated
        return updated

    async def find_by_id_and_delete(self, post_id: str) -> Optional[BlogPost]:
        key = parse_post_id(post_id)
        async with self._lock:
            return self._posts.pop(key, None)

    async def ping(self) -> bool:
        return True
