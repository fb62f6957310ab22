"""
Blog API Backend — SQLAlchemy Post Gateway
===========================================

What:  PostGateway implementation on top of an async SQLAlchemy session.
Why:   Production persistence (PostgreSQL via asyncpg).
How:   One gateway per request, wrapping that request's session. Each write
       runs in its own transaction and is committed before returning, so
       the response never reports a write that could still roll back.

Atomicity:
    find_by_id_and_update / find_by_id_and_delete load the row with
    SELECT ... FOR UPDATE (ignored by SQLite) and change it in the same
    transaction. Two concurrent updates of one post serialize on the row
    lock; the later one wins.

Error translation:
    Any SQLAlchemyError, OSError or asyncio.TimeoutError becomes a
    StoreFault whose message names the failed operation only. Driver text
    is logged server-side, never placed in the fault.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.exceptions import StoreFault, StoreValidationFault
from blog_api.models.post import Post, normalize_fields, validate_post_fields
from blog_api.schemas.blog import BlogPost
from blog_api.services.post_gateway import Clock, PostGateway, parse_post_id

logger = logging.getLogger(__name__)

# Exceptions that mean "the store failed" rather than "the code is wrong".
# asyncio.TimeoutError (command_timeout) is not an OSError before 3.11.
_STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class SqlPostGateway(PostGateway):
    """PostGateway bound to one AsyncSession."""

    def __init__(self, session: AsyncSession, clock: Optional[Clock] = None):
        super().__init__(clock)
        self._session = session

    async def _fail(self, operation: str, exc: Exception) -> StoreFault:
        """Roll back, log the driver error, and build the fault to raise."""
        logger.error("Store error during %s: %s", operation, str(exc), exc_info=True)
        try:
            await self._session.rollback()
        except _STORE_ERRORS as rollback_exc:
            logger.error("Rollback after failed %s also failed: %s", operation, rollback_exc)
        return StoreFault(
            message=f"Database operation '{operation}' failed",
            context={"error_type": type(exc).__name__},
        )

    async def insert(self, candidate: Mapping[str, Any]) -> BlogPost:
        fields = normalize_fields(candidate)
        errors = validate_post_fields(fields)
        if errors:
            raise StoreValidationFault(errors)

        now = self._clock()
        row = Post(
            title=fields["title"],
            body=fields["body"],
            author=fields.get("author") or "",
            created_at=now,
            updated_at=now,
        )
        try:
            self._session.add(row)
            await self._session.commit()
        except _STORE_ERRORS as e:
            raise await self._fail("insert", e)
        return BlogPost.model_validate(row)

    async def find_all(self) -> List[BlogPost]:
        try:
            result = await self._session.execute(
                select(Post).order_by(desc(Post.created_at))
            )
            rows = result.scalars().all()
        except _STORE_ERRORS as e:
            raise await self._fail("find_all", e)
        return [BlogPost.model_validate(row) for row in rows]

    async def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        key = parse_post_id(post_id)
        try:
            row = await self._session.get(Post, key)
        except _STORE_ERRORS as e:
            raise await self._fail("find_by_id", e)
        return BlogPost.model_validate(row) if row is not None else None

    async def find_by_id_and_update(
        self, post_id: str, patch: Dict[str, Any]
    ) -> Optional[BlogPost]:
        key = parse_post_id(post_id)
        changes = normalize_fields(patch)
        errors = validate_post_fields(changes, partial=True)
        if errors:
            raise StoreValidationFault(errors)

        try:
            result = await self._session.execute(
                select(Post).where(Post.id == key).with_for_update()
            )
            row = result.scalar_one_or_none()
            if row is None:
                await self._session.rollback()
                return None

            for name, value in changes.items():
                if name == "author" and value is None:
                    value = ""
                setattr(row, name, value)
            row.updated_at = self._clock()
            await self._session.commit()
        except _STORE_ERRORS as e:
            raise await self._fail("find_by_id_and_update", e)
        return BlogPost.model_validate(row)

    async def find_by_id_and_delete(self, post_id: str) -> Optional[BlogPost]:
        key = parse_post_id(post_id)
        try:
            result = await self._session.execute(
                select(Post).where(Post.id == key).with_for_update()
            )
            row = result.scalar_one_or_none()
            if row is None:
                await self._session.rollback()
                return None

            # Snapshot before the row is detached by the delete
            deleted = BlogPost.model_validate(row)
            await self._session.delete(row)
            await self._session.commit()
        except _STORE_ERRORS as e:
            raise await self._fail("find_by_id_and_delete", e)
        return deleted

    async def ping(self) -> bool:
        try:
            await self._session.execute(select(1))
            return True
        except _STORE_ERRORS as e:
            logger.warning("Store ping failed: %s", str(e))
            return False
