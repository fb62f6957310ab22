"""
Blog API Backend — Blog Service (Resource Handlers)
====================================================

What:  The five post operations: create, list, get-one, update, delete.
Why:   Encapsulates the request-level rules (required fields, author
       defaulting, sparse patches) independent of HTTP concerns.
How:   Each method performs its input checks, makes at most one gateway call,
       and returns a success envelope. Failures leave as BlogApiError; gateway
       faults are translated by map_store_fault().
Who:   Called by routes/blogs.py with a gateway from routes/dependencies.py.

Design Decision:
    BlogService is stateless. The gateway is passed to every call, so tests
    hand it an InMemoryPostGateway (or a mock) and production hands it a
    SqlPostGateway bound to the request's session.

Known wart (kept deliberately, clients may rely on it):
    On update, `title` and `body` count as supplied only when truthy, so an
    empty-string title is silently ignored. `author` counts as supplied
    whenever the key is present, so {"author": ""} clears the author.
"""

import logging
from typing import Any, Dict

from blog_api.exceptions import BlogNotFoundError, InputValidationError, StoreFault
from blog_api.models.post import DEFAULT_AUTHOR
from blog_api.schemas.blog import (
    BlogCreate,
    BlogEnvelope,
    BlogListEnvelope,
    BlogUpdate,
)
from blog_api.services.error_mapper import map_store_fault
from blog_api.services.post_gateway import PostGateway

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Title and body are required fields"
EMPTY_UPDATE_MESSAGE = "At least one field (title, body, or author) is required for update"


class BlogService:
    """
    Resource handlers for blog posts.

    Error Handling Strategy:
        Input problems found before the store is touched raise
        InputValidationError. Every StoreFault from the gateway is mapped
        exactly once; a None result from an id lookup becomes
        BlogNotFoundError. Nothing is retried.
    """

    async def create_blog(self, gateway: PostGateway, data: BlogCreate) -> BlogEnvelope:
        """
        Create a post.

        Raises:
            InputValidationError: title or body missing/empty (no store call)
            StoreValidationError: a field rule failed at the store
            ServerError: any other store failure
        """
        if not data.title or not data.body:
            logger.warning("Create rejected: title or body missing")
            raise InputValidationError(error=REQUIRED_FIELDS_MESSAGE)

        author = data.author.strip() if data.author else ""
        candidate = {
            "title": data.title,
            "body": data.body,
            "author": author or DEFAULT_AUTHOR,
        }

        try:
            post = await gateway.insert(candidate)
        except StoreFault as fault:
            raise map_store_fault(fault, "create_blog") from fault

        logger.info("Blog post created: %s", post.id)
        return BlogEnvelope(message="Blog post created successfully", data=post)

    async def list_blogs(self, gateway: PostGateway) -> BlogListEnvelope:
        """Return every post, newest first."""
        try:
            posts = await gateway.find_all()
        except StoreFault as fault:
            raise map_store_fault(fault, "list_blogs") from fault

        logger.info("Listed %d blog posts", len(posts))
        return BlogListEnvelope(count=len(posts), data=posts)

    async def get_blog(self, gateway: PostGateway, blog_id: str) -> BlogEnvelope:
        try:
            post = await gateway.find_by_id(blog_id)
        except StoreFault as fault:
            raise map_store_fault(fault, "get_blog") from fault

        if post is None:
            logger.info("Blog post %s not found", blog_id)
            raise BlogNotFoundError()
        return BlogEnvelope(data=post)

    @staticmethod
    def build_patch(data: BlogUpdate) -> Dict[str, Any]:
        """
        Collect the fields an update request supplies.

        title/body: included when truthy.
        author:     included whenever the key was sent, even if empty or null.
        """
        patch: Dict[str, Any] = {}
        if data.title:
            patch["title"] = data.title
        if data.body:
            patch["body"] = data.body
        if "author" in data.model_fields_set:
            patch["author"] = data.author
        return patch

    async def update_blog(
        self, gateway: PostGateway, blog_id: str, data: BlogUpdate
    ) -> BlogEnvelope:
        """
        Apply a partial update and return the post after the change.

        Raises:
            InputValidationError: no field supplied (no store call)
            InvalidIdentifierError, BlogNotFoundError,
            StoreValidationError, ServerError
        """
        patch = self.build_patch(data)
        if not patch:
            logger.warning("Update of %s rejected: no fields supplied", blog_id)
            raise InputValidationError(error=EMPTY_UPDATE_MESSAGE)

        logger.debug("Updating %s with fields %s", blog_id, sorted(patch))
        try:
            post = await gateway.find_by_id_and_update(blog_id, patch)
        except StoreFault as fault:
            raise map_store_fault(fault, "update_blog") from fault

        if post is None:
            logger.info("Blog post %s not found for update", blog_id)
            raise BlogNotFoundError()

        logger.info("Blog post updated: %s", post.id)
        return BlogEnvelope(message="Blog post updated successfully", data=post)

    async def delete_blog(self, gateway: PostGateway, blog_id: str) -> BlogEnvelope:
        """Remove a post permanently; the envelope carries the removed document."""
        try:
            post = await gateway.find_by_id_and_delete(blog_id)
        except StoreFault as fault:
            raise map_store_fault(fault, "delete_blog") from fault

        if post is None:
            logger.info("Blog post %s not found for delete", blog_id)
            raise BlogNotFoundError()

        logger.info("Blog post deleted: %s", post.id)
        return BlogEnvelope(message="Blog post deleted successfully", data=post)


blog_service = BlogService()
