"""
Blog API Backend — Blog Service Unit Tests
===========================================

What:  Tests for the BlogService resource handlers.
How:   Uses the in-memory gateway for behaviour and AsyncMock gateways to
       inject each store fault class.

What we test:
    ✅ Required-field checks happen before any store call
    ✅ Author defaulting and trimming on create
    ✅ Sparse patch building (truthy title/body, present author)
    ✅ Fault mapping: validation → 400, bad id → 400, missing → 404, other → 500
"""

import uuid
from unittest.mock import AsyncMock

import pytest

from blog_api.exceptions import (
    BlogNotFoundError,
    IdentifierFormatFault,
    InputValidationError,
    InvalidIdentifierError,
    ServerError,
    StoreFault,
    StoreValidationError,
    StoreValidationFault,
)
from blog_api.schemas.blog import BlogCreate, BlogUpdate
from blog_api.services.blog_service import BlogService


def _failing_gateway(fault):
    gateway = AsyncMock()
    for name in ("insert", "find_all", "find_by_id", "find_by_id_and_update", "find_by_id_and_delete"):
        setattr(gateway, name, AsyncMock(side_effect=fault))
    return gateway


class TestCreateBlog:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_create_defaults_author(self, memory_gateway):
        envelope = await self.service.create_blog(
            memory_gateway, BlogCreate(title="Valid Title", body="This is long enough.")
        )
        assert envelope.success is True
        assert envelope.message == "Blog post created successfully"
        assert envelope.data.author == "Anonymous"

    @pytest.mark.asyncio
    async def test_create_whitespace_author_defaults(self, memory_gateway):
        envelope = await self.service.create_blog(
            memory_gateway, BlogCreate(title="Valid Title", body="This is long enough.", author="   ")
        )
        assert envelope.data.author == "Anonymous"

    @pytest.mark.asyncio
    async def test_create_missing_body_never_reaches_store(self):
        gateway = AsyncMock()
        with pytest.raises(InputValidationError) as exc_info:
            await self.service.create_blog(gateway, BlogCreate(title="Valid Title"))

        assert exc_info.value.to_envelope() == {
            "success": False,
            "error": "Title and body are required fields",
        }
        gateway.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_store_validation_maps_to_400(self, memory_gateway):
        with pytest.raises(StoreValidationError) as exc_info:
            await self.service.create_blog(
                memory_gateway, BlogCreate(title="ab", body="This is long enough.")
            )
        assert exc_info.value.status_code == 400
        assert exc_info.value.to_envelope() == {
            "success": False,
            "error": "Validation Error",
            "details": ["Title must be at least 3 characters"],
        }

    @pytest.mark.asyncio
    async def test_create_store_fault_maps_to_500(self):
        gateway = _failing_gateway(StoreFault("Database operation 'insert' failed"))
        with pytest.raises(ServerError) as exc_info:
            await self.service.create_blog(
                gateway, BlogCreate(title="Valid Title", body="This is long enough.")
            )
        assert exc_info.value.status_code == 500
        assert exc_info.value.to_envelope() == {
            "success": False,
            "error": "Server error",
            "message": "Database operation 'insert' failed",
        }


class TestListAndGet:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_list_counts_posts(self, memory_gateway, valid_post):
        await memory_gateway.insert(valid_post)
        await memory_gateway.insert(valid_post)

        envelope = await self.service.list_blogs(memory_gateway)

        assert envelope.count == 2
        assert len(envelope.data) == 2

    @pytest.mark.asyncio
    async def test_list_store_fault(self):
        with pytest.raises(ServerError):
            await self.service.list_blogs(_failing_gateway(StoreFault()))

    @pytest.mark.asyncio
    async def test_get_not_found(self, memory_gateway):
        with pytest.raises(BlogNotFoundError) as exc_info:
            await self.service.get_blog(memory_gateway, str(uuid.uuid4()))
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, memory_gateway):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            await self.service.get_blog(memory_gateway, "not-an-id")
        assert exc_info.value.to_envelope() == {
            "success": False,
            "error": "Invalid blog ID format",
        }


class TestBuildPatch:

    def test_empty_title_is_treated_as_omitted(self):
        patch = BlogService.build_patch(BlogUpdate(title="", body="New body text"))
        assert patch == {"body": "New body text"}

    def test_empty_author_is_supplied(self):
        assert BlogService.build_patch(BlogUpdate(author="")) == {"author": ""}

    def test_omitted_author_is_not_supplied(self):
        assert BlogService.build_patch(BlogUpdate(title="New")) == {"title": "New"}

    def test_null_author_is_supplied(self):
        assert BlogService.build_patch(BlogUpdate.model_validate({"author": None})) == {"author": None}


class TestUpdateAndDelete:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_update_without_fields_never_reaches_store(self):
        gateway = AsyncMock()
        with pytest.raises(InputValidationError) as exc_info:
            await self.service.update_blog(gateway, str(uuid.uuid4()), BlogUpdate(title=""))

        assert exc_info.value.error == (
            "At least one field (title, body, or author) is required for update"
        )
        gateway.find_by_id_and_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_returns_new_state(self, memory_gateway, valid_post):
        created = await memory_gateway.insert(valid_post)

        envelope = await self.service.update_blog(
            memory_gateway, str(created.id), BlogUpdate(author="Jane Doe")
        )

        assert envelope.message == "Blog post updated successfully"
        assert envelope.data.author == "Jane Doe"
        assert envelope.data.title == created.title
        assert envelope.data.updated_at > created.updated_at

    @pytest.mark.asyncio
    async def test_update_validation_details(self, memory_gateway, valid_post):
        created = await memory_gateway.insert(valid_post)
        with pytest.raises(StoreValidationError) as exc_info:
            await self.service.update_blog(
                memory_gateway, str(created.id), BlogUpdate(title="ab", body="tiny")
            )
        assert exc_info.value.details == [
            "Title must be at least 3 characters",
            "Body must be at least 10 characters long",
        ]

    @pytest.mark.asyncio
    async def test_update_not_found(self, memory_gateway):
        with pytest.raises(BlogNotFoundError):
            await self.service.update_blog(
                memory_gateway, str(uuid.uuid4()), BlogUpdate(author="x")
            )

    @pytest.mark.asyncio
    async def test_delete_returns_removed_document(self, memory_gateway, valid_post):
        created = await memory_gateway.insert(valid_post)

        envelope = await self.service.delete_blog(memory_gateway, str(created.id))

        assert envelope.message == "Blog post deleted successfully"
        assert envelope.data.id == created.id
        with pytest.raises(BlogNotFoundError):
            await self.service.get_blog(memory_gateway, str(created.id))

    @pytest.mark.asyncio
    async def test_delete_fault_classes(self):
        with pytest.raises(InvalidIdentifierError):
            await self.service.delete_blog(_failing_gateway(IdentifierFormatFault("x")), "x")
        with pytest.raises(StoreValidationError):
            await self.service.delete_blog(_failing_gateway(StoreValidationFault(["bad"])), "x")
        with pytest.raises(ServerError):
            await self.service.delete_blog(_failing_gateway(StoreFault()), "x")
