"""
Blog API Backend — Blog Route Handlers
=======================================

What:  HTTP surface for the post resource.
How:   Each route extracts the path id / body, delegates to BlogService with
       the request's gateway, and returns the envelope. Errors are raised as
       BlogApiError and rendered by the handlers registered in main.py.

Route Inventory (relative to the API prefix):
    POST   /blogs        create        201
    GET    /blogs        list          200
    GET    /blogs/{id}   get one       200
    PUT    /blogs/{id}   update        200
    DELETE /blogs/{id}   delete        200

The id path parameter is a plain string on purpose: a malformed id must
produce the 400 "Invalid blog ID format" envelope, not FastAPI's 422.
A missing request body is treated like an empty JSON object.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from blog_api.routes.dependencies import get_post_gateway
from blog_api.schemas.blog import (
    BlogCreate,
    BlogEnvelope,
    BlogListEnvelope,
    BlogUpdate,
    ErrorEnvelope,
)
from blog_api.services.blog_service import blog_service
from blog_api.services.post_gateway import PostGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blogs", tags=["Blogs"])

_ERRORS = {
    400: {"description": "Invalid input or id", "model": ErrorEnvelope},
    404: {"description": "Blog post not found", "model": ErrorEnvelope},
    500: {"description": "Server error", "model": ErrorEnvelope},
}


@router.post(
    "",
    status_code=201,
    response_model=BlogEnvelope,
    response_model_exclude_none=True,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
    summary="Create a blog post",
)
async def create_blog(
    data: Optional[BlogCreate] = Body(default=None),
    gateway: PostGateway = Depends(get_post_gateway),
) -> BlogEnvelope:
    data = data or BlogCreate()
    logger.debug("Create request body: %s", data.model_dump(exclude_unset=True))
    return await blog_service.create_blog(gateway, data)


@router.get(
    "",
    response_model=BlogListEnvelope,
    responses={500: _ERRORS[500]},
    summary="List all blog posts, newest first",
)
async def list_blogs(gateway: PostGateway = Depends(get_post_gateway)) -> BlogListEnvelope:
    return await blog_service.list_blogs(gateway)


@router.get(
    "/{blog_id}",
    response_model=BlogEnvelope,
    response_model_exclude_none=True,
    responses=_ERRORS,
    summary="Get a single blog post",
)
async def get_blog(
    blog_id: str,
    gateway: PostGateway = Depends(get_post_gateway),
) -> BlogEnvelope:
    return await blog_service.get_blog(gateway, blog_id)


@router.put(
    "/{blog_id}",
    response_model=BlogEnvelope,
    response_model_exclude_none=True,
    responses=_ERRORS,
    summary="Update some fields of a blog post",
)
async def update_blog(
    blog_id: str,
    data: Optional[BlogUpdate] = Body(default=None),
    gateway: PostGateway = Depends(get_post_gateway),
) -> BlogEnvelope:
    data = data or BlogUpdate()
    logger.debug("Update request for %s: %s", blog_id, data.model_dump(exclude_unset=True))
    return await blog_service.update_blog(gateway, blog_id, data)


@router.delete(
    "/{blog_id}",
    response_model=BlogEnvelope,
    response_model_exclude_none=True,
    responses=_ERRORS,
    summary="Delete a blog post",
)
async def delete_blog(
    blog_id: str,
    gateway: PostGateway = Depends(get_post_gateway),
) -> BlogEnvelope:
    return await blog_service.delete_blog(gateway, blog_id)
