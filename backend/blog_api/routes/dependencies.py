"""
Blog API Backend — Route Dependencies
======================================

What:  FastAPI dependencies that hand each request its persistence gateway.
Why:   Handlers never reach for a global connection. The process-wide
       resources are created in the lifespan handler and stored on
       `app.state`; this module is the only place that reads them.
How:   With STORAGE_BACKEND=memory the shared InMemoryPostGateway is
       returned. Otherwise a session is opened on `app.state.database` and
       wrapped in a SqlPostGateway for the duration of the request.

Tests replace `get_post_gateway` through `app.dependency_overrides`.
"""

from typing import AsyncIterator

from fastapi import Request

from blog_api.services.post_gateway import PostGateway
from blog_api.services.sql_gateway import SqlPostGateway


async def get_post_gateway(request: Request) -> AsyncIterator[PostGateway]:
    state = request.app.state
    memory_gateway = getattr(state, "memory_gateway", None)
    if memory_gateway is not None:
        yield memory_gateway
        return

    async with state.database.session() as session:
        yield SqlPostGateway(session)
