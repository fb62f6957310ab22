"""
Blog API Backend — Health Check and API Index Routes
=====================================================

What:  GET {prefix}/health for monitoring probes, GET {prefix} for a
       human-readable map of the API.
How:   Health asks the request's gateway for a ping; the index is built
       from endpoint_catalog(), which the 404 handler in main.py also uses
       to list the available endpoints.

Status levels:
    healthy:   store reachable (HTTP 200)
    unhealthy: store unreachable (HTTP 200, database="disconnected")
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, Request

from blog_api import __version__
from blog_api.routes.dependencies import get_post_gateway
from blog_api.schemas.blog import ApiIndexResponse, HealthResponse
from blog_api.services.post_gateway import PostGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


def endpoint_catalog(prefix: str) -> Dict[str, str]:
    """Every public endpoint under `prefix`, mapped to a short description."""
    return {
        f"GET {prefix or '/'}": "API index",
        f"GET {prefix}/health": "Check API health",
        f"GET {prefix}/blogs": "Get all blog posts",
        f"GET {prefix}/blogs/:id": "Get single blog post",
        f"POST {prefix}/blogs": "Create new blog post",
        f"PUT {prefix}/blogs/:id": "Update blog post",
        f"DELETE {prefix}/blogs/:id": "Delete blog post",
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    request: Request,
    gateway: PostGateway = Depends(get_post_gateway),
) -> HealthResponse:
    settings = request.app.state.settings

    reachable = await gateway.ping()
    if not reachable:
        logger.warning("Health check: store unreachable")

    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        timestamp=datetime.now(timezone.utc),
        database="connected" if reachable else "disconnected",
        storage_backend=settings.storage_backend,
        uptime=round(time.time() - _start_time, 2),
        environment=settings.environment,
        port=settings.backend_port,
        version=__version__,
    )


async def api_index(request: Request) -> ApiIndexResponse:
    """Registered by create_app() at the bare API prefix."""
    prefix = request.app.state.settings.api_prefix
    return ApiIndexResponse(
        message="Blogging Platform API is running",
        endpoints=endpoint_catalog(prefix),
        documentation={
            f"POST {prefix}/blogs": "Requires: {title: string, body: string, author?: string}",
            f"PUT {prefix}/blogs/:id": "Requires at least one field to update",
        },
    )
