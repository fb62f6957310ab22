"""
Blog API Backend — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between clients and backend.
Why:   Request bodies are parsed into explicit records with optional fields
       before they reach any business logic; responses always use the same
       `{success, ...}` envelope.
How:   FastAPI validates bodies against the input models and serializes the
       envelopes (by alias, so timestamps appear as createdAt/updatedAt).

Input models deliberately declare every field optional: "required" is a
business rule enforced by BlogService so that the client receives the
documented error messages instead of FastAPI's generic 422 payload.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class BlogCreate(BaseModel):
    """Body of POST /blogs. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, description="Post title (3-200 characters)")
    body: Optional[str] = Field(default=None, description="Post body (at least 10 characters)")
    author: Optional[str] = Field(default=None, description="Author name, defaults to 'Anonymous'")


class BlogUpdate(BaseModel):
    """
    Body of PUT /blogs/{id}.

    Presence matters here: `model_fields_set` tells an omitted `author`
    apart from an explicit empty one (see BlogService.update_blog).
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, description="New title")
    body: Optional[str] = Field(default=None, description="New body")
    author: Optional[str] = Field(default=None, description="New author; empty string clears it")


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class BlogPost(BaseModel):
    """A stored post as returned by the gateways and the API."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID = Field(description="Store-generated identifier")
    title: str
    body: str
    author: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """SQLite hands back naive datetimes; every stored timestamp is UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class BlogEnvelope(BaseModel):
    """Single-post envelope used by create, get-one, update and delete."""

    success: bool = True
    message: Optional[str] = None
    data: BlogPost


class BlogListEnvelope(BaseModel):
    """Envelope for GET /blogs; `count` always equals len(data)."""

    success: bool = True
    count: int
    data: List[BlogPost]


class ErrorEnvelope(BaseModel):
    """
    Error envelope shared by every failing response.

    Example:
        {
            "success": false,
            "error": "Validation Error",
            "details": ["Title must be at least 3 characters"]
        }
    """

    success: bool = False
    error: str
    message: Optional[str] = None
    details: Optional[List[str]] = None


class HealthResponse(BaseModel):
    """GET /health payload."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(description="healthy or unhealthy")
    timestamp: datetime
    database: str = Field(description="connected or disconnected")
    storage_backend: str = Field(alias="storageBackend")
    uptime: float = Field(description="Seconds since the service started")
    environment: str
    port: int
    version: str


class ApiIndexResponse(BaseModel):
    """GET {prefix} payload: a human-readable map of the API."""

    message: str
    endpoints: Dict[str, str]
    documentation: Dict[str, str]
