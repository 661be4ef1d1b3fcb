"""Pydantic models for simulated tool input validation.

Arguments reach the dispatcher either as decoded JSON (native tool calls) or
as plain strings (the bracket markup), so every model is lenient: numbers and
booleans are coerced from text and unknown keys are ignored.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

LENIENT = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

DEFAULT_COLLECTION = "default"
DEFAULT_QUERY_LIMIT = 5
DEFAULT_FETCH_MAX_LENGTH = 10000


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class EmptyInput(BaseModel):
    """Tools without parameters."""

    model_config = LENIENT


# ============================================================================
# Filesystem
# ============================================================================


class PathInput(BaseModel):
    model_config = LENIENT

    path: str = Field(..., description="Path to the file or directory")


class WriteFileInput(BaseModel):
    model_config = LENIENT

    path: str = Field(..., description="Path to the file")
    content: str = Field(..., description="Content to write")


class ListDirectoryInput(BaseModel):
    model_config = LENIENT

    path: str = Field(default="/", description="Directory path to list")

    @field_validator("path", mode="before")
    @classmethod
    def default_root(cls, v: Any) -> Any:
        return v or "/"


class DeleteInput(BaseModel):
    model_config = LENIENT

    path: str = Field(..., description="Path to delete")
    recursive: bool = Field(default=False, description="Delete recursively")


# ============================================================================
# Memory
# ============================================================================


class AppendMemoryInput(BaseModel):
    model_config = LENIENT

    collection: str = Field(default=DEFAULT_COLLECTION, description="Collection name")
    content: str = Field(..., description="Memory content to store")

    @field_validator("collection", mode="before")
    @classmethod
    def default_collection(cls, v: Any) -> Any:
        return v or DEFAULT_COLLECTION


class QueryMemoryInput(BaseModel):
    model_config = LENIENT

    collection: str = Field(default=DEFAULT_COLLECTION, description="Collection name")
    query: str = Field(..., description="Query text")
    limit: int = Field(default=DEFAULT_QUERY_LIMIT, description="Max results")

    @field_validator("collection", mode="before")
    @classmethod
    def default_collection(cls, v: Any) -> Any:
        return v or DEFAULT_COLLECTION

    @field_validator("limit", mode="after")
    @classmethod
    def positive_limit(cls, v: int) -> int:
        # 0 or negative means "use the default"
        return v if v > 0 else DEFAULT_QUERY_LIMIT


class CreateCollectionInput(BaseModel):
    model_config = LENIENT

    name: str = Field(..., min_length=1, description="Collection name")


# ============================================================================
# Fetch / HTTP
# ============================================================================


class FetchInput(BaseModel):
    model_config = LENIENT

    url: str = Field(..., min_length=1, description="URL to fetch")
    max_length: int = Field(default=DEFAULT_FETCH_MAX_LENGTH, description="Max characters")

    @field_validator("max_length", mode="after")
    @classmethod
    def positive_max_length(cls, v: int) -> int:
        return v if v > 0 else DEFAULT_FETCH_MAX_LENGTH


class HttpRequestInput(BaseModel):
    model_config = LENIENT

    method: HttpMethod = Field(default=HttpMethod.GET)
    url: str = Field(..., min_length=1, description="Request URL")
    headers: dict[str, str] = Field(default_factory=dict, description="Request headers")
    body: str | None = Field(default=None, description="Request body")

    @field_validator("method", mode="before")
    @classmethod
    def upper_method(cls, v: Any) -> Any:
        if not v:
            return HttpMethod.GET
        return v.upper() if isinstance(v, str) else v

    @field_validator("headers", mode="before")
    @classmethod
    def parse_headers(cls, v: Any) -> Any:
        # The bracket markup can only carry headers as a JSON string
        if v is None or v == "":
            return {}
        if isinstance(v, str):
            parsed = json.loads(v)
            if not isinstance(parsed, dict):
                raise ValueError("headers must be a JSON object")
            return {str(k): str(val) for k, val in parsed.items()}
        return v

    @field_validator("body", mode="before")
    @classmethod
    def serialize_body(cls, v: Any) -> Any:
        if isinstance(v, (dict, list)):
            return json.dumps(v)
        return v


# ============================================================================
# Time
# ============================================================================


class TimezoneInput(BaseModel):
    model_config = LENIENT

    timezone: str = Field(..., description="IANA timezone (e.g., America/New_York)")


# ============================================================================
# Git
# ============================================================================


class GitRepoInput(BaseModel):
    model_config = LENIENT

    repo_path: str = Field(default=".", description="Repository path")


class GitLogInput(GitRepoInput):
    max_count: int = Field(default=10, ge=1, description="Max commits")


# ============================================================================
# Docs
# ============================================================================


class SearchDocsInput(BaseModel):
    model_config = LENIENT

    query: str = Field(..., description="Search query")
    source: str = Field(default="general", description="Documentation source")

    @field_validator("source", mode="before")
    @classmethod
    def default_source(cls, v: Any) -> Any:
        return v or "general"
