"""Shared types and data structures for jot.

All models serialize with camelCase aliases so the JSON that crosses the
native messaging boundary matches what the extension expects, while Python
code uses snake_case attributes.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from jot.core.config import DEFAULT_COMMENT_FOLDER


class WireModel(BaseModel):
    """Base model for anything that is sent to or received from the extension."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dict using wire field names."""
        return self.model_dump(by_alias=True, mode="json")


class HostConfig(WireModel):
    """Vault location persisted in the per-user config file."""

    vault_path: str
    comment_folder: str = DEFAULT_COMMENT_FOLDER


class IndexEntry(WireModel):
    """Index record pointing a normalized URL at its markdown file."""

    filename: str
    has_comments: bool = False


class Comment(WireModel):
    """A single timestamped comment within a thread."""

    id: str
    body: str
    created_at: int


class Thread(WireModel):
    """All comments attached to one normalized URL, backed by one markdown file."""

    id: str
    url: str
    title: str | None = None
    favicon_url: str | None = None
    preview_image_url: str | None = None
    created_at: int
    updated_at: int
    comments: list[Comment] = Field(default_factory=list)


class ThreadMetadata(WireModel):
    """Optional page metadata sent along with a new comment."""

    title: str | None = None
    favicon_url: str | None = None
    preview_image_url: str | None = None


# --- Protocol envelopes ---


class Request(WireModel):
    """Request envelope: {id, type, ...params}."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: int | str | None = None
    type: str = ""

    @property
    def params(self) -> dict[str, Any]:
        """Request parameters (every field other than id and type)."""
        return dict(self.model_extra or {})


class Response(WireModel):
    """Response envelope: {id, ok, data?, error?, code?}."""

    id: int | str | None = None
    ok: bool
    data: Any = None
    error: str | None = None
    code: str | None = None

    @classmethod
    def success(cls, request_id: int | str | None, data: Any = None) -> "Response":
        return cls(id=request_id, ok=True, data=data)

    @classmethod
    def failure(
        cls, request_id: int | str | None, error: str, code: str
    ) -> "Response":
        return cls(id=request_id, ok=False, error=error, code=code)

    def to_wire(self) -> dict[str, Any]:
        if self.ok:
            return {"id": self.id, "ok": True, "data": self.data}
        return {"id": self.id, "ok": False, "error": self.error, "code": self.code}


# --- Request parameters ---


class SetConfigParams(WireModel):
    vault_path: str = ""
    comment_folder: str | None = None


class UrlParams(WireModel):
    url: str = Field(min_length=1)


class AppendCommentParams(WireModel):
    url: str = Field(min_length=1)
    body: str = ""
    metadata: ThreadMetadata | None = None


class DeleteCommentParams(WireModel):
    url: str = Field(min_length=1)
    comment_id: str = Field(min_length=1)

    @field_validator("comment_id", mode="before")
    @classmethod
    def _coerce_comment_id(cls, value: Any) -> Any:
        # Extension code may pass the numeric timestamp rather than its string form
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
