"""Forum documents as stored in MongoDB and as returned by search."""

from datetime import datetime
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Mongo field names are camelCase; attributes stay snake_case.
_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class Forum(BaseModel):
    """A discussion board row from the `forums` collection."""

    model_config = _MODEL_CONFIG

    id: str | None = Field(default=None, alias="_id")
    title: str
    description: str
    posts: int = 0
    replies: int = 0
    last_active: datetime | None = None
    image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    @classmethod
    def from_mongo(cls, doc: dict[str, Any]) -> "Forum":
        return cls.model_validate(doc)

    def to_search_document(self) -> dict[str, Any]:
        """Project this forum into its search-index document."""
        doc = self.model_dump(by_alias=True, exclude={"id"}, mode="json")
        doc["mongoId"] = self.id
        return doc


class ForumResult(BaseModel):
    """
    A search hit merged with its live forum row.

    Forum-derived fields are None when the hit references a forum that no
    longer exists in MongoDB.
    """

    model_config = _MODEL_CONFIG

    id: str | None = Field(default=None, alias="_id")
    title: str | None = None
    description: str | None = None
    posts: int | None = None
    replies: int | None = None
    last_active: datetime | None = None
    image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    score: float

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ForumCreate(BaseModel):
    """Payload for creating a forum."""

    model_config = _MODEL_CONFIG

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    image: str | None = Field(default=None, max_length=2000)
    last_active: datetime | None = None


class ForumUpdate(BaseModel):
    """Partial update for a forum; unset fields are left untouched."""

    model_config = _MODEL_CONFIG

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    image: str | None = Field(default=None, max_length=2000)
    posts: int | None = Field(default=None, ge=0)
    replies: int | None = Field(default=None, ge=0)
    last_active: datetime | None = None

    @field_validator("title", "description", "posts", "replies", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # Omit a field to leave it unchanged; these cannot be cleared.
        if value is None:
            raise ValueError("must not be null")
        return value
