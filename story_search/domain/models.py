"""Pydantic models shared across the state, service and view layers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Item(BaseModel):
    """One search hit as shown to the user; identity is ``id``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="objectID", min_length=1)
    title: str = ""
    url: str = ""
    author: str = ""
    comment_count: int = Field(default=0, ge=0, alias="num_comments")
    points: int = 0

    @field_validator("title", "url", "author", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("comment_count", "points", mode="before")
    @classmethod
    def _null_to_zero(cls, value):
        return 0 if value is None else value


class SearchState(BaseModel):
    model_config = ConfigDict(frozen=True)

    draft_query: str
    committed_query: str


__all__ = ["Item", "SearchState"]
