"""
Student Note Schemas
"""

from datetime import datetime

from pydantic import Field, field_validator

from seminar_hub.modules.shared.enums import Priority
from seminar_hub.modules.shared.schemas import CamelModel


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class StudentNoteCreate(CamelModel):
    student_id: str
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=20000)
    is_confidential: bool = False
    priority: Priority = Priority.MEDIUM
    tags: list[str] = Field(default_factory=list, max_length=20)
    visible_to: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class StudentNoteUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1, max_length=20000)
    is_confidential: bool | None = None
    priority: Priority | None = None
    tags: list[str] | None = Field(None, max_length=20)
    visible_to: list[str] | None = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


class StudentNoteResponse(CamelModel):
    id: str
    tenant_id: str
    student_id: str
    author_id: str
    title: str
    content: str
    is_confidential: bool
    priority: Priority
    tags: list[str]
    visible_to: list[str]
    created_at: datetime
    updated_at: datetime


class StudentNoteListResponse(CamelModel):
    items: list[StudentNoteResponse]
    has_more: bool
    limit: int
    skip: int
