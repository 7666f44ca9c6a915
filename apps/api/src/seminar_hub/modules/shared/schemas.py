"""
Shared Schemas

Base schema using camelCase on the wire, plus the paginated list
envelope.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Schema base: camelCase aliases, accepts snake_case too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PageResponse(CamelModel, Generic[T]):
    """Paginated list response."""

    items: list[T]
    has_more: bool = Field(
        ...,
        description="True when the page came back full. Approximate: a full last page also reports true.",
    )
    limit: int
    skip: int
