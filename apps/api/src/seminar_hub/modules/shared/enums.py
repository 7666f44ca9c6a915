"""
Shared enums and the PostgreSQL enum column helper.
"""

from enum import Enum

from sqlalchemy.dialects.postgresql import ENUM


def pg_enum(enum_cls: type[Enum], name: str) -> ENUM:
    """PostgreSQL ENUM storing the lower-case member values (the wire contract)."""
    return ENUM(
        enum_cls,
        name=name,
        create_type=False,
        values_callable=lambda members: [member.value for member in members],
    )


class Priority(str, Enum):
    """Priority shared by intervention plans and student notes."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
