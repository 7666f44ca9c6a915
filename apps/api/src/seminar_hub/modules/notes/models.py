"""
Student Note Models

Specialist notes about a student. ``is_confidential`` marks a note for
restricted handling; ``visible_to`` lists principals other than the
author entitled to read it when confidentiality is enforced.
"""

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from seminar_hub.modules.shared import BaseModel, TenantScopedMixin
from seminar_hub.modules.shared.enums import Priority, pg_enum


class StudentNote(BaseModel, TenantScopedMixin):
    __tablename__ = "student_notes"

    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_confidential: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    priority: Mapped[Priority] = mapped_column(
        pg_enum(Priority, "record_priority"),
        nullable=False,
        default=Priority.MEDIUM,
    )
    tags: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    visible_to: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)

    def readable_by(self, principal_id: str) -> bool:
        """Author and ``visible_to`` principals; anyone for non-confidential notes."""
        if not self.is_confidential:
            return True
        return principal_id == self.author_id or principal_id in self.visible_to

    def __repr__(self) -> str:
        return f"<StudentNote {self.id} student={self.student_id} confidential={self.is_confidential}>"
