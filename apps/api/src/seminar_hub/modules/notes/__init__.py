"""
Notes module - Confidential student notes.

API Endpoints:
- GET/POST /notes - List (view + sort) / create
- GET /notes/students/{student_id} - Caller's own notes for one student
- GET/PATCH/DELETE /notes/{id} - Read / edit / hard delete (confirm=true)
"""

from seminar_hub.modules.notes.models import StudentNote

__all__ = ["StudentNote"]
