"""
Audit module - Append-only log of mutating actions.

Writes go through RecordedWrite, which commits the data change and
its entry in one transaction.

API Endpoints:
- GET /admin/logs - List entries (newest first)
- GET /admin/logs/stats - Success/failure counts
"""

from seminar_hub.modules.audit.models import AuditLogEntry, AuditLogImmutableError
from seminar_hub.modules.audit.recorded_write import RecordedWrite

__all__ = ["AuditLogEntry", "AuditLogImmutableError", "RecordedWrite"]
