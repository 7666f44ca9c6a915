"""
Reports module - Report definitions, runs and scheduled execution.

API Endpoints:
- GET/POST /admin/reports - List / create definitions
- GET /admin/reports/{id} - Get a definition
- POST /admin/reports/{id}/run - Run now
- GET /admin/reports/{id}/results - Stored results, newest first
"""

from seminar_hub.modules.reports.models import ReportDefinition, ReportResult, ReportType

__all__ = ["ReportDefinition", "ReportResult", "ReportType"]
