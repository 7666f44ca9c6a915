"""
Appointment Repositories
"""

from seminar_hub.modules.appointments.models import Appointment, AppointmentRequest
from seminar_hub.modules.identity.capabilities import EntityKind
from seminar_hub.modules.shared.repository import TenantRepository

appointments = TenantRepository(
    Appointment,
    EntityKind.APPOINTMENT,
    search_fields=("appointment_type", "location", "notes"),
    filter_fields=("status", "student_id", "staff_id"),
)

appointment_requests = TenantRepository(
    AppointmentRequest,
    EntityKind.APPOINTMENT_REQUEST,
    search_fields=("reason",),
    filter_fields=("status", "urgency", "student_id", "staff_id"),
)
