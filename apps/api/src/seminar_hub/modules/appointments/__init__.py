"""
Appointments module - Requests and scheduled appointments.

API Endpoints:
- GET/POST /appointments/requests - List / raise requests
- POST /appointments/requests/{id}/respond - Schedule or deny (staff)
- POST /appointments/requests/{id}/cancel - Withdraw a pending request
- GET/POST /appointments - List / book appointments
- GET /appointments/{id} - Get appointment
- POST /appointments/{id}/cancel - Cancel with a reason
- POST /appointments/{id}/complete - Mark completed (staff)
"""

from seminar_hub.modules.appointments.models import (
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    Urgency,
)

__all__ = ["Appointment", "AppointmentRequest", "AppointmentStatus", "Urgency"]
