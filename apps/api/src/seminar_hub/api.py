from fastapi import APIRouter

from seminar_hub.modules.access.router import router as access_router
from seminar_hub.modules.appointments.router import router as appointments_router
from seminar_hub.modules.audit.router import router as audit_router
from seminar_hub.modules.auth.router import router as auth_router
from seminar_hub.modules.identity.router import router as session_router
from seminar_hub.modules.interventions.router import router as interventions_router
from seminar_hub.modules.notes.router import router as notes_router
from seminar_hub.modules.reports.router import router as reports_router
from seminar_hub.modules.tenants.router import router as tenants_router
from seminar_hub.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(session_router, prefix="/session", tags=["Session"])
api_router.include_router(access_router, prefix="/access", tags=["Access"])

api_router.include_router(appointments_router, prefix="/appointments", tags=["Appointments"])
api_router.include_router(
    interventions_router, prefix="/intervention-plans", tags=["Intervention Plans"]
)
api_router.include_router(notes_router, prefix="/notes", tags=["Student Notes"])

api_router.include_router(users_router, prefix="/admin/users", tags=["Admin - Users"])
api_router.include_router(tenants_router, prefix="/admin/tenants", tags=["Admin - Tenants"])
api_router.include_router(audit_router, prefix="/admin/logs", tags=["Admin - Audit Log"])
api_router.include_router(reports_router, prefix="/admin/reports", tags=["Admin - Reports"])
