# frontdesk/api/router.py
from fastapi import APIRouter

from frontdesk.api import routes_registration

api_router = APIRouter()

# ---- Patients
api_router.include_router(routes_registration.router,
                          prefix="/patients",
                          tags=["patients"])
