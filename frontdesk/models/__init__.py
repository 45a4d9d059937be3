# frontdesk/models/__init__.py
from .number_series import NumberSeries
from .user import User, Party
from .auth import AuthIdentity
from .doctor import Doctor
from .patient import Patient
from .opd import OpdEncounter, Appointment, OpdQueueEntry
from .ipd import IpdBed, BedAllocation
from .billing import Advance
from .audit import AuditLog
from .error_log import ErrorLog

__all__ = [
    "NumberSeries",
    "User",
    "Party",
    "AuthIdentity",
    "Doctor",
    "Patient",
    "OpdEncounter",
    "Appointment",
    "OpdQueueEntry",
    "IpdBed",
    "BedAllocation",
    "Advance",
    "AuditLog",
    "ErrorLog",
]
