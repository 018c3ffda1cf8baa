from .base import Base
from .patient import Patient
from .ward import Ward
from .bed import Bed, BedStatus
from .admission import Admission, Disposition
from .forecast import Forecast
from .user import Role, User

__all__ = [
    "Base",
    "Patient",
    "Ward",
    "Bed",
    "BedStatus",
    "Admission",
    "Disposition",
    "Forecast",
    "Role",
    "User",
]
