"""
Schema classifier - decides which table a parsed CSV file belongs to.

Only the first record is inspected; a file is classified once and every row
is written to that table.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    PATIENTS = "patients"
    WARDS = "wards"
    BEDS = "beds"
    ADMISSIONS = "admissions"
    FORECASTS = "forecasts"
    ROLES = "roles"
    USERS = "users"


@dataclass(frozen=True)
class ColumnSignature:
    """A file matches when ``id_column`` is filled in and ``presence_column`` exists as a header."""
    kind: EntityKind
    id_column: str
    presence_column: Optional[str] = None

    def matches(self, record: Dict[str, Optional[str]]) -> bool:
        if not record.get(self.id_column):
            return False
        if self.presence_column is not None and self.presence_column not in record:
            return False
        return True


# Checked in order, first match wins
SIGNATURES: tuple = (
    ColumnSignature(EntityKind.PATIENTS, "patient_id", "first_name"),
    ColumnSignature(EntityKind.WARDS, "ward_id", "name"),
    ColumnSignature(EntityKind.BEDS, "bed_id", "bed_number"),
    ColumnSignature(EntityKind.ADMISSIONS, "admission_id"),
    ColumnSignature(EntityKind.FORECASTS, "forecast_id"),
    ColumnSignature(EntityKind.ROLES, "role_id"),
    ColumnSignature(EntityKind.USERS, "user_id"),
)


def classify(records: List[Dict[str, Optional[str]]]) -> Optional[EntityKind]:
    """Return the entity the file represents, or ``None`` when nothing matches."""
    if not records:
        return None
    first = records[0]
    for signature in SIGNATURES:
        if signature.matches(first):
            return signature.kind
    logger.debug("No signature matched columns %s", sorted(first.keys()))
    return None
