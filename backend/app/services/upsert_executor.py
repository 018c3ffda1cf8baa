"""
Upsert executor - writes a classified CSV record set into its table.

Each row becomes one native insert-or-update statement keyed on the table's
primary key. Every declared column is written, so a column missing from the
CSV overwrites the stored value with NULL ("last CSV wins"). The whole file
runs in one transaction: one bad row and nothing from the file is kept.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date, time
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import StoreError
from ..models import Admission, Bed, Forecast, Patient, Role, User, Ward
from ..models.base import transaction
from .sanitizers import normalize_date, normalize_empty, normalize_int, normalize_time
from .schema_classifier import EntityKind

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[ T].*)?$")
_CLOCK_TIME = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?(?:\.\d+)?$")


def bind_date(value: Any) -> Optional[date]:
    """Convert a normalized date string to ``date``; raises ValueError when it is not one."""
    if value is None or isinstance(value, date):
        return value
    match = _ISO_DATE.match(str(value).strip())
    if not match:
        raise ValueError(f"invalid date value {value!r}")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def bind_time(value: Any) -> Optional[time]:
    """Convert ``H:MM`` / ``HH:MM:SS`` text to ``time``; raises ValueError otherwise."""
    if value is None or isinstance(value, time):
        return value
    match = _CLOCK_TIME.match(str(value).strip())
    if not match:
        raise ValueError(f"invalid time value {value!r}")
    hour, minute, second = match.groups()
    return time(int(hour), int(minute), int(second or 0))


def _text(value: Any) -> Any:
    return normalize_empty(value)


def _integer(value: Any) -> Optional[int]:
    return normalize_int(value)


def _date(value: Any) -> Optional[date]:
    return bind_date(normalize_date(value))


def _time(value: Any) -> Optional[time]:
    return bind_time(normalize_time(value))


@dataclass(frozen=True)
class EntityTable:
    """Column layout of one ingestible table: key column(s) plus per-column coercion."""
    model: type
    key_columns: Tuple[str, ...]
    fields: Tuple[Tuple[str, Callable[[Any], Any]], ...]

    @property
    def table(self):
        return self.model.__table__

    @property
    def update_columns(self) -> List[str]:
        return [name for name, _ in self.fields if name not in self.key_columns]

    def sanitize(self, record: Dict[str, Optional[str]]) -> Dict[str, Any]:
        return {name: coerce(record.get(name)) for name, coerce in self.fields}


ENTITY_TABLES: Dict[EntityKind, EntityTable] = {
    EntityKind.PATIENTS: EntityTable(
        model=Patient,
        key_columns=("patient_id",),
        fields=(
            ("patient_id", _integer),
            ("first_name", _text),
            ("last_name", _text),
            ("date_of_birth", _date),
            ("gender", _text),
            ("medical_record_number", _text),
            ("admission_status", _text),
            ("priority_level", _integer),
            ("admit_reason", _text),
        ),
    ),
    EntityKind.WARDS: EntityTable(
        model=Ward,
        key_columns=("ward_id",),
        fields=(
            ("ward_id", _integer),
            ("name", _text),
            ("type", _text),
            ("num_of_total_beds", _integer),
            ("building", _text),
            ("floor_number", _integer),
        ),
    ),
    EntityKind.BEDS: EntityTable(
        model=Bed,
        key_columns=("bed_id",),
        fields=(
            ("bed_id", _integer),
            ("ward_id", _integer),
            ("bed_number", _text),
            ("bed_status", _text),
            ("bed_type", _text),
            ("patient_id", _integer),
        ),
    ),
    EntityKind.ADMISSIONS: EntityTable(
        model=Admission,
        key_columns=("admission_id",),
        fields=(
            ("admission_id", _integer),
            ("patient_id", _integer),
            ("ward_id", _integer),
            ("bed_id", _integer),
            ("admission_date", _date),
            ("admission_time", _time),
            ("discharge_date", _date),
            ("discharge_time", _time),
            ("admission_reason", _text),
            ("disposition", _text),
            ("transfer_from", _integer),
            ("transfer_to", _integer),
        ),
    ),
    EntityKind.FORECASTS: EntityTable(
        model=Forecast,
        key_columns=("forecast_id",),
        fields=(
            ("forecast_id", _integer),
            ("ward_id", _integer),
            ("forecast_date", _date),
            ("predicted_admissions", _integer),
            ("predicted_discharges", _integer),
            ("predicted_occupancy", _integer),
            ("model_version", _text),
        ),
    ),
    EntityKind.ROLES: EntityTable(
        model=Role,
        key_columns=("role_id",),
        fields=(
            ("role_id", _integer),
            ("role_name", _text),
            ("description", _text),
        ),
    ),
    EntityKind.USERS: EntityTable(
        model=User,
        key_columns=("user_id",),
        fields=(
            ("user_id", _integer),
            ("username", _text),
            ("email", _text),
            ("display_name", _text),
            ("role", _text),
            ("ward_id", _integer),
        ),
    ),
}


def build_upsert(dialect_name: str, entity: EntityTable, row: Dict[str, Any]):
    """Build the dialect's native insert-or-update for one sanitized row."""
    update_columns = entity.update_columns
    if dialect_name == "mysql":
        stmt = mysql.insert(entity.table).values(row)
        return stmt.on_duplicate_key_update({name: stmt.inserted[name] for name in update_columns})
    if dialect_name in ("sqlite", "postgresql"):
        dialect_module = sqlite if dialect_name == "sqlite" else postgresql
        stmt = dialect_module.insert(entity.table).values(row)
        return stmt.on_conflict_do_update(
            index_elements=list(entity.key_columns),
            set_={name: stmt.excluded[name] for name in update_columns},
        )
    raise StoreError(f"Upsert is not supported on the '{dialect_name}' database dialect")


def upsert_records(db: Session, kind: EntityKind, records: List[Dict[str, Optional[str]]]) -> int:
    """Upsert every record into the table for ``kind`` in a single transaction.

    Returns the number of rows written. Raises StoreError (after rolling back
    the whole file) on the first row that fails.
    """
    entity = ENTITY_TABLES[kind]
    dialect_name = db.get_bind().dialect.name

    with transaction(db):
        for row_number, record in enumerate(records, start=1):
            try:
                row = entity.sanitize(record)
                db.execute(build_upsert(dialect_name, entity, row))
            except (SQLAlchemyError, ValueError) as exc:
                logger.error("Upsert into %s failed at row %d: %s", kind.value, row_number, exc)
                raise StoreError(f"Failed to upsert {kind.value} row {row_number}: {exc}") from exc

    logger.info("Upserted %d %s rows", len(records), kind.value)
    return len(records)
