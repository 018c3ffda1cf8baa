"""
Bed assignment - occupancy state changes requested from the nurse dashboard.

A bed becoming occupied opens an admission episode; a bed becoming available
closes whatever episode is open on it. The bed update and the admission
change are committed together.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundError, StoreError, ValidationError
from ..models import Admission, Bed, BedStatus, Disposition, Patient
from ..models.admission import DEFAULT_ADMISSION_REASON
from ..models.base import transaction

logger = logging.getLogger(__name__)


@dataclass
class AssignmentResult:
    bed_id: int
    bed_status: str
    patient_id: Optional[int]
    admission_id: Optional[int] = None  # episode opened or re-opened
    admissions_closed: int = 0


class BedAssignmentService:
    """Applies bed status transitions and keeps admissions in step."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock

    def assign(
        self,
        db: Session,
        bed_status: Optional[str],
        bed_id: Optional[int] = None,
        bed_number: Optional[str] = None,
        patient_id: Optional[int] = None,
    ) -> AssignmentResult:
        """Set a bed's status (and occupant) and open/close admissions accordingly.

        Raises ValidationError for a missing bed reference, status or (when
        occupying) patient; NotFoundError when the bed does not exist;
        StoreError when the database rejects the change.
        """
        if bed_id is None and not bed_number:
            raise ValidationError("Missing bed_id or bed_number")
        if bed_status is None or not str(bed_status).strip():
            raise ValidationError("Missing bed_status")

        status = str(bed_status).lower()

        try:
            with transaction(db):
                bed = self._lock_bed(db, bed_id, bed_number)

                if status == BedStatus.OCCUPIED:
                    result = self._occupy(db, bed, patient_id)
                elif status == BedStatus.AVAILABLE:
                    result = self._release(db, bed)
                else:
                    bed.bed_status = bed_status
                    bed.patient_id = patient_id
                    result = AssignmentResult(bed.bed_id, bed.bed_status, bed.patient_id)
        except SQLAlchemyError as exc:
            raise StoreError(f"Bed update failed: {exc}") from exc

        logger.info(
            "Bed %s -> %s (patient=%s, admission=%s, closed=%d)",
            result.bed_id, result.bed_status, result.patient_id,
            result.admission_id, result.admissions_closed,
        )
        return result

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _occupy(self, db: Session, bed: Bed, patient_id: Optional[int]) -> AssignmentResult:
        if patient_id is None:
            raise ValidationError("patient_id is required when marking a bed occupied")
        if db.get(Patient, patient_id) is None:
            raise ValidationError(f"Patient {patient_id} does not exist")

        bed.bed_status = BedStatus.OCCUPIED
        bed.patient_id = patient_id

        now = self._clock()
        # An episode this patient already has open on the bed is kept as is
        episode = (
            db.query(Admission)
            .filter(
                Admission.bed_id == bed.bed_id,
                Admission.patient_id == patient_id,
                Admission.discharge_date.is_(None),
            )
            .order_by(Admission.admission_id.desc())
            .first()
        )
        # Any other open episode on the bed belonged to an occupant never released
        closed = self._close_open_episodes(
            db, bed, now, keep_admission_id=episode.admission_id if episode is not None else None
        )

        if episode is None:
            episode = (
                db.query(Admission)
                .filter(
                    Admission.bed_id == bed.bed_id,
                    Admission.patient_id == patient_id,
                    Admission.admission_date == now.date(),
                )
                .order_by(Admission.admission_id.desc())
                .first()
            )
        if episode is not None:
            # Same patient on the same bed, still open or admitted earlier today
            episode.discharge_date = None
            episode.discharge_time = None
        else:
            episode = Admission(
                patient_id=patient_id,
                ward_id=bed.ward_id,
                bed_id=bed.bed_id,
                admission_date=now.date(),
                admission_time=now.time().replace(microsecond=0),
                admission_reason=DEFAULT_ADMISSION_REASON,
                disposition=Disposition.ADMITTED,
            )
            db.add(episode)
        db.flush()

        return AssignmentResult(
            bed.bed_id, bed.bed_status, bed.patient_id,
            admission_id=episode.admission_id, admissions_closed=closed,
        )

    def _release(self, db: Session, bed: Bed) -> AssignmentResult:
        bed.bed_status = BedStatus.AVAILABLE
        bed.patient_id = None

        closed = self._close_open_episodes(db, bed, self._clock())
        db.flush()

        return AssignmentResult(bed.bed_id, bed.bed_status, None, admissions_closed=closed)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _close_open_episodes(
        db: Session, bed: Bed, now: datetime, keep_admission_id: Optional[int] = None
    ) -> int:
        """Discharge every open episode on the bed except ``keep_admission_id``."""
        q = db.query(Admission).filter(Admission.bed_id == bed.bed_id, Admission.discharge_date.is_(None))
        if keep_admission_id is not None:
            q = q.filter(Admission.admission_id != keep_admission_id)
        return q.update(
            {
                Admission.discharge_date: now.date(),
                Admission.discharge_time: now.time().replace(microsecond=0),
                Admission.disposition: Disposition.DISCHARGED,
            },
            synchronize_session=False,
        )

    @staticmethod
    def _lock_bed(db: Session, bed_id: Optional[int], bed_number: Optional[str]) -> Bed:
        """Load the bed row with a row lock so concurrent changes to one bed serialize."""
        q = db.query(Bed).with_for_update()
        if bed_id is not None:
            q = q.filter(Bed.bed_id == bed_id)
        else:
            q = q.filter(Bed.bed_number == str(bed_number))
        bed = q.first()
        if bed is None:
            raise NotFoundError("Bed not found")
        return bed


bed_assignment_service = BedAssignmentService()
