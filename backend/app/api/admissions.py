"""Admissions API: the latest admission activity across all wards."""
import logging
from datetime import date, time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.base import get_db
from ..models import Admission, Bed, Patient, Ward

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admissions", tags=["admissions"])

LATEST_ADMISSIONS_LIMIT = 25


class AdmissionFeedResponse(BaseModel):
    admission_id: int
    admission_date: Optional[date]
    admission_time: Optional[time]
    discharge_date: Optional[date]
    discharge_time: Optional[time]
    admission_reason: Optional[str]
    disposition: Optional[str]
    transfer_from: Optional[int]
    transfer_to: Optional[int]
    patient_id: Optional[int]
    first_name: Optional[str]
    last_name: Optional[str]
    ward_name: Optional[str]
    bed_number: Optional[str]


@router.get("/latest", response_model=List[AdmissionFeedResponse])
def latest_admissions(db: Session = Depends(get_db)):
    """The 25 most recent admissions, newest first, with patient and location names."""
    try:
        rows = (
            db.query(
                Admission.admission_id,
                Admission.admission_date,
                Admission.admission_time,
                Admission.discharge_date,
                Admission.discharge_time,
                Admission.admission_reason,
                Admission.disposition,
                Admission.transfer_from,
                Admission.transfer_to,
                Patient.patient_id,
                Patient.first_name,
                Patient.last_name,
                Ward.name.label("ward_name"),
                Bed.bed_number,
            )
            .outerjoin(Patient, Admission.patient_id == Patient.patient_id)
            .outerjoin(Ward, Admission.ward_id == Ward.ward_id)
            .outerjoin(Bed, Admission.bed_id == Bed.bed_id)
            .order_by(Admission.admission_date.desc(), Admission.admission_time.desc())
            .limit(LATEST_ADMISSIONS_LIMIT)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching admissions")
        raise HTTPException(status_code=500, detail="Error fetching admissions")
    return [dict(row._mapping) for row in rows]
