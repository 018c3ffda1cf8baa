"""Patients API: read-only listing for the dashboard."""
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.base import get_db
from ..models import Patient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["patients"])


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    patient_id: int
    first_name: Optional[str]
    last_name: Optional[str]
    date_of_birth: Optional[date]
    gender: Optional[str]
    medical_record_number: Optional[str]
    admission_status: Optional[str]
    priority_level: Optional[int]
    admit_reason: Optional[str]


@router.get("", response_model=List[PatientResponse])
def list_patients(db: Session = Depends(get_db)):
    try:
        return db.query(Patient).order_by(Patient.patient_id.asc()).all()
    except SQLAlchemyError:
        logger.exception("Error fetching patients")
        raise HTTPException(status_code=500, detail="Error fetching patients")
