"""Beds API: listing, single-bed detail, and occupancy updates from the dashboard."""
import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import StoreError, WardServiceError
from ..models.base import get_db
from ..models import Bed, Patient, Ward
from ..services.bed_assignment import bed_assignment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/beds", tags=["beds"])


class BedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    bed_id: int
    ward_id: Optional[int]
    bed_number: Optional[str]
    bed_status: Optional[str]
    bed_type: Optional[str]
    patient_id: Optional[int]


class BedDetailResponse(BaseModel):
    bed_id: int
    bed_number: Optional[str]
    bed_status: Optional[str]
    bed_type: Optional[str]
    ward_name: Optional[str]
    floor_number: Optional[int]
    building: Optional[str]
    patient_id: Optional[int]
    first_name: Optional[str]
    last_name: Optional[str]
    admission_status: Optional[str]


class BedAssignRequest(BaseModel):
    bed_id: Optional[int] = None
    bed_number: Optional[str] = None
    bed_status: Optional[str] = None
    patient_id: Optional[int] = None

    @field_validator("bed_number", mode="before")
    @classmethod
    def _bed_number_as_text(cls, v: Union[str, int, None]):
        return str(v) if isinstance(v, int) else v


@router.get("", response_model=List[BedResponse])
def list_beds(db: Session = Depends(get_db)):
    """Every bed row, unfiltered."""
    try:
        return db.query(Bed).all()
    except SQLAlchemyError:
        logger.exception("Error fetching beds")
        raise HTTPException(status_code=500, detail="Error fetching beds")


def _assign(req: BedAssignRequest, db: Session) -> PlainTextResponse:
    try:
        bed_assignment_service.assign(
            db,
            bed_status=req.bed_status,
            bed_id=req.bed_id,
            bed_number=req.bed_number,
            patient_id=req.patient_id,
        )
    except StoreError:
        logger.exception("Bed update failed for bed_id=%s bed_number=%s", req.bed_id, req.bed_number)
        raise HTTPException(status_code=500, detail="Server error updating bed + admissions")
    except WardServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return PlainTextResponse("Bed updated successfully")


@router.post("/update", response_class=PlainTextResponse)
def update_bed(req: BedAssignRequest, db: Session = Depends(get_db)):
    """Change a bed's status; occupying opens an admission, freeing it discharges."""
    return _assign(req, db)


@router.post("/assign", response_class=PlainTextResponse)
def assign_bed(req: BedAssignRequest, db: Session = Depends(get_db)):
    """Alias of ``/beds/update`` kept for older dashboard builds."""
    return _assign(req, db)


@router.get("/{bed_number}", response_model=BedDetailResponse)
def get_bed(bed_number: str, db: Session = Depends(get_db)):
    """One bed with its ward location and current occupant."""
    try:
        row = (
            db.query(
                Bed.bed_id,
                Bed.bed_number,
                Bed.bed_status,
                Bed.bed_type,
                Ward.name.label("ward_name"),
                Ward.floor_number,
                Ward.building,
                Patient.patient_id,
                Patient.first_name,
                Patient.last_name,
                Patient.admission_status,
            )
            .outerjoin(Ward, Bed.ward_id == Ward.ward_id)
            .outerjoin(Patient, Bed.patient_id == Patient.patient_id)
            .filter(Bed.bed_number == bed_number)
            .first()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching bed %s", bed_number)
        raise HTTPException(status_code=500, detail="Error fetching bed")
    if row is None:
        raise HTTPException(status_code=404, detail="Bed not found")
    return dict(row._mapping)
