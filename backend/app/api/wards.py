"""Wards API: ward summaries with live bed counts."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.base import get_db
from ..models import Bed, BedStatus, Ward

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wards", tags=["wards"])


class WardSummaryResponse(BaseModel):
    ward_id: int
    name: Optional[str]
    type: Optional[str]
    num_of_total_beds: Optional[int]
    building: Optional[str]
    floor_number: Optional[int]
    beds_tracked: int
    available_beds: int


@router.get("", response_model=List[WardSummaryResponse])
def list_wards(db: Session = Depends(get_db)):
    """Wards with the number of beds on record and how many are available right now."""
    available = case((Bed.bed_status == BedStatus.AVAILABLE, 1), else_=0)
    try:
        rows = (
            db.query(
                Ward.ward_id,
                Ward.name,
                Ward.type,
                Ward.num_of_total_beds,
                Ward.building,
                Ward.floor_number,
                func.count(Bed.bed_id).label("beds_tracked"),
                func.coalesce(func.sum(available), 0).label("available_beds"),
            )
            .outerjoin(Bed, Ward.ward_id == Bed.ward_id)
            .group_by(
                Ward.ward_id,
                Ward.name,
                Ward.type,
                Ward.num_of_total_beds,
                Ward.building,
                Ward.floor_number,
            )
            .order_by(Ward.ward_id)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching wards")
        raise HTTPException(status_code=500, detail="Error fetching wards")
    return [dict(row._mapping) for row in rows]
