from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


class BedStatus:
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    # Any other free-text status ("cleaning", "maintenance", ...) is stored as given


class Bed(Base):
    __tablename__ = "beds"

    bed_id = Column(Integer, primary_key=True, autoincrement=False)
    ward_id = Column(Integer, ForeignKey("wards.ward_id"), nullable=True, index=True)
    bed_number = Column(String(50), unique=True, nullable=True)
    bed_status = Column(String(50), nullable=True)
    bed_type = Column(String(50), nullable=True)
    # Non-null iff bed_status == "occupied" (maintained by the bed assignment service only)
    patient_id = Column(Integer, ForeignKey("patients.patient_id"), nullable=True, index=True)

    ward = relationship("Ward", back_populates="beds")
    patient = relationship("Patient", back_populates="beds")
