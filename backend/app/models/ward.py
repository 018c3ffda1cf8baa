from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from .base import Base


class Ward(Base):
    __tablename__ = "wards"

    ward_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(100), nullable=True)
    type = Column(String(50), nullable=True)  # e.g. "ICU", "Surgical", "Maternity"
    num_of_total_beds = Column(Integer, nullable=True)  # declared capacity, not the tracked count
    building = Column(String(100), nullable=True)
    floor_number = Column(Integer, nullable=True)

    beds = relationship("Bed", back_populates="ward")
