from sqlalchemy import Column, Integer, String, Date, Text
from sqlalchemy.orm import relationship
from .base import Base


class Patient(Base):
    __tablename__ = "patients"

    patient_id = Column(Integer, primary_key=True, autoincrement=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    medical_record_number = Column(String(50), nullable=True, index=True)
    admission_status = Column(String(50), nullable=True)
    priority_level = Column(Integer, nullable=True)
    admit_reason = Column(Text, nullable=True)

    beds = relationship("Bed", back_populates="patient")
