from sqlalchemy import Column, Integer, String, Date, Time, Text
from .base import Base


class Disposition:
    ADMITTED = "admitted"
    DISCHARGED = "discharged"


DEFAULT_ADMISSION_REASON = "Hospitalized"


class Admission(Base):
    __tablename__ = "admissions"

    admission_id = Column(Integer, primary_key=True, autoincrement=True)
    # Plain integer references: admission history may name patients/beds not (yet) ingested
    patient_id = Column(Integer, nullable=True, index=True)
    ward_id = Column(Integer, nullable=True)
    bed_id = Column(Integer, nullable=True, index=True)

    admission_date = Column(Date, nullable=True)
    admission_time = Column(Time, nullable=True)
    # NULL discharge_date = open episode (patient currently in the bed)
    discharge_date = Column(Date, nullable=True)
    discharge_time = Column(Time, nullable=True)

    admission_reason = Column(Text, nullable=True)
    disposition = Column(String(50), nullable=True)  # free text, e.g. "admitted", "discharged"
    transfer_from = Column(Integer, nullable=True)  # ward_id
    transfer_to = Column(Integer, nullable=True)  # ward_id
