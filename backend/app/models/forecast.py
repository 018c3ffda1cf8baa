from sqlalchemy import Column, Integer, String, Date
from .base import Base


class Forecast(Base):
    """Ward occupancy forecast rows produced by an external model and ingested as CSV."""
    __tablename__ = "forecasts"

    forecast_id = Column(Integer, primary_key=True, autoincrement=False)
    ward_id = Column(Integer, nullable=True, index=True)
    forecast_date = Column(Date, nullable=True)
    predicted_admissions = Column(Integer, nullable=True)
    predicted_discharges = Column(Integer, nullable=True)
    predicted_occupancy = Column(Integer, nullable=True)
    model_version = Column(String(50), nullable=True)
