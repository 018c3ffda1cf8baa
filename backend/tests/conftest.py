"""Shared fixtures: an isolated in-memory SQLite database per test and CSV samples."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Importing the package registers every table on Base.metadata
from app.models import Base, Bed, Patient, Ward
from app.models.base import enable_sqlite_foreign_keys, get_db


PATIENTS_CSV = (
    "patient_id,first_name,last_name,date_of_birth,gender,medical_record_number,"
    "admission_status,priority_level,admit_reason\n"
    "1,Ana,Lopez,3/4/1980,F,MRN-001,admitted,2,Chest pain\n"
    "2,Ben,Okafor,1975-11-20,M,MRN-002,NULL,,\n"
)

WARDS_CSV = (
    "ward_id,name,type,num_of_total_beds,building,floor_number\n"
    "10,North,ICU,12,Main,3\n"
    "11,South,Surgical,20 beds,Annex,\n"
)

BEDS_CSV = (
    "bed_id,ward_id,bed_number,bed_status,bed_type,patient_id\n"
    "100,10,N-01,occupied,ICU,1\n"
    "101,10,N-02,available,ICU,\n"
    "102,11,S-01,cleaning,Standard,null\n"
)

ADMISSIONS_CSV = (
    "admission_id,patient_id,ward_id,bed_id,admission_date,admission_time,"
    "discharge_date,discharge_time,admission_reason,disposition,transfer_from,transfer_to\n"
    "500,1,10,100,3/1/2024,08:15,,,Chest pain,admitted,,\n"
    "501,2,11,,2/20/2024,14:00:00,2/25/2024,9:30,Fracture,discharged,10,11\n"
)

FORECASTS_CSV = (
    "forecast_id,ward_id,forecast_date,predicted_admissions,predicted_discharges,"
    "predicted_occupancy,model_version\n"
    "1,10,2024-03-05,4,3,11,v1\n"
    "2,11,3/6/2024,2,5,14,v1\n"
)

ROLES_CSV = (
    "role_id,role_name,description\n"
    "1,nurse,Ward nurse\n"
    "2,admin,\n"
)

USERS_CSV = (
    "user_id,username,email,display_name,role,ward_id\n"
    "1,alopez,ana.lopez@example.org,Ana Lopez,nurse,10\n"
    "2,bokafor,,Ben Okafor,admin,\n"
)


@pytest.fixture()
def engine():
    """In-memory SQLite shared by every session of one test, foreign keys enforced."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(test_engine, "connect", enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def ward_with_beds(db):
    """Ward 10 with two available beds and two known patients."""
    db.add(Ward(ward_id=10, name="North", type="ICU", num_of_total_beds=12, building="Main", floor_number=3))
    db.add(Patient(patient_id=1, first_name="Ana", last_name="Lopez", admission_status="admitted"))
    db.add(Patient(patient_id=2, first_name="Ben", last_name="Okafor"))
    db.add(Bed(bed_id=100, ward_id=10, bed_number="N-01", bed_status="available", bed_type="ICU"))
    db.add(Bed(bed_id=101, ward_id=10, bed_number="N-02", bed_status="available", bed_type="ICU"))
    db.commit()
    return db


@pytest.fixture()
def client(session_factory):
    """TestClient whose requests use the in-memory database."""
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
