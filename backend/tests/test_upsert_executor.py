"""Upsert executor: idempotence, last-CSV-wins overwrites and per-file atomicity."""
from datetime import date, time

import pytest

from app.core.exceptions import StoreError
from app.models import Admission, Bed, Forecast, Patient, Role, User, Ward
from app.services.ingestion import parse_csv
from app.services.schema_classifier import EntityKind
from app.services.upsert_executor import (
    ENTITY_TABLES,
    bind_date,
    bind_time,
    build_upsert,
    upsert_records,
)

from .conftest import (
    ADMISSIONS_CSV,
    BEDS_CSV,
    FORECASTS_CSV,
    PATIENTS_CSV,
    ROLES_CSV,
    USERS_CSV,
    WARDS_CSV,
)


def _snapshot(db, model):
    """Every column of every row, ordered by primary key."""
    db.expire_all()
    columns = [c.name for c in model.__table__.columns]
    pk = list(model.__table__.primary_key.columns)[0]
    return [
        {name: getattr(row, name) for name in columns}
        for row in db.query(model).order_by(pk).all()
    ]


ALL_FILES = [
    (EntityKind.PATIENTS, Patient, PATIENTS_CSV),
    (EntityKind.WARDS, Ward, WARDS_CSV),
    (EntityKind.BEDS, Bed, BEDS_CSV),
    (EntityKind.ADMISSIONS, Admission, ADMISSIONS_CSV),
    (EntityKind.FORECASTS, Forecast, FORECASTS_CSV),
    (EntityKind.ROLES, Role, ROLES_CSV),
    (EntityKind.USERS, User, USERS_CSV),
]


def _load_parents(db):
    """Wards and patients the sample beds point at."""
    upsert_records(db, EntityKind.WARDS, parse_csv(WARDS_CSV.encode()))
    upsert_records(db, EntityKind.PATIENTS, parse_csv(PATIENTS_CSV.encode()))


class TestIdempotence:
    @pytest.mark.parametrize("kind,model,csv_text", ALL_FILES)
    def test_ingesting_twice_equals_ingesting_once(self, db, kind, model, csv_text):
        if kind is EntityKind.BEDS:
            _load_parents(db)
        records = parse_csv(csv_text.encode())
        upsert_records(db, kind, records)
        once = _snapshot(db, model)

        upsert_records(db, kind, records)
        twice = _snapshot(db, model)

        assert len(once) == len(records)
        assert twice == once

    def test_returns_row_count(self, db):
        assert upsert_records(db, EntityKind.WARDS, parse_csv(WARDS_CSV.encode())) == 2


class TestSanitizedValues:
    def test_patient_fields_are_coerced(self, db):
        upsert_records(db, EntityKind.PATIENTS, parse_csv(PATIENTS_CSV.encode()))
        ana, ben = _snapshot(db, Patient)
        assert ana["date_of_birth"] == date(1980, 3, 4)
        assert ana["priority_level"] == 2
        assert ben["date_of_birth"] == date(1975, 11, 20)
        assert ben["admission_status"] is None
        assert ben["priority_level"] is None
        assert ben["admit_reason"] is None

    def test_ward_numeric_prefix_and_blank(self, db):
        upsert_records(db, EntityKind.WARDS, parse_csv(WARDS_CSV.encode()))
        south = _snapshot(db, Ward)[1]
        assert south["num_of_total_beds"] == 20
        assert south["floor_number"] is None

    def test_admission_dates_and_times(self, db):
        upsert_records(db, EntityKind.ADMISSIONS, parse_csv(ADMISSIONS_CSV.encode()))
        open_episode, closed_episode = _snapshot(db, Admission)
        assert open_episode["admission_date"] == date(2024, 3, 1)
        assert open_episode["admission_time"] == time(8, 15)
        assert open_episode["discharge_date"] is None
        assert closed_episode["discharge_date"] == date(2024, 2, 25)
        assert closed_episode["discharge_time"] == time(9, 30)
        assert closed_episode["transfer_to"] == 11


class TestLastCsvWins:
    def test_existing_row_is_overwritten(self, db):
        upsert_records(db, EntityKind.WARDS, parse_csv(WARDS_CSV.encode()))
        update = "ward_id,name,type,num_of_total_beds,building,floor_number\n10,North East,HDU,14,Main,4\n"
        upsert_records(db, EntityKind.WARDS, parse_csv(update.encode()))

        wards = _snapshot(db, Ward)
        assert len(wards) == 2
        assert wards[0]["name"] == "North East"
        assert wards[0]["type"] == "HDU"
        assert wards[0]["floor_number"] == 4

    def test_column_missing_from_csv_overwrites_with_null(self, db):
        upsert_records(db, EntityKind.WARDS, parse_csv(WARDS_CSV.encode()))
        partial = "ward_id,name\n10,North\n"
        upsert_records(db, EntityKind.WARDS, parse_csv(partial.encode()))

        north = _snapshot(db, Ward)[0]
        assert north["name"] == "North"
        assert north["type"] is None
        assert north["num_of_total_beds"] is None
        assert north["building"] is None


class TestAtomicity:
    def test_constraint_violation_rolls_back_whole_file(self, db):
        _load_parents(db)
        duplicate_bed_number = (
            "bed_id,ward_id,bed_number,bed_status,bed_type,patient_id\n"
            "100,10,N-01,available,ICU,\n"
            "101,10,N-02,available,ICU,\n"
            "102,10,N-01,available,ICU,\n"
        )
        with pytest.raises(StoreError) as exc_info:
            upsert_records(db, EntityKind.BEDS, parse_csv(duplicate_bed_number.encode()))

        assert "beds row 3" in str(exc_info.value)
        assert _snapshot(db, Bed) == []

    def test_unknown_ward_reference_rolls_back_whole_file(self, db):
        _load_parents(db)
        dangling_ward = (
            "bed_id,ward_id,bed_number,bed_status,bed_type,patient_id\n"
            "100,10,N-01,available,ICU,\n"
            "101,99,X-01,available,ICU,\n"
        )
        with pytest.raises(StoreError, match="beds row 2"):
            upsert_records(db, EntityKind.BEDS, parse_csv(dangling_ward.encode()))

        assert _snapshot(db, Bed) == []

    def test_failed_file_leaves_earlier_state_untouched(self, db):
        upsert_records(db, EntityKind.PATIENTS, parse_csv(PATIENTS_CSV.encode()))
        before = _snapshot(db, Patient)

        bad_date = (
            "patient_id,first_name,last_name,date_of_birth\n"
            "1,Changed,Name,1/1/1990\n"
            "3,New,Patient,2024-13-45\n"
        )
        with pytest.raises(StoreError):
            upsert_records(db, EntityKind.PATIENTS, parse_csv(bad_date.encode()))

        assert _snapshot(db, Patient) == before

    def test_session_usable_after_rollback(self, db):
        bad_forecast = "forecast_id,ward_id,forecast_date\n1,10,next week\n"
        with pytest.raises(StoreError):
            upsert_records(db, EntityKind.FORECASTS, parse_csv(bad_forecast.encode()))

        assert upsert_records(db, EntityKind.FORECASTS, parse_csv(FORECASTS_CSV.encode())) == 2
        assert len(_snapshot(db, Forecast)) == 2


class TestBinding:
    def test_bind_date(self):
        assert bind_date("2024-3-4") == date(2024, 3, 4)
        assert bind_date("2024-03-04 00:00:00") == date(2024, 3, 4)
        assert bind_date(None) is None
        with pytest.raises(ValueError):
            bind_date("2024-02-30")
        with pytest.raises(ValueError):
            bind_date("March 4")

    def test_bind_time(self):
        assert bind_time("9:30") == time(9, 30)
        assert bind_time("14:00:05") == time(14, 0, 5)
        with pytest.raises(ValueError):
            bind_time("2pm")
        with pytest.raises(ValueError):
            bind_time("25:00")


class TestDialects:
    def test_mysql_uses_on_duplicate_key_update(self):
        from sqlalchemy.dialects import mysql

        entity = ENTITY_TABLES[EntityKind.ROLES]
        stmt = build_upsert("mysql", entity, {"role_id": 1, "role_name": "nurse", "description": None})
        sql = str(stmt.compile(dialect=mysql.dialect()))
        assert "ON DUPLICATE KEY UPDATE" in sql

    def test_postgresql_uses_on_conflict(self):
        from sqlalchemy.dialects import postgresql

        entity = ENTITY_TABLES[EntityKind.ROLES]
        stmt = build_upsert("postgresql", entity, {"role_id": 1, "role_name": "nurse", "description": None})
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "ON CONFLICT (role_id) DO UPDATE" in sql

    def test_unsupported_dialect(self):
        with pytest.raises(StoreError):
            build_upsert("oracle", ENTITY_TABLES[EntityKind.ROLES], {"role_id": 1})
