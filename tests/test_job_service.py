# tests/test_job_service.py
"""Unit tests for the job ledger: creation, part reconciliation, deletion, atomicity."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from app.models.job import Job
from app.models.part import Part
from app.schemas.job import JobCreate, JobUpdate, PartIn
from app.services import job_service
from app.services.exceptions import NotFound, TransactionFailure


def make_job(db, vehicle, labor="20", parts=(("Filter", "5"),)):
    body = JobCreate(
        vehicleId=vehicle.id,
        name="Oil change",
        date="2024-01-01",
        laborCost=labor,
        generalObservations="",
        parts=[{"name": name, "type": "part", "cost": cost, "observations": ""} for name, cost in parts],
    )
    return job_service.create_job(db, body)


def parts_of(db, job_id):
    return db.query(Part).filter(Part.job_id == job_id).order_by(Part.id).all()


class TestCreateJob:
    def test_total_is_labor_plus_parts(self, db, vehicle):
        job_id = make_job(db, vehicle, labor="20", parts=[("Filter", "5"), ("Oil", "32.50")])

        job = db.get(Job, job_id)
        assert job.total_cost == Decimal("57.50")
        assert job.labor_cost == Decimal("20")
        assert [p.name for p in parts_of(db, job_id)] == ["Filter", "Oil"]

    def test_decimal_sum_has_no_drift(self, db, vehicle):
        job_id = make_job(db, vehicle, labor="0.10", parts=[("Washer", "0.20"), ("Bolt", "0.70")])

        assert db.get(Job, job_id).total_cost == Decimal("1.00")

    def test_sub_cent_amounts_are_rejected(self, vehicle):
        with pytest.raises(ValidationError):
            JobCreate(vehicleId=vehicle.id, name="Fuse", laborCost="0.005", parts=[])
        with pytest.raises(ValidationError):
            PartIn(name="Fuse", cost="0.005")

    def test_stored_total_matches_stored_amounts(self, db, vehicle):
        job_id = make_job(db, vehicle, labor="19.99", parts=[("Fuse", "0.01"), ("Relay", "12.35")])

        db.expire_all()
        job = db.get(Job, job_id)
        stored_parts = sum((p.cost for p in parts_of(db, job_id)), Decimal("0"))
        assert job.total_cost == job.labor_cost + stored_parts == Decimal("32.35")

    def test_job_without_parts(self, db, vehicle):
        job_id = make_job(db, vehicle, labor="45", parts=[])

        assert db.get(Job, job_id).total_cost == Decimal("45")
        assert parts_of(db, job_id) == []

    def test_failed_part_insert_leaves_nothing(self, db, vehicle):
        body = JobCreate(vehicleId=vehicle.id, name="Brakes", laborCost="50", parts=[])
        # name=None violates NOT NULL on the second part
        body.parts = [
            PartIn(name="Pads", cost="40"),
            PartIn.model_construct(id=None, name=None, type="part", cost=Decimal("10"), observations=None),
        ]

        with pytest.raises(TransactionFailure) as exc_info:
            job_service.create_job(db, body)

        assert exc_info.value.message == "Error creating job"
        assert db.query(Job).count() == 0
        assert db.query(Part).count() == 0


class TestListJobs:
    def test_jobs_carry_their_parts(self, db, vehicle):
        first = make_job(db, vehicle, parts=[("Filter", "5"), ("Oil", "30")])
        second = make_job(db, vehicle, parts=[])

        jobs = job_service.list_jobs_by_vehicle(db, vehicle.id)

        assert [j.id for j in jobs] == [first, second]
        assert [p.name for p in jobs[0].parts] == ["Filter", "Oil"]
        assert jobs[1].parts == []

    def test_unknown_vehicle_has_no_jobs(self, db, vehicle):
        make_job(db, vehicle)
        assert job_service.list_jobs_by_vehicle(db, vehicle.id + 100) == []


class TestUpdateJob:
    def test_reconciles_parts_against_submitted_list(self, db, vehicle):
        job_id = make_job(db, vehicle, labor="20", parts=[("A", "10"), ("B", "20")])
        part_a, part_b = parts_of(db, job_id)
        a_id, b_id = part_a.id, part_b.id

        total = job_service.update_job(db, job_id, JobUpdate(
            name="Oil change",
            laborCost="20",
            parts=[
                {"id": a_id, "name": "A", "type": "part", "cost": "15"},
                {"name": "C", "type": "part", "cost": "5"},
            ],
        ))

        parts = parts_of(db, job_id)
        assert len(parts) == 2
        assert parts[0].id == a_id and parts[0].cost == Decimal("15")
        assert b_id not in [p.id for p in parts]
        assert parts[1].name == "C" and parts[1].cost == Decimal("5")
        assert total == Decimal("40")
        assert db.get(Job, job_id).total_cost == Decimal("40")

    def test_empty_parts_list_removes_all_parts(self, db, vehicle):
        job_id = make_job(db, vehicle, labor="20", parts=[("A", "10"), ("B", "20")])

        job_service.update_job(db, job_id, JobUpdate(name="Oil change", laborCost="30", parts=[]))

        assert parts_of(db, job_id) == []
        assert db.get(Job, job_id).total_cost == Decimal("30")

    def test_scalar_fields_are_replaced(self, db, vehicle):
        job_id = make_job(db, vehicle)

        job_service.update_job(db, job_id, JobUpdate(
            name="Timing belt", date="2024-03-15", laborCost="120",
            generalObservations="Replaced tensioner too", parts=[],
        ))

        job = db.get(Job, job_id)
        assert job.name == "Timing belt"
        assert job.date == datetime.date(2024, 3, 15)
        assert job.general_observations == "Replaced tensioner too"
        assert job.labor_cost == Decimal("120")

    def test_part_id_from_another_job_is_not_touched(self, db, vehicle):
        job_id = make_job(db, vehicle, labor="10", parts=[("Mine", "1")])
        other_id = make_job(db, vehicle, labor="10", parts=[("Theirs", "99")])
        foreign_part = parts_of(db, other_id)[0]
        foreign_id = foreign_part.id

        total = job_service.update_job(db, job_id, JobUpdate(
            name="Oil change",
            laborCost="10",
            parts=[{"id": foreign_id, "name": "Hijacked", "cost": "1000"}],
        ))

        # The stored total only counts parts that really belong to the job
        assert total == Decimal("10")
        assert parts_of(db, job_id) == []
        db.expire_all()
        untouched = db.get(Part, foreign_id)
        assert untouched.name == "Theirs" and untouched.cost == Decimal("99")
        assert untouched.job_id == other_id

    def test_duplicate_submitted_ids_are_counted_once(self, db, vehicle):
        job_id = make_job(db, vehicle, labor="20", parts=[("A", "10")])
        a_id = parts_of(db, job_id)[0].id

        total = job_service.update_job(db, job_id, JobUpdate(
            name="Oil change",
            laborCost="20",
            parts=[{"id": a_id, "name": "A", "cost": "10"}, {"id": a_id, "name": "A", "cost": "10"}],
        ))

        assert total == Decimal("30")
        assert db.get(Job, job_id).total_cost == Decimal("30")

    def test_unknown_job_raises_not_found(self, db, vehicle):
        with pytest.raises(NotFound):
            job_service.update_job(db, 12345, JobUpdate(name="x", laborCost="1", parts=[]))

    def test_failure_midway_rolls_back_everything(self, db, vehicle):
        job_id = make_job(db, vehicle, labor="20", parts=[("A", "10"), ("B", "20")])
        a_id, b_id = [p.id for p in parts_of(db, job_id)]

        body = JobUpdate(name="Changed", laborCost="99", parts=[])
        body.parts = [
            PartIn(id=a_id, name="A", cost="11"),
            PartIn(name="New 1", cost="1"),
            PartIn.model_construct(id=None, name=None, type=None, cost=Decimal("2"), observations=None),
            PartIn(name="New 3", cost="3"),
            PartIn(name="New 4", cost="4"),
        ]

        with pytest.raises(TransactionFailure):
            job_service.update_job(db, job_id, body)

        db.expire_all()
        job = db.get(Job, job_id)
        assert job.name == "Oil change"
        assert job.labor_cost == Decimal("20")
        assert job.total_cost == Decimal("50")
        parts = parts_of(db, job_id)
        assert [(p.id, p.cost) for p in parts] == [(a_id, Decimal("10")), (b_id, Decimal("20"))]


class TestDeleteJob:
    def test_deletes_job_and_parts(self, db, vehicle):
        job_id = make_job(db, vehicle, parts=[("A", "1"), ("B", "2"), ("C", "3")])

        job_service.delete_job(db, job_id)

        assert db.get(Job, job_id) is None
        assert parts_of(db, job_id) == []

    def test_unknown_job_raises_not_found(self, db, vehicle):
        with pytest.raises(NotFound):
            job_service.delete_job(db, 777)

    def test_failure_after_parts_delete_restores_parts(self, db, vehicle, monkeypatch):
        job_id = make_job(db, vehicle, parts=[("A", "1"), ("B", "2")])
        real_execute = db.execute
        calls = []

        def flaky_execute(statement, *args, **kwargs):
            calls.append(statement)
            if len(calls) == 2:
                raise OperationalError("DELETE FROM jobs", {}, Exception("connection lost"))
            return real_execute(statement, *args, **kwargs)

        monkeypatch.setattr(db, "execute", flaky_execute)
        with pytest.raises(TransactionFailure):
            job_service.delete_job(db, job_id)
        monkeypatch.undo()

        assert db.get(Job, job_id) is not None
        assert len(parts_of(db, job_id)) == 2
