# app/services/job_service.py
"""
Job Ledger: maintenance jobs and the parts consumed by each one.

Invariant after every committed create/update:
    jobs.total_cost == jobs.labor_cost + sum(parts.cost for the job's parts)

Parts have no endpoints of their own. A job update carries the complete
desired list of parts: entries with an id update that part, entries without
one are inserted, and persisted parts missing from the list are deleted.
"""

from decimal import Decimal

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import atomic
from app.models.job import Job
from app.models.part import Part
from app.schemas.job import JobCreate, JobUpdate, PartIn
from app.services.exceptions import NotFound, TransactionFailure
from app.utils.logger import get_logger

logger = get_logger(__name__)


def sum_costs(labor_cost: Decimal, costs) -> Decimal:
    return labor_cost + sum(costs, Decimal("0"))


def _new_part(job_id: int, part: PartIn) -> Part:
    return Part(
        job_id=job_id,
        name=part.name,
        type=part.type,
        cost=part.cost,
        observations=part.observations,
    )


def create_job(db: Session, body: JobCreate) -> int:
    """Insert a job and all of its parts atomically. Returns the new job id."""
    total_cost = sum_costs(body.labor_cost, (p.cost for p in body.parts))

    with atomic(db, "Error creating job"):
        job = Job(
            vehicle_id=body.vehicle_id,
            name=body.name,
            date=body.date,
            labor_cost=body.labor_cost,
            total_cost=total_cost,
            general_observations=body.general_observations,
        )
        db.add(job)
        db.flush()  # assigns job.id

        for part in body.parts:
            db.add(_new_part(job.id, part))
        db.flush()
        job_id = job.id

    logger.info(f"Job {job_id} created for vehicle {body.vehicle_id} with {len(body.parts)} parts (total={total_cost})")
    return job_id


def list_jobs_by_vehicle(db: Session, vehicle_id: int) -> list[Job]:
    """
    All jobs of a vehicle, each with its parts loaded by a separate query.
    Runs outside an explicit transaction, so a job's parts may reflect
    writes committed after the job list was read.
    """
    try:
        jobs = db.query(Job).filter(Job.vehicle_id == vehicle_id).order_by(Job.id).all()
        for job in jobs:
            job.parts  # lazy load: one parts query per job
        return jobs
    except SQLAlchemyError as e:
        logger.error(f"Error fetching jobs for vehicle {vehicle_id}: {e}", exc_info=True)
        raise TransactionFailure("Error fetching jobs") from e


def update_job(db: Session, job_id: int, body: JobUpdate) -> Decimal:
    """
    Replace a job's fields and reconcile its parts with body.parts.

    Steps, all in one transaction:
      1. update scalar fields and a provisional total from the submitted costs
      2. read the ids of the persisted parts
      3. collect the ids carried by the submitted parts
      4. delete persisted parts that were not submitted
      5. update submitted parts that carry an id (only if they belong to this job),
         insert the ones that don't
      6. re-read the persisted costs and write the authoritative total

    Returns the committed total_cost.
    """
    provisional_total = sum_costs(body.labor_cost, (p.cost for p in body.parts))

    with atomic(db, "Error updating job"):
        result = db.execute(
            update(Job)
            .where(Job.id == job_id)
            .values(
                name=body.name,
                date=body.date,
                labor_cost=body.labor_cost,
                total_cost=provisional_total,
                general_observations=body.general_observations,
            )
        )
        if result.rowcount == 0:
            raise NotFound("Job not found")

        existing_ids = set(db.scalars(select(Part.id).where(Part.job_id == job_id)))
        incoming_ids = {p.id for p in body.parts if p.id}

        stale_ids = existing_ids - incoming_ids
        if stale_ids:
            db.execute(delete(Part).where(Part.id.in_(sorted(stale_ids))))

        for part in body.parts:
            if part.id:
                # Scoped by job_id too: an id from another job is a no-op
                db.execute(
                    update(Part)
                    .where(Part.id == part.id, Part.job_id == job_id)
                    .values(
                        name=part.name,
                        type=part.type,
                        cost=part.cost,
                        observations=part.observations,
                    )
                )
            else:
                db.add(_new_part(job_id, part))
        db.flush()

        persisted_costs = db.scalars(select(Part.cost).where(Part.job_id == job_id)).all()
        total_cost = sum_costs(body.labor_cost, persisted_costs)
        db.execute(update(Job).where(Job.id == job_id).values(total_cost=total_cost))

    if total_cost != provisional_total:
        logger.warning(f"Job {job_id}: submitted costs implied {provisional_total}, persisted parts give {total_cost}")
    logger.info(f"Job {job_id} updated (removed {len(stale_ids)} parts, total={total_cost})")
    return total_cost


def delete_job(db: Session, job_id: int):
    """Delete a job and its parts atomically. Raises NotFound if the job does not exist."""
    with atomic(db, "Error deleting job"):
        removed_parts = db.execute(delete(Part).where(Part.job_id == job_id)).rowcount
        result = db.execute(delete(Job).where(Job.id == job_id))
        if result.rowcount == 0:
            raise NotFound("Job not found")
    logger.info(f"Job {job_id} deleted with {removed_parts} parts")
