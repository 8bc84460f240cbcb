# app/services/vehicle_service.py
"""
Vehicle Registry: owner-scoped CRUD for vehicles.
Deleting a vehicle also deletes its jobs and their parts in the same transaction.
"""

import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import atomic
from app.models.job import Job
from app.models.part import Part
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreate, VehicleUpdate
from app.services.exceptions import NotFound, TransactionFailure
from app.utils.logger import get_logger

logger = get_logger(__name__)


def create_vehicle(db: Session, body: VehicleCreate) -> Vehicle:
    vehicle = Vehicle(
        user_id=body.user_id,
        uuid=str(uuid.uuid4()),
        make=body.make,
        model=body.model,
        year=body.year,
        license_plate=body.license_plate,
        color=body.color,
        category=body.category,
    )
    with atomic(db, "Failed to create vehicle"):
        db.add(vehicle)
    db.refresh(vehicle)
    logger.info(f"Vehicle {vehicle.id} ({vehicle.uuid}) created for user {vehicle.user_id}")
    return vehicle


def list_vehicles_by_user(db: Session, user_id: int) -> list[Vehicle]:
    try:
        return db.query(Vehicle).filter(Vehicle.user_id == user_id).order_by(Vehicle.id).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch vehicles for user {user_id}: {e}", exc_info=True)
        raise TransactionFailure("Failed to fetch vehicle") from e


def update_vehicle(db: Session, vehicle_id: int, body: VehicleUpdate) -> Vehicle:
    """Replace every editable field. Raises NotFound if the vehicle does not exist."""
    with atomic(db, "Failed to update vehicle"):
        vehicle = db.get(Vehicle, vehicle_id)
        if vehicle is None:
            raise NotFound("Vehicle not found")
        vehicle.make = body.make
        vehicle.model = body.model
        vehicle.year = body.year
        vehicle.license_plate = body.license_plate
        vehicle.color = body.color
        vehicle.category = body.category
    db.refresh(vehicle)
    return vehicle


def delete_vehicle(db: Session, vehicle_id: int) -> Vehicle:
    """Delete a vehicle with its jobs and parts. Returns the deleted row."""
    with atomic(db, "Failed to delete vehicle"):
        vehicle = db.get(Vehicle, vehicle_id)
        if vehicle is None:
            raise NotFound("Vehicle not found")
        job_ids = select(Job.id).where(Job.vehicle_id == vehicle_id)
        db.execute(delete(Part).where(Part.job_id.in_(job_ids)))
        db.execute(delete(Job).where(Job.vehicle_id == vehicle_id))
        db.delete(vehicle)
    logger.info(f"Vehicle {vehicle_id} deleted with its jobs")
    return vehicle
