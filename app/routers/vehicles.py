# app/routers/vehicles.py
"""Vehicle Registry: CRUD for a user's vehicles."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.vehicle import VehicleCreate, VehicleDeletedOut, VehicleOut, VehicleUpdate
from app.schemas.common import error_responses
from app.services import vehicle_service

router = APIRouter()


@router.post("/vehicles", response_model=VehicleOut, status_code=status.HTTP_201_CREATED,
             summary="Register a new vehicle", responses=error_responses(422, 500))
def create_vehicle(body: VehicleCreate, db: Session = Depends(get_db)):
    return vehicle_service.create_vehicle(db, body)


@router.get("/vehicles/{user_id}", response_model=list[VehicleOut], summary="List a user's vehicles",
            responses=error_responses(500))
def list_vehicles(user_id: int, db: Session = Depends(get_db)):
    return vehicle_service.list_vehicles_by_user(db, user_id)


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Replace a vehicle's details",
            responses=error_responses(404, 422, 500))
def update_vehicle(vehicle_id: int, body: VehicleUpdate, db: Session = Depends(get_db)):
    return vehicle_service.update_vehicle(db, vehicle_id, body)


@router.delete("/vehicles/{vehicle_id}", response_model=VehicleDeletedOut,
               summary="Delete a vehicle with its jobs", responses=error_responses(404, 500))
def delete_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    vehicle = vehicle_service.delete_vehicle(db, vehicle_id)
    return {"message": "Vehicle deleted", "vehicle": VehicleOut.model_validate(vehicle)}
