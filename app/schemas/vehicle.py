# app/schemas/vehicle.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class VehicleFields(BaseModel):
    """Editable vehicle fields. Accepts the camelCase names clients send."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    license_plate: Optional[str] = Field(default=None, alias="licensePlate")
    color: Optional[str] = None
    category: Optional[str] = None


class VehicleCreate(VehicleFields):
    user_id: int = Field(alias="userId")


class VehicleUpdate(VehicleFields):
    pass


class VehicleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: int
    user_id: int
    uuid: str
    make: Optional[str]
    model: Optional[str]
    year: Optional[int]
    license_plate: Optional[str]
    color: Optional[str]
    category: Optional[str]


class VehicleDeletedOut(BaseModel):
    message: str
    vehicle: VehicleOut
