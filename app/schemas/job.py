# app/schemas/job.py
import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from app.schemas.common import Money


class PartIn(BaseModel):
    """A part as submitted by the client. id is present only for parts that already exist."""

    id: Optional[int] = None
    name: str
    type: Optional[str] = None
    cost: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    observations: Optional[str] = None


class JobFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    date: Optional[datetime.date] = None
    parts: list[PartIn] = []
    labor_cost: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2, alias="laborCost")
    general_observations: Optional[str] = Field(default=None, alias="generalObservations")


class JobCreate(JobFields):
    vehicle_id: int = Field(alias="vehicleId")


class JobUpdate(JobFields):
    pass


class PartOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    name: str
    type: Optional[str]
    cost: Money
    observations: Optional[str]


class JobOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    vehicle_id: int
    name: str
    date: Optional[datetime.date]
    labor_cost: Money
    total_cost: Money
    general_observations: Optional[str]
    parts: list[PartOut] = []


class JobCreatedOut(BaseModel):
    message: str
    jobId: int
