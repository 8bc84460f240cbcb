# app/models/job.py
"""
Maintenance jobs, scoped to a vehicle.
total_cost is denormalized: labor_cost + sum of the job's part costs,
recomputed by job_service on every create/update.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from app.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    date = Column(Date)
    labor_cost = Column(Numeric(12, 2), nullable=False, default=0)
    total_cost = Column(Numeric(12, 2), nullable=False, default=0)
    general_observations = Column(Text)

    vehicle = relationship("Vehicle", back_populates="jobs")
    parts = relationship("Part", back_populates="job", order_by="Part.id", passive_deletes=True)

    def __repr__(self):
        return f"<Job {self.id} vehicle={self.vehicle_id} total={self.total_cost}>"
