# app/models/vehicle.py
"""
Vehicles table, each owned by exactly one user.
uuid is assigned at creation and is the identifier shared with external systems.
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from app.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    uuid = Column(String(36), unique=True, nullable=False)
    make = Column(String(100))
    model = Column(String(100))
    year = Column(Integer)
    license_plate = Column(String(50))
    color = Column(String(50))
    category = Column(String(50))

    jobs = relationship("Job", back_populates="vehicle", passive_deletes=True)

    def __repr__(self):
        return f"<Vehicle {self.id} plate={self.license_plate} user={self.user_id}>"
