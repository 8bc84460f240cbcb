# app/models/part.py
"""Parts consumed by a job. No lifecycle outside their job."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from app.database import Base


class Part(Base):
    __tablename__ = "parts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    type = Column(String(50))
    cost = Column(Numeric(12, 2), nullable=False, default=0)
    observations = Column(Text)

    job = relationship("Job", back_populates="parts")

    def __repr__(self):
        return f"<Part {self.id} job={self.job_id} cost={self.cost}>"
