# app/models/user.py
"""
Users table: one row per distinct Firebase UID.
Created on first successful /auth/firebase; never deleted by this service.
"""

from sqlalchemy import Column, Integer, String
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    firebase_uid = Column(String(128), unique=True, nullable=False, index=True)
    email = Column(String(320))
    name = Column(String(200), nullable=False, default="")
    picture = Column(String(1024), nullable=False, default="")

    def __repr__(self):
        return f"<User {self.id} uid={self.firebase_uid}>"
