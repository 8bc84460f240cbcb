# app/schemas/auth.py
from pydantic import BaseModel, ConfigDict
from typing import Optional


class FirebaseLogin(BaseModel):
    # A missing token is rejected by the identity provider (401), not by validation
    token: str = ""


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    firebase_uid: str
    email: Optional[str]
    name: str
    picture: str


class AuthOut(BaseModel):
    message: str
    user: UserOut
