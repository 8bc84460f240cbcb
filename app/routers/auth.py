# app/routers/auth.py
"""Login/signup: exchanges a Firebase ID token for the local user record."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_identity_resolver
from app.schemas.auth import AuthOut, FirebaseLogin, UserOut
from app.schemas.common import error_responses
from app.services.user_service import authenticate

router = APIRouter()


@router.post("/auth/firebase", response_model=AuthOut, summary="Authenticate with a Firebase ID token",
             responses=error_responses(401, 500))
def firebase_login(body: FirebaseLogin, db: Session = Depends(get_db),
                   resolver=Depends(get_identity_resolver)):
    """Creates the user on first login. Returns 401 if the token does not verify."""
    user = authenticate(db, resolver, body.token)
    return {"message": "Authenticated with Firebase", "user": UserOut.model_validate(user)}
