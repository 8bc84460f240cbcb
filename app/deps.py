# app/deps.py
"""FastAPI dependencies for collaborators constructed at startup and kept on app.state."""

from fastapi import Request

from app.services.identity_service import FirebaseIdentityResolver


def get_identity_resolver(request: Request) -> FirebaseIdentityResolver:
    return request.app.state.identity_resolver
