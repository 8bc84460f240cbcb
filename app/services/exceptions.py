# app/services/exceptions.py
"""
Error taxonomy shared by the services and rendered by the global handler in main.py.
Messages are safe to show to clients; store error detail is only ever logged.
"""

from fastapi import status


class LedgerError(Exception):
    """Base class. Carries the client-facing message and HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidCredential(LedgerError):
    """Identity token failed verification (malformed, expired, revoked, forged)."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND


class TransactionFailure(LedgerError):
    """Any store error; the surrounding transaction has already been rolled back."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
