# app/schemas/common.py
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

# Money stays Decimal in Python and goes out as a plain JSON number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class MessageOut(BaseModel):
    message: str


class ErrorOut(BaseModel):
    error: str


def error_responses(*status_codes: int) -> dict:
    """OpenAPI `responses=` entries for the {"error": ...} envelope."""
    return {code: {"model": ErrorOut} for code in status_codes}
