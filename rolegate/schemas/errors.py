"""Error response body shared by all exception handlers."""

from datetime import datetime

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    transaction_id: str
    path: str
