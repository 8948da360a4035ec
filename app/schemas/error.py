from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ErrorResponse(BaseModel):
    """Structured body returned for every failed request."""
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
    details: Optional[list[str]] = None
