"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Wraps a payload as ``{"status": 200, "message": "...", "data": ...}``."""

    status: int
    message: str
    data: T | None = None
