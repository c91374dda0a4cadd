from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None
