"""
Response Envelope
=================

Every endpoint answers with the same shape:

    {"success": bool, "message": str?, "data": object?, "errors": list?}
"""

from typing import Any, Generic, List, Optional, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response envelope."""
    success: bool = Field(..., description="Whether the request succeeded")
    message: Optional[str] = Field(None, description="Human readable outcome")
    data: Optional[T] = Field(None, description="Payload")
    errors: Optional[List[Any]] = Field(None, description="Collected validation errors")


def envelope(
    success: bool,
    message: Optional[str] = None,
    data: Any = None,
    errors: Optional[List[Any]] = None,
) -> dict:
    """Build an envelope dict, omitting empty optional members."""
    body: dict = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    return body


def error_response(
    status_code: int,
    message: str,
    errors: Optional[List[Any]] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """JSONResponse carrying a failed envelope."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope(False, message=message, errors=errors)),
        headers=headers,
    )
