"""Common Pydantic v2 schemas shared across the API.

Wire JSON is camelCase; Python code uses snake_case field names.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys and populated by either form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(CamelModel):
    """Standard error envelope."""

    success: bool = False
    error: str = Field(description="Human-readable error message")
    kind: str = Field(description="Machine-readable error kind")


class MessageResponse(CamelModel):
    """Success envelope carrying only a message."""

    success: bool = True
    message: str | None = None
