"""
Person Pydantic models and response envelopes
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

class Person(BaseModel):
    uuid: str
    name: Optional[str] = None
    nickname: Optional[str] = None

    @field_validator("uuid", mode="before")
    @classmethod
    def identifier_as_text(cls, value):
        """A uuid-typed column comes back from asyncpg as uuid.UUID"""
        return value if isinstance(value, str) else str(value)


class PersonCreateRequest(BaseModel):
    name: str = ""
    nickname: str = ""
    uuid: Optional[str] = Field(None, description="Ignored; identifiers are generated server-side")


class PersonUpdateRequest(BaseModel):
    name: str = ""
    nickname: str = ""
    uuid: Optional[str] = Field(None, description="Ignored; identifiers are immutable")


class SuccessResponse(BaseModel):
    """Envelope for successful operations"""
    status: Literal["success"] = "success"
    statusCode: int
    data: List[Person] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Envelope for failed operations"""
    status: Literal["error"] = "error"
    statusCode: int
    message: str
