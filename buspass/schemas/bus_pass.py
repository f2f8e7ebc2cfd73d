"""
Bus Pass Backend - Bus Pass Schemas
=====================================

What:  Pydantic models for bus pass submissions and the stored record.
How:   Attributes are snake_case in Python; the JSON contract uses camelCase
       (validTill, passType, collegeName, busPass) through an alias generator.
       FastAPI serializes response models by alias.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

# Public URL prefix under which stored photos are served
UPLOADS_URL_PREFIX = "/uploads"


class CamelModel(BaseModel):
    """Base for models exchanged with the form client in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class BusPassForm(CamelModel):
    """
    Text fields of a POST /bus-pass submission (form or JSON body).

    Every field is optional and kept as the raw submitted string; the
    service coerces validTill and price the way the store would.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    valid_till: Optional[str] = None
    pass_type: Optional[str] = None
    route: Optional[str] = None
    college_name: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    price: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def number_as_text(cls, value):
        # JSON clients send price as a number
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class BusPassResponse(CamelModel):
    """
    A stored bus pass application.

    photoUrl is derived from the stored photo reference and points at the
    static route that serves the uploaded file.
    """
    id: uuid.UUID = Field(description="System-assigned pass identifier")
    name: Optional[str] = None
    email: Optional[str] = None
    valid_till: Optional[date] = None
    photo: Optional[str] = Field(default=None, description="Stored photo filename")
    pass_type: Optional[str] = None
    route: Optional[str] = None
    college_name: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    price: Optional[float] = None
    created_at: datetime = Field(description="Submission timestamp (UTC)")

    @computed_field(alias="photoUrl")  # type: ignore[prop-decorator]
    @property
    def photo_url(self) -> Optional[str]:
        if not self.photo:
            return None
        return f"{UPLOADS_URL_PREFIX}/{self.photo}"


class BusPassCreateResponse(CamelModel):
    """Returned by POST /bus-pass with HTTP 201 Created."""
    message: str = Field(default="Bus pass created successfully")
    bus_pass: BusPassResponse
