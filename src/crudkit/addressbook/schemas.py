"""
Address-book wire schemas.

The internal ``id`` is not part of any schema.  ``public_id`` is optional on
input: the service assigns it on create, and update requires it.

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ContactSchema(BaseModel):
    """A contact as seen by API clients."""

    model_config = ConfigDict(from_attributes=True)

    public_id: str | None = Field(default=None, description="Opaque public identifier")
    full_name: str = Field(min_length=1, description="Display name")
    email: str | None = Field(default=None, description="E-mail address")
    phone: str | None = Field(default=None, description="Phone number")
    address: str | None = Field(default=None, description="Postal address")


class TagSchema(BaseModel):
    """A tag as seen by API clients."""

    model_config = ConfigDict(from_attributes=True)

    public_id: str | None = Field(default=None, description="Opaque public identifier")
    name: str = Field(min_length=1, description="Tag label")
