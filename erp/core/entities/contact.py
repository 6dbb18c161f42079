"""Contact (client / supplier) entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ContactType(str, Enum):
    """Whether a contact buys from us or sells to us."""

    CLIENT = "client"
    SUPPLIER = "supplier"


class Contact(BaseModel):
    """A counterparty referenced by document headers."""

    id: str | None = None
    name: str
    company: str | None = None
    contact_type: ContactType
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    # Moroccan business identifiers
    ice: str | None = None
    if_number: str | None = None
    rc: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
