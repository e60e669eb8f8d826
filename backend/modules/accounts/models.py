"""
Accounts module data models.

Request and response shapes exchanged with the account service. Only the
fields this layer reads are modelled; anything else is passed through.
"""

from typing import Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from modules.profile.models import User


class ServiceResponse(BaseModel):
    """Envelope common to every account service response."""

    success: bool = Field(default=False)
    error: Optional[str] = Field(None, description="Error message from the service")
    message: Optional[str] = Field(None, description="Informational message")

    model_config = {"extra": "allow"}


class LoginResponse(ServiceResponse):
    user: Optional[User] = None


class ProfileResponse(ServiceResponse):
    user: Optional[User] = None


class UploadResponse(ServiceResponse):
    url: Optional[str] = None


class ProfileUpdate(BaseModel):
    """
    Fields sent to the profile endpoint on save.

    Unset fields are omitted from the request body.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    phone: Optional[str] = None
    timezone: Optional[str] = None
    language: Optional[str] = None
    currency: Optional[str] = None
    currency_symbol: Optional[str] = None
    currency_code: Optional[str] = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)
