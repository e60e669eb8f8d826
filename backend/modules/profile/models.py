"""
Profile module data models.

These models define the session identity held in the durable store and
exposed to other modules through the interface.
"""

from typing import Any, Mapping, Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """
    The authenticated user record.

    Stored in the durable store with camelCase keys. Extra fields returned
    by the account service (phone, timezone, currency...) are kept so a
    profile merge never drops data.
    """

    id: str = Field(..., min_length=1, description="Stable, unique user ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., min_length=1, description="Email address, as the account service returned it")
    avatar: Optional[str] = Field(None, description="Avatar URL")
    is_demo: bool = Field(
        default=False,
        alias="isDemo",
        description="Resettable sandbox account",
    )

    model_config = {
        "populate_by_name": True,
        "extra": "allow",
    }

    def to_record(self) -> dict[str, Any]:
        """Serialize to the stored (camelCase) representation."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def record_keys(cls, partial: Mapping[str, Any]) -> dict[str, Any]:
        """Rename snake_case field names in a partial update to stored keys."""
        renamed: dict[str, Any] = {}
        for key, value in partial.items():
            field = cls.model_fields.get(key)
            renamed[field.alias if field and field.alias else key] = value
        return renamed


class Session(BaseModel):
    """
    An authenticated identity: the user record plus its opaque token.

    Present iff both parts are present.
    """

    user: User
    token: str = Field(..., min_length=1, description="Opaque session token")

    model_config = {"frozen": True}

    @property
    def user_id(self) -> str:
        return self.user.id
