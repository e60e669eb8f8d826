"""
Account service interface.

The session layer treats the account service as an external collaborator
consulted over request/response calls. Depend on IAccountService so tests
and development can swap in the in-memory implementation.
"""

from typing import Any, Mapping, Protocol, Optional, runtime_checkable

from modules.profile.models import User


@runtime_checkable
class IAccountService(Protocol):
    """
    Interface for account service operations.

    Every method raises ServiceError when the call fails or the service
    answers with success: false.
    """

    async def login(self, email: str, password: str) -> User:
        """
        Verify credentials.

        Returns:
            The user record for the account
        """
        ...

    async def get_profile(self, user_id: str) -> Optional[User]:
        """Fetch the current user record, or None if the user is unknown."""
        ...

    async def update_profile(self, user_id: str, fields: Mapping[str, Any]) -> User:
        """
        Persist profile fields.

        Returns:
            The updated user record as the service now stores it
        """
        ...

    async def change_password(self, user_id: str, current: str, new: str) -> Optional[str]:
        """Change the password. Returns the service's confirmation message."""
        ...

    async def delete_account(self, user_id: str, password: str) -> None:
        """Delete the account and all its data."""
        ...

    async def reset_demo(self, email: str) -> None:
        """Restore the demo account's data to its seeded state."""
        ...

    async def upload_avatar(
        self,
        user_id: str,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """Upload an image. Returns its public URL."""
        ...
