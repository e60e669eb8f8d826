"""
Account service implementations.

Provides both an HTTP client for the real account service and an
in-memory implementation (for testing and development) seeded with the
demo account.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings
from shared.exceptions import ValidationError
from modules.profile.models import User

from .exceptions import ServiceError
from .interfaces import IAccountService
from .models import LoginResponse, ProfileResponse, ServiceResponse, UploadResponse
from .validation import validate_password_strength

logger = logging.getLogger(__name__)


DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "password123"
DEMO_NAME = "Demo User"


class HttpAccountService(IAccountService):
    """
    Account service client over HTTP.

    Endpoints are relative to ``base_url``. A shared AsyncClient can be
    injected; otherwise a short-lived one is opened per call.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    async def login(self, email: str, password: str) -> User:
        data = await self._request(
            "POST",
            "/auth/login",
            operation="login",
            fallback="Invalid email or password",
            json={"email": email, "password": password},
        )
        response = self._parse(LoginResponse, data, "login")
        if not response.success or response.user is None:
            raise ServiceError(response.error or "Invalid email or password", operation="login")
        return response.user

    async def get_profile(self, user_id: str) -> Optional[User]:
        try:
            data = await self._request(
                "GET",
                "/user/profile",
                operation="get_profile",
                fallback="Failed to load profile",
                params={"userId": user_id},
            )
        except ServiceError as e:
            if e.status_code == 404:
                return None
            raise
        return self._parse(ProfileResponse, data, "get_profile").user

    async def update_profile(self, user_id: str, fields: Mapping[str, Any]) -> User:
        data = await self._request(
            "PUT",
            "/user/profile",
            operation="update_profile",
            fallback="Failed to update profile",
            json={"userId": user_id, **fields},
        )
        response = self._parse(ProfileResponse, data, "update_profile")
        if response.user is None:
            raise ServiceError("Failed to update profile", operation="update_profile")
        return response.user

    async def change_password(self, user_id: str, current: str, new: str) -> Optional[str]:
        data = await self._request(
            "PUT",
            "/user/password",
            operation="change_password",
            fallback="Failed to update password",
            json={"userId": user_id, "currentPassword": current, "newPassword": new},
        )
        return self._parse(ServiceResponse, data, "change_password").message

    async def delete_account(self, user_id: str, password: str) -> None:
        await self._request(
            "DELETE",
            "/user/delete",
            operation="delete_account",
            fallback="Failed to delete account",
            json={"userId": user_id, "password": password},
        )

    async def reset_demo(self, email: str) -> None:
        await self._request(
            "POST",
            "/demo/reset",
            operation="reset_demo",
            fallback="Failed to reset demo data",
            json={"email": email},
        )

    async def upload_avatar(
        self,
        user_id: str,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> str:
        data = await self._request(
            "POST",
            "/upload",
            operation="upload_avatar",
            fallback="Failed to upload file",
            data={"userId": user_id},
            files={"file": (filename, content, content_type)},
        )
        response = self._parse(UploadResponse, data, "upload_avatar")
        if not response.url:
            raise ServiceError("Failed to upload file", operation="upload_avatar")
        return response.url

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        fallback: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Send a request and return the decoded JSON body.

        Raises:
            ServiceError: On transport failure, an error status, or success: false
        """
        url = f"{self._base_url}{path}"
        try:
            if self._client is not None:
                response = await self._client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"Account service {operation} failed: {e}")
            raise ServiceError(operation=operation) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error or data.get("success") is False:
            raise ServiceError(
                data.get("error") or fallback,
                status_code=response.status_code,
                operation=operation,
            )
        return data

    def _parse(self, model: type, data: dict[str, Any], operation: str):
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ServiceError(
                "Unexpected response from account service",
                operation=operation,
            ) from e


@dataclass
class _Account:
    user: User
    password: str


class InMemoryAccountService(IAccountService):
    """
    Account service kept in memory.

    For testing and development. Seeded with the demo account and records
    every call it receives in ``calls`` as (operation, arguments).
    """

    def __init__(self, seed_demo: bool = True, demo_email: str = DEMO_EMAIL):
        self._accounts: dict[str, _Account] = {}
        self._demo_email = demo_email
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.demo_resets = 0
        if seed_demo:
            self.register(demo_email, DEMO_PASSWORD, DEMO_NAME, is_demo=True, user_id="demo-user")

    def register(
        self,
        email: str,
        password: str,
        name: str,
        is_demo: bool = False,
        user_id: Optional[str] = None,
    ) -> User:
        """Create an account directly, bypassing the request log."""
        user = User(id=user_id or str(uuid.uuid4()), name=name, email=email, is_demo=is_demo)
        self._accounts[user.id] = _Account(user=user, password=password)
        return user

    def call_count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    async def login(self, email: str, password: str) -> User:
        self.calls.append(("login", {"email": email}))
        account = self._find_by_email(email)
        if account is None or account.password != password:
            raise ServiceError("Invalid email or password", status_code=401, operation="login")
        return account.user

    async def get_profile(self, user_id: str) -> Optional[User]:
        self.calls.append(("get_profile", {"user_id": user_id}))
        account = self._accounts.get(user_id)
        return account.user if account else None

    async def update_profile(self, user_id: str, fields: Mapping[str, Any]) -> User:
        self.calls.append(("update_profile", {"user_id": user_id, "fields": dict(fields)}))
        account = self._require(user_id, "update_profile")
        try:
            account.user = User.model_validate(
                {**account.user.to_record(), **User.record_keys(fields)}
            )
        except PydanticValidationError as e:
            raise ServiceError("Invalid profile data", status_code=400, operation="update_profile") from e
        return account.user

    async def change_password(self, user_id: str, current: str, new: str) -> Optional[str]:
        self.calls.append(("change_password", {"user_id": user_id}))
        account = self._require(user_id, "change_password")
        try:
            validate_password_strength(new)
        except ValidationError as e:
            raise ServiceError(e.message, status_code=400, operation="change_password") from e
        if account.password != current:
            raise ServiceError("Current password is incorrect", status_code=401, operation="change_password")
        account.password = new
        return "Password updated successfully"

    async def delete_account(self, user_id: str, password: str) -> None:
        self.calls.append(("delete_account", {"user_id": user_id}))
        account = self._require(user_id, "delete_account")
        if account.password != password:
            raise ServiceError("Password is incorrect", status_code=401, operation="delete_account")
        del self._accounts[user_id]

    async def reset_demo(self, email: str) -> None:
        self.calls.append(("reset_demo", {"email": email}))
        if email != self._demo_email:
            raise ServiceError("Unauthorized", status_code=403, operation="reset_demo")
        self.demo_resets += 1

    async def upload_avatar(
        self,
        user_id: str,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> str:
        self.calls.append(("upload_avatar", {"user_id": user_id, "filename": filename}))
        self._require(user_id, "upload_avatar")
        if not content_type.startswith("image/"):
            raise ServiceError("Only image uploads are allowed", status_code=400, operation="upload_avatar")
        return f"/uploads/{user_id}/{filename}"

    def _find_by_email(self, email: str) -> Optional[_Account]:
        email = email.strip().lower()
        for account in self._accounts.values():
            if account.user.email.lower() == email:
                return account
        return None

    def _require(self, user_id: str, operation: str) -> _Account:
        account = self._accounts.get(user_id)
        if account is None:
            raise ServiceError("User not found", status_code=404, operation=operation)
        return account


def get_account_service(settings: Settings) -> IAccountService:
    """Create the HTTP account service configured by settings."""
    return HttpAccountService(
        settings.account_service_url,
        timeout=settings.account_service_timeout,
    )
