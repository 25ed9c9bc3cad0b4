"""
HTTP client for the user service.

Outcomes are returned as a UserLookup rather than raised, so the caller
decides how each one maps onto its own errors.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from app.core.config import Settings
from app.modules.users.schemas import UserResponse, UserServiceError

logger = logging.getLogger(__name__)


class LookupStatus(str, enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    ERROR = "error"


@dataclass
class UserLookup:
    """Result of a user lookup"""
    status: LookupStatus
    user: Optional[UserResponse] = None
    code: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def found(cls, user: UserResponse) -> "UserLookup":
        return cls(status=LookupStatus.FOUND, user=user)

    @classmethod
    def failed(cls, status: LookupStatus, code: Optional[str], message: str) -> "UserLookup":
        return cls(status=status, code=code, message=message)


class UserClient:
    """Client for the user service REST API"""

    def __init__(self, http_client: httpx.AsyncClient):
        self._client = http_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "UserClient":
        return cls(
            httpx.AsyncClient(
                base_url=settings.USER_SERVICE_URL.rstrip("/"),
                timeout=settings.USER_SERVICE_TIMEOUT,
            )
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_user_by_id(self, user_id: int) -> UserLookup:
        """Fetch a user profile by id"""
        try:
            response = await self._client.get(f"/v1/users/{user_id}")
        except httpx.HTTPError as e:
            logger.error(f"User service request failed for user {user_id}: {e}")
            return UserLookup.failed(LookupStatus.ERROR, None, str(e) or type(e).__name__)

        if response.is_success:
            try:
                return UserLookup.found(UserResponse.model_validate(response.json()))
            except ValueError as e:
                logger.error(f"Could not decode user {user_id} from user service: {e}")
                return UserLookup.failed(LookupStatus.ERROR, None, str(e))

        return self._decode_error(user_id, response)

    def _decode_error(self, user_id: int, response: httpx.Response) -> UserLookup:
        """Map an error status from the user service onto a lookup status"""
        try:
            body = UserServiceError.model_validate(response.json())
        except ValueError as e:
            logger.error(f"User service returned {response.status_code} with undecodable body: {e}")
            return UserLookup.failed(LookupStatus.ERROR, None, str(e))

        if response.status_code == 404:
            code = body.code or "NOT_FOUND"
            return UserLookup.failed(
                LookupStatus.NOT_FOUND, code, body.message or f"User not found with id: {user_id}"
            )
        if response.status_code == 403:
            code = body.code or "VALIDATION_EXCEPTION"
            return UserLookup.failed(
                LookupStatus.VALIDATION, code, body.message or f"User {user_id} failed validation"
            )

        code = body.code or "CLIENT_EXCEPTION"
        logger.warning(f"User service returned {response.status_code} for user {user_id}: {code}")
        return UserLookup.failed(LookupStatus.ERROR, code, body.message or code)
