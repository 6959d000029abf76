from typing import Any, Dict, Optional

import httpx

from constants import ACCOUNT_SID, AUTH_TOKEN, TURN_API_BASE_URL, TURN_API_TIMEOUT
from errors import CredentialServiceError
from logging_config import get_logger
from schemas.api import TurnToken

logger = get_logger(__name__)


class TurnCredentialsClient:
    """Fetches short-lived TURN credentials from Twilio's Tokens API.

    The REST body is reshaped to the camelCase fields the Twilio SDKs
    expose (iceServers, accountSid, ...); values are passed through as-is.
    """

    def __init__(
        self,
        account_sid: Optional[str],
        auth_token: Optional[str],
        base_url: str = TURN_API_BASE_URL,
        timeout: float = TURN_API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token)

    def tokens_url(self) -> str:
        return f"{self.base_url}/2010-04-01/Accounts/{self.account_sid}/Tokens.json"

    async def create_token(self) -> Dict[str, Any]:
        if not self.configured:
            raise CredentialServiceError("Credential service is not configured")

        url = self.tokens_url()
        logger.debug(f"Requesting TURN token from {url}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(url, auth=(self.account_sid, self.auth_token))
                resp.raise_for_status()
                token = TurnToken.model_validate(resp.json()).model_dump(by_alias=True, exclude_none=True)
        except httpx.HTTPStatusError as exc:
            logger.error(f"Credential service returned {exc.response.status_code}")
            raise CredentialServiceError(
                f"Credential service returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except (httpx.RequestError, ValueError) as exc:
            logger.error(f"Credential service request failed: {exc}", exc_info=True)
            raise CredentialServiceError(f"Credential service request failed: {exc}") from exc

        logger.info("TURN token issued")
        return token


def get_credentials_client() -> TurnCredentialsClient:
    return TurnCredentialsClient(ACCOUNT_SID, AUTH_TOKEN)
