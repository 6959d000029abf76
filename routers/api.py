from fastapi import APIRouter, Depends, HTTPException, Request

from constants import API_NAME
from credentials import TurnCredentialsClient, get_credentials_client
from errors import CredentialServiceError
from logging_config import get_logger
from schemas.api import ApiInfoResponse, TurnCredentialsResponse

logger = get_logger(__name__)

api_router = APIRouter(tags=["api"])


@api_router.get("/", response_model=ApiInfoResponse)
async def api_info():
    return ApiInfoResponse(api=API_NAME)


@api_router.get("/api/get-turn-credentials", response_model=TurnCredentialsResponse)
async def get_turn_credentials(
    request: Request,
    credentials_client: TurnCredentialsClient = Depends(get_credentials_client),
):
    """
    Proxy a token request to the credential-issuance service.

    Returns:
    - token: the issued token (iceServers, username, password, ttl, ...)

    Failures are not retried. A missing configuration is a 500, anything the
    upstream service does wrong is a 502.
    """
    client_host = request.client.host if request.client else "unknown"
    logger.info(f"TURN credentials request from {client_host}")

    if not credentials_client.configured:
        logger.error("TURN credentials requested but ACCOUNT_SID/AUTH_TOKEN are not set")
        raise HTTPException(status_code=500, detail="Credential service is not configured")

    try:
        token = await credentials_client.create_token()
    except CredentialServiceError as e:
        logger.warning(f"TURN credentials request from {client_host} failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to obtain TURN credentials")

    return TurnCredentialsResponse(token=token)
