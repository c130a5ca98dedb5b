"""Sign-in Endpoint.

POST /api/signin with ``{"password": "..."}`` answers ``{"token": "..."}``.
The token is expected back in the ``token`` cookie on task routes.
"""

import logging

from fastapi import APIRouter, Depends, Request

from config.settings import Settings, get_settings, settings as app_settings
from limiter import limiter
from schemas import SignInRequest, TokenResponse
from utils.auth import create_token
from utils.error_handler import AuthConfigError, AuthError

logger = logging.getLogger("app")

router = APIRouter()


@router.post("/signin", response_model=TokenResponse)
@limiter.limit(app_settings.SIGNIN_RATE_LIMIT)
async def sign_in(
    request: Request,
    credentials: SignInRequest,
    settings: Settings = Depends(get_settings),
):
    """Exchange the configured password for a token."""
    if not settings.PASSWORD:
        logger.error("signin: authentication configuration is invalid: empty password")
        raise AuthConfigError()
    if not settings.SECRET_KEY:
        logger.error("signin: authentication configuration is invalid: empty secret key")
        raise AuthConfigError()

    if credentials.password != settings.PASSWORD:
        logger.warning(f"signin: incorrect password provided from {request.client.host if request.client else 'unknown'}")
        raise AuthError("incorrect password")

    token = create_token(settings)
    logger.info("signin: token issued")
    return TokenResponse(token=token)
