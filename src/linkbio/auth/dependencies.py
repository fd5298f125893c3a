"""FastAPI auth dependencies.

authenticate() is a plain function: it takes the raw Authorization
header and returns a CurrentIdentity or raises. get_current_user wraps it
as a Depends() for protected routes, so a rejected request never reaches
the handler.

Every failure surfaces to the client as the same 401; the precise reason
is only logged.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from linkbio.auth.jwt import CurrentIdentity, TokenError, TokenService
from linkbio.errors import AuthenticationError

logger = structlog.get_logger()


class MissingCredentialsError(AuthenticationError):
    """No Authorization header."""


class MalformedCredentialsError(AuthenticationError):
    """Authorization header is not 'Bearer <token>'."""


class InvalidCredentialsError(AuthenticationError):
    """Token failed verification (bad signature, expired, garbage)."""


def authenticate(authorization: Optional[str], tokens: TokenService) -> CurrentIdentity:
    """Resolve an Authorization header value to the caller's identity."""
    if not authorization:
        raise MissingCredentialsError()

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise MalformedCredentialsError()

    try:
        return tokens.verify(parts[1])
    except TokenError as e:
        raise InvalidCredentialsError() from e


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_user(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> CurrentIdentity:
    """Extract the current identity (required — 401 if missing or invalid)."""
    try:
        return authenticate(authorization, tokens)
    except AuthenticationError as e:
        logger.info(
            "auth.rejected",
            reason=type(e).__name__,
            detail=str(e.__cause__) if e.__cause__ else None,
        )
        raise
