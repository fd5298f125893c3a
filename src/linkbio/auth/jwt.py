"""JWT token creation and verification.

Tokens are stateless HS256 JWTs carrying the user id (sub) and username.
There is no server-side revocation: a token is valid while its signature
checks out and exp is in the future.

TokenService is built once from Settings and shared read-only by every
request.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt


class TokenError(Exception):
    """Raised when token verification fails."""


class TokenMalformedError(TokenError):
    """Not a decodable JWT, or required claims missing/invalid."""


class TokenSignatureError(TokenError):
    """Signature does not match the server secret."""


class TokenExpiredError(TokenError):
    """exp is in the past."""


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated user making the request."""

    user_id: int
    username: str


class TokenService:
    """Issues and verifies access tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: int, username: str, now: datetime | None = None) -> str:
        """Create a signed access token for a verified user."""
        issued = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "username": username,
            "type": "access",
            "iat": issued,
            "exp": issued + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> CurrentIdentity:
        """Verify and decode a token.

        Raises a TokenError subclass describing what failed.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidSignatureError:
            raise TokenSignatureError("Token signature mismatch")
        except jwt.InvalidTokenError as e:
            raise TokenMalformedError(f"Invalid token: {e}")

        if payload.get("type") != "access":
            raise TokenMalformedError("Not an access token")
        username = payload.get("username")
        if not isinstance(username, str):
            raise TokenMalformedError("Token has no username claim")
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            raise TokenMalformedError("Token subject is not a user id")

        return CurrentIdentity(user_id=user_id, username=username)
