"""Bearer token verification.

Access tokens are HS256 JWTs issued by the auth provider; the ``sub`` claim
is the user ID every store query is scoped to.
"""

from typing import List, Optional

from fastapi import HTTPException, Request
from jose import JWTError, jwt

from .errors import AuthorizationError, ConfigurationError
from .utils.logger import get_app_logger


class TokenVerifier:
    """Resolve a user ID from an ``Authorization: Bearer`` header."""

    def __init__(self, secret: Optional[str], audience: Optional[str] = "authenticated",
                 algorithms: Optional[List[str]] = None):
        self.secret = secret
        self.audience = audience
        self.algorithms = algorithms or ["HS256"]
        self.logger = get_app_logger()

    def verify(self, authorization: Optional[str]) -> str:
        """
        Verify the bearer credential and return the caller's user ID.

        Args:
            authorization: Raw Authorization header value

        Returns:
            User ID from the token's ``sub`` claim

        Raises:
            AuthorizationError: If the header is missing or the token is invalid
            ConfigurationError: If no verification secret is configured
        """
        if not authorization:
            raise AuthorizationError("No authorization header")

        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthorizationError("Unauthorized")

        if not self.secret:
            raise ConfigurationError("JWT secret not configured")

        try:
            claims = jwt.decode(
                token.strip(),
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                options={"verify_aud": bool(self.audience)},
            )
        except JWTError as e:
            self.logger.warning(f"Token verification failed: {e}")
            raise AuthorizationError("Unauthorized") from e

        user_id = claims.get("sub")
        if not user_id:
            raise AuthorizationError("Unauthorized")
        return user_id


def get_token_verifier(request: Request) -> TokenVerifier:
    """Dependency to get the token verifier."""
    verifier = getattr(request.app.state, "token_verifier", None)
    if verifier is None:
        raise HTTPException(status_code=500, detail="Token verifier not initialized")
    return verifier


def get_current_user_id(request: Request) -> str:
    """Dependency resolving the caller for the REST history routes."""
    verifier = get_token_verifier(request)
    try:
        return verifier.verify(request.headers.get("Authorization"))
    except AuthorizationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
