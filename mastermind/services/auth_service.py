"""
Authentication Service

Verifies HS256 JWTs issued by the identity provider and maps their claims
to the user identity the game services work with. Issuing tokens is only
meant for development and tests.
"""

import jwt
import datetime
from typing import Optional, Dict, Any


class TokenService:
    """
    Token verification for HTTP and WebSocket requests.

    The user id comes from the ``sub`` claim and the display name from
    ``preferred_username``.
    """

    ALGORITHM = "HS256"

    def __init__(self, jwt_secret: str, expiration_days: int = 7):
        """
        Args:
            jwt_secret: Shared HMAC secret
            expiration_days: Lifetime of tokens created by issue_token
        """
        if not jwt_secret:
            raise ValueError("JWT secret is required")
        self.jwt_secret = jwt_secret
        self.expiration_days = expiration_days

    def issue_token(self, user_id: str, username: Optional[str] = None) -> str:
        """
        Create a signed token for a user.

        Args:
            user_id: Value of the sub claim
            username: Value of the preferred_username claim

        Returns:
            Encoded JWT
        """
        now = datetime.datetime.now(datetime.timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + datetime.timedelta(days=self.expiration_days)
        }
        if username:
            payload["preferred_username"] = username
        return jwt.encode(payload, self.jwt_secret, algorithm=self.ALGORITHM)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string

        Returns:
            Dictionary with success status and user data or error
        """
        try:
            if not token:
                return {"success": False, "error": "Token is required"}

            payload = jwt.decode(token, self.jwt_secret, algorithms=[self.ALGORITHM])
            user_id = payload.get("sub")

            if not user_id:
                return {"success": False, "error": "Invalid token payload"}

            return {
                "success": True,
                "user": {
                    "id": str(user_id),
                    "username": payload.get("preferred_username")
                }
            }

        except jwt.ExpiredSignatureError:
            return {"success": False, "error": "Token has expired"}
        except jwt.InvalidTokenError:
            return {"success": False, "error": "Invalid token"}


# Global service instance
_auth_service = None


def get_auth_service() -> Optional[TokenService]:
    """Get the global auth service instance."""
    return _auth_service


def initialize_auth_service(jwt_secret: str, expiration_days: int = 7) -> TokenService:
    """Initialize the global auth service instance."""
    global _auth_service
    _auth_service = TokenService(jwt_secret, expiration_days)
    return _auth_service
