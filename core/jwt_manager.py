"""
JWT Token Manager for the membership platform

Verifies the access tokens Supabase Auth issues to signed-in members
(HS256, audience "authenticated"). Token creation is kept for local
tooling and tests that need a token the services will accept.
"""

import uuid
import logging
from typing import Dict, Any, Optional
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass

import jwt

from core.config import AuthConfig, get_settings

logger = logging.getLogger(__name__)


@dataclass
class TokenClaims:
    """Claims carried by a Supabase access token"""
    user_id: str
    email: Optional[str] = None
    role: str = "authenticated"


class JWTManager:
    """
    Supabase-compatible JWT manager

    Features:
    - Signature, expiry and audience verification of member tokens
    - Token issuance with the same claim layout (sub, email, role, aud)
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: str = "HS256",
        audience: str = "authenticated",
        access_token_expiry: int = 3600,  # 1 hour
    ):
        """
        Initialize JWT Manager

        Args:
            secret_key: Supabase project JWT secret
            algorithm: JWT algorithm (default: HS256)
            audience: Expected "aud" claim
            access_token_expiry: Access token expiry in seconds
        """
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.audience = audience
        self.access_token_expiry = access_token_expiry

        if not secret_key:
            logger.warning("No SUPABASE_JWT_SECRET configured - every bearer token will be rejected")

    @classmethod
    def from_config(cls, config: Optional[AuthConfig] = None) -> "JWTManager":
        config = config or get_settings().auth
        return cls(
            secret_key=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            audience=config.jwt_audience,
        )

    def create_access_token(
        self,
        claims: TokenClaims,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create an access token

        Args:
            claims: Token claims
            expires_delta: Custom expiration time (negative values produce an expired token)

        Returns:
            JWT access token string
        """
        if not self.secret_key:
            raise ValueError("Cannot sign tokens without a secret")

        now = datetime.now(tz=timezone.utc)
        expires = now + (expires_delta if expires_delta is not None else timedelta(seconds=self.access_token_expiry))

        payload = {
            "sub": claims.user_id,
            "aud": self.audience,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
            "jti": str(uuid.uuid4()),
            "email": claims.email,
            "role": claims.role,
        }

        # Remove None values
        payload = {k: v for k, v in payload.items() if v is not None}

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token

        Args:
            token: JWT token string

        Returns:
            Dictionary with verification result and payload
        """
        if not self.secret_key:
            return {"valid": False, "error": "Token verification is not configured"}

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"require": ["sub", "exp"]},
            )

            return {
                "valid": True,
                "payload": payload,
                "user_id": payload.get("sub"),
                "email": payload.get("email"),
                "expires_at": datetime.fromtimestamp(payload.get("exp", 0), tz=timezone.utc),
            }

        except jwt.ExpiredSignatureError:
            return {
                "valid": False,
                "error": "Token has expired"
            }
        except jwt.InvalidAudienceError:
            return {
                "valid": False,
                "error": "Invalid token audience"
            }
        except jwt.InvalidTokenError as e:
            return {
                "valid": False,
                "error": f"Invalid token: {str(e)}"
            }

