"""
Authentication for the membership microservices

Turns the bearer credential of a request into an AuthContext: the Supabase
JWT is verified, its subject is resolved to a profile, and the profile's
committee permissions are aggregated. The AuthContext is passed explicitly
to every service call.

Usage in a service's main.py:

    async def get_auth_context(authorization: Optional[str] = Header(None)) -> AuthContext:
        return await factory.auth_resolver.resolve(authorization)

    @app.post("/api/v1/things")
    async def create_thing(auth: AuthContext = Depends(get_auth_context)):
        auth.require_access(organization_id)
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Protocol

from core.jwt_manager import JWTManager
from core.permissions import (
    ROLE_ADMIN,
    ROLE_SUPER_ADMIN,
    Permission,
    aggregate_permissions,
    has_permission,
    is_admin,
)

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Missing, malformed, expired or badly signed credential"""

    def __init__(self, message: str = "Unauthenticated"):
        super().__init__(message)


class AuthorizationError(Exception):
    """Authenticated caller may not act on the target organization"""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller of one request"""
    user_id: str
    profile_id: str
    role: str
    organization_id: Optional[str] = None
    email: Optional[str] = None
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_super_admin(self) -> bool:
        return self.role == ROLE_SUPER_ADMIN

    @property
    def is_admin(self) -> bool:
        return is_admin(self.role, self.permissions)

    def has_permission(self, permission: str) -> bool:
        return has_permission(self.role, self.permissions, permission)

    def can_manage(self, organization_id: Optional[str]) -> bool:
        """
        Organization access rule.

        Super admins may act on any organization. Everyone else must be an
        admin of the organization; committee permissions do not count.
        """
        if self.is_super_admin:
            return True
        if not organization_id or not self.organization_id:
            return False
        if str(self.organization_id) != str(organization_id):
            return False
        return self.role == ROLE_ADMIN

    def require_access(self, organization_id: Optional[str], message: str = "Forbidden") -> None:
        if not self.can_manage(organization_id):
            logger.warning(
                f"Access denied: user={self.user_id} role={self.role} org={organization_id}"
            )
            raise AuthorizationError(message)


class ProfileLookup(Protocol):
    """What the resolver needs from the profile repository"""

    async def get_profile_by_user_id(self, user_id: str) -> Optional[dict]:
        ...

    async def get_position_permissions(self, profile_id: str) -> list:
        ...


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token of an 'Authorization: Bearer <token>' header"""
    if not authorization:
        raise AuthenticationError("Unauthenticated")
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Unauthenticated")
    return token.strip()


class AuthResolver:
    """Resolves bearer credentials to AuthContext values"""

    def __init__(self, jwt_manager: JWTManager, profiles: ProfileLookup):
        self.jwt_manager = jwt_manager
        self.profiles = profiles

    async def resolve(self, authorization: Optional[str]) -> AuthContext:
        """
        Authenticate a request.

        Raises:
            AuthenticationError: credential missing or invalid (401)
            AuthorizationError: valid user without a profile (403)
        """
        token = extract_bearer_token(authorization)

        result = self.jwt_manager.verify_token(token)
        if not result.get("valid"):
            logger.info(f"Rejected bearer token: {result.get('error')}")
            raise AuthenticationError("Unauthenticated")

        user_id = result["user_id"]
        profile = await self.profiles.get_profile_by_user_id(user_id)
        if not profile:
            logger.warning(f"No profile for authenticated user {user_id}")
            raise AuthorizationError("Forbidden")

        position_permissions = []
        if profile["role"] not in ("admin", ROLE_SUPER_ADMIN):
            position_permissions = await self.profiles.get_position_permissions(profile["id"])

        return AuthContext(
            user_id=user_id,
            profile_id=profile["id"],
            role=profile["role"],
            organization_id=profile.get("organization_id"),
            email=profile.get("email") or result.get("email"),
            permissions=aggregate_permissions(profile["role"], position_permissions),
        )


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "AuthContext",
    "AuthResolver",
    "Permission",
    "extract_bearer_token",
]
