"""
Profile Repository

Read-only access to member profiles and their committee positions,
used to build the authenticated identity of a request.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from core.postgres_client import PostgresClient

logger = logging.getLogger(__name__)


class ProfileRepository:
    """Profiles and committee permissions - PostgreSQL (Async)"""

    def __init__(self, db: PostgresClient):
        self.db = db
        self.profiles_table = "profiles"
        self.members_table = "committee_members"
        self.positions_table = "committee_positions"

    async def get_profile_by_user_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the profile of an auth user"""
        try:
            query = f'''
                SELECT id, user_id, organization_id, role, email
                FROM {self.profiles_table}
                WHERE user_id = $1
            '''
            async with self.db:
                row = await self.db.query_row(query, [user_id])
            if not row:
                return None
            return {
                "id": str(row["id"]),
                "user_id": str(row["user_id"]),
                "organization_id": str(row["organization_id"]) if row.get("organization_id") else None,
                "role": row.get("role") or "member",
                "email": row.get("email"),
            }
        except Exception as e:
            logger.error(f"Error getting profile for user {user_id}: {e}")
            raise

    async def get_position_permissions(self, profile_id: str) -> List[Optional[List[str]]]:
        """Permission lists of every committee position the profile holds"""
        try:
            query = f'''
                SELECT cp.permissions
                FROM {self.members_table} cm
                JOIN {self.positions_table} cp ON cp.id = cm.position_id
                WHERE cm.profile_id = $1 AND cm.position_id IS NOT NULL
            '''
            async with self.db:
                rows = await self.db.query(query, [profile_id])
            return [self._permission_list(row.get("permissions")) for row in rows]
        except Exception as e:
            logger.error(f"Error getting committee permissions for profile {profile_id}: {e}")
            raise

    @staticmethod
    def _permission_list(value: Any) -> Optional[List[str]]:
        # text[] arrives as a list, jsonb as its JSON text
        if not value:
            return None
        if isinstance(value, str):
            value = json.loads(value)
        return [str(p) for p in value]


__all__ = ["ProfileRepository"]
