"""
User Directory

Read-only access to account records. Accounts and credentials are managed
by the identity service; this package only looks them up.
"""

from foodcourt.core.errors import NotFoundError
from foodcourt.models import User
from foodcourt.store import DocumentStore


class UserDirectory:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_profile(self, user_id: str) -> User:
        user = await self.store.find_by_id(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self) -> list[User]:
        """Every account, newest first (admin view)."""
        return await self.store.find(User, order_by=[User.created_at.desc()])
