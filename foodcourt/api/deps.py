"""
Request dependencies: identity context, role guards and the store.

Authentication happens at the perimeter. By the time a request reaches this
service the caller's id and role are carried in the ``X-User-Id`` and
``X-User-Role`` headers.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from foodcourt.database import get_db
from foodcourt.models import Role
from foodcourt.store import DocumentStore


@dataclass
class CallerContext:
    """Identity of the caller for the current request."""
    user_id: str
    role: Role


def get_store(db: AsyncSession = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def get_caller(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_role: Optional[str] = Header(None, alias="X-User-Role"),
) -> CallerContext:
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="No token provided. Please login first")
    try:
        role = Role(x_user_role.upper())
    except ValueError:
        raise HTTPException(status_code=403, detail="You don't have permission to access this")
    return CallerContext(user_id=x_user_id, role=role)


def require_roles(*roles: Role):
    """
    Build a dependency admitting only the given roles.

    Example:
        caller: CallerContext = Depends(require_roles(Role.ADMIN))
    """
    def dependency(caller: CallerContext = Depends(get_caller)) -> CallerContext:
        if caller.role not in roles:
            raise HTTPException(status_code=403, detail="You don't have permission to access this")
        return caller
    return dependency
