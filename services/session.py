# services/session.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from flask_jwt_extended import get_jwt, get_jwt_identity


@dataclass(frozen=True)
class SessionContext:
    """Who is calling. Built once per request and handed to services."""
    user_id: int
    roles: List[str] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles


def current_session() -> SessionContext | None:
    """
    Read the verified JWT of the current request.
    identity is the user id as a string (see routes/auth.py).
    """
    ident = get_jwt_identity()
    if ident is None:
        return None
    try:
        uid = int(ident)
    except (TypeError, ValueError):
        return None
    claims = get_jwt() or {}
    roles = claims.get("roles") or claims.get("role") or []
    if isinstance(roles, str):
        roles = [roles]
    return SessionContext(user_id=uid, roles=[str(r) for r in roles])
