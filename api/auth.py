"""
auth.py - JWT bearer authentication for manager-only endpoints

Missing token -> 401, invalid or expired token -> 403, wrong role -> 403.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import BaseModel

from api.managers import Manager
from src.errors import AuthenticationError, AuthorizationError
from src.settings import Settings

security = HTTPBearer(auto_error=False)

MANAGER_ROLES = ("admin", "manager")


class TokenUser(BaseModel):
    """Identity carried by an access token."""
    id: str
    email: str
    role: str


def create_access_token(manager: Manager, settings: Settings,
                        expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.jwt_expire_hours)
    )
    payload = {
        'sub': manager.id,
        'id': manager.id,
        'email': manager.email,
        'role': manager.role,
        'exp': expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> TokenUser:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return TokenUser(id=payload['id'], email=payload['email'], role=payload['role'])
    except (JWTError, KeyError):
        raise AuthorizationError("Invalid or expired token")


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenUser:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    settings = request.app.state.services.settings
    return decode_access_token(credentials.credentials, settings)


def require_roles(roles: List[str]):
    """Dependency factory: caller must hold one of roles."""

    def checker(user: TokenUser = Depends(get_current_user)) -> TokenUser:
        if user.role not in roles:
            label = "Admin" if roles == ["admin"] else "Manager"
            raise AuthorizationError(f"{label} access required")
        return user

    return checker


require_manager = require_roles(list(MANAGER_ROLES))
require_admin = require_roles(["admin"])
