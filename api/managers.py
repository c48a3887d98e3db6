"""
managers.py - Property manager accounts

In-memory directory of the people allowed to moderate reviews. Two accounts
are seeded at startup; more can be registered at runtime (not persisted).
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

import bcrypt

from src.errors import AuthenticationError, ConflictError, ValidationError

logger = logging.getLogger(__name__)

ROLES = ("admin", "manager")
BCRYPT_ROUNDS = 10


def hash_password(password: str) -> bytes:
    try:
        return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    except ValueError as e:
        # bcrypt rejects passwords over 72 bytes
        raise ValidationError(f"Invalid password: {e}") from e


def check_password(password: str, password_hash: bytes) -> bool:
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash)
    except ValueError:
        return False


@dataclass
class Manager:
    id: str
    email: str
    name: str
    role: str
    password_hash: bytes = field(repr=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self, include_created: bool = False) -> Dict[str, str]:
        d = {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role,
        }
        if include_created:
            d['createdAt'] = self.created_at.isoformat()
        return d


class ManagerDirectory:
    """Thread-safe in-memory account store."""

    def __init__(self, default_password: str, seed: bool = True):
        self._lock = threading.Lock()
        self._managers: List[Manager] = []
        if seed:
            password_hash = hash_password(default_password)
            self._managers = [
                Manager('1', 'admin@flexliving.com', 'Admin User', 'admin', password_hash),
                Manager('2', 'manager@flexliving.com', 'Property Manager', 'manager', password_hash),
            ]

    def find_by_email(self, email: str) -> Optional[Manager]:
        with self._lock:
            return next((m for m in self._managers if m.email == email), None)

    def get(self, manager_id: str) -> Optional[Manager]:
        with self._lock:
            return next((m for m in self._managers if m.id == manager_id), None)

    def authenticate(self, email: Optional[str], password: Optional[str]) -> Manager:
        if not email or not password:
            raise ValidationError("Email and password are required")

        manager = self.find_by_email(email)
        if manager is None or not check_password(password, manager.password_hash):
            raise AuthenticationError("Invalid credentials")
        return manager

    def register(self, email: Optional[str], password: Optional[str],
                 name: Optional[str], role: Optional[str] = None) -> Manager:
        if not email or not password or not name:
            raise ValidationError("Email, password, and name are required")
        role = role or "manager"
        if role not in ROLES:
            raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")

        password_hash = hash_password(password)
        with self._lock:
            if any(m.email == email for m in self._managers):
                raise ConflictError("Manager with this email already exists")
            manager = Manager(
                id=str(len(self._managers) + 1),
                email=email,
                name=name,
                role=role,
                password_hash=password_hash,
            )
            self._managers.append(manager)

        logger.info(f"Registered {role} account {email}")
        return manager
