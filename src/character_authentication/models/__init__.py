"""
Database models for authentication.

Core models shared by every authenticator:
- Identity (Core$Identity)
- Account (Authentication$Account)
- AuditLog (Core$AuditLog)

Authenticators declare their own models through ``models()``.
"""

from character_authentication.models.base import Base
from character_authentication.models.identity import Identity
from character_authentication.models.account import Account
from character_authentication.models.audit import AuditLog

__all__ = [
    "Base",
    "Identity",
    "Account",
    "AuditLog",
]
