"""
Audit logging model.

Tracks authentication events emitted on the host.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from character_authentication.models.base import Base, utc_now


class AuditLog(Base):
    """
    Audit log entry, registered on the host as ``Core$AuditLog``.

    Event types: authentication:authenticate, authentication:onboard
    """

    __tablename__ = "core_audit_logs"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    event_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    authenticator_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    authenticator_account_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    identity_id: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True, index=True)
    event_metadata: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, event={self.event_type}, identity_id={self.identity_id})>"
