"""
Core identity model.

An identity is the internal user record an authenticator account resolves to.
It carries no profile data; applications query what they need later.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from character_authentication.models.base import Base, utc_now


class Identity(Base):
    """
    Core identity, registered on the host as ``Core$Identity``.

    One identity can be linked to many authenticator accounts, e.g. a local
    password and an external identity provider.
    """

    __tablename__ = "core_identities"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    accounts: Mapped[list["Account"]] = relationship(
        "Account",
        back_populates="identity",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Identity(id={self.id})>"
