"""
Authenticator account link.

Links an account known to one authenticator to a core identity.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from character_authentication.models.base import Base, utc_now


class Account(Base):
    """
    Authenticator account, registered on the host as ``Authentication$Account``.

    An external account id is only unique within its authenticator, so the
    pair (authenticator_account_id, authenticator_name) is the natural key.
    """

    __tablename__ = "authentication_accounts"
    __table_args__ = (
        UniqueConstraint(
            "authenticator_account_id",
            "authenticator_name",
            name="uq_authentication_accounts_authenticator",
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    identity_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("core_identities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # External id as returned by the authenticator, stored as text
    authenticator_account_id: Mapped[str] = mapped_column(String(255), nullable=False)
    authenticator_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    identity: Mapped["Identity"] = relationship("Identity", back_populates="accounts")

    def __repr__(self) -> str:
        return (
            f"<Account(authenticator={self.authenticator_name}, "
            f"account_id={self.authenticator_account_id}, identity_id={self.identity_id})>"
        )
