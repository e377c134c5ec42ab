"""Local authenticator (username/password).

Default authenticator for self-hosted deployments. Credentials are kept in
the authenticator's own ``Authentication$Local$Credential`` table and
passwords are hashed with bcrypt.
"""

from datetime import datetime
from http import HTTPStatus
from typing import Any, Dict, Tuple
from uuid import UUID, uuid4

import bcrypt
from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy import DateTime, String, Uuid, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, mapped_column
from starlette.exceptions import HTTPException

from character_authentication.domain.models import AuthenticatorAccount
from character_authentication.models.base import Base, utc_now
from .errors import AuthenticationError, AuthenticatorError
from .post import POSTAuthenticator


class Credential(Base):
    """Username/password credential owned by the local authenticator"""

    __tablename__ = "authentication_local_credentials"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<Credential(id={self.id}, username={self.username})>"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash
        return False


class LocalAuthenticator(POSTAuthenticator):
    """Username/password authentication.

    Routes (relative to the authenticator mount point):
        POST /          Log in with ``username`` and ``password``
        POST /register  Create a credential, then log in (``allow_registration``)

    Both routes accept a form or a JSON body.
    """

    async def read_credentials(self, request: Request) -> Tuple[str, str]:
        """Extract username and password from the request body.

        Raises:
            AuthenticatorError: 400 if the body is malformed or a field is missing
        """
        content_type = request.headers.get("content-type", "")
        try:
            if content_type.startswith("application/json"):
                data = await request.json()
            else:
                data = await request.form()
        except ValueError as e:
            raise AuthenticatorError(f"Malformed request body: {e}", HTTPStatus.BAD_REQUEST)
        except HTTPException as e:
            # multipart parsing errors
            raise AuthenticatorError(f"Malformed request body: {e.detail}", e.status_code)

        username = data.get("username") if hasattr(data, "get") else None
        password = data.get("password") if hasattr(data, "get") else None
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticatorError("username and password are required", HTTPStatus.BAD_REQUEST)

        username = username.strip().lower()
        if not username or not password:
            raise AuthenticatorError("username and password are required", HTTPStatus.BAD_REQUEST)
        return username, password

    async def authenticate(self, request: Request) -> AuthenticatorAccount:
        """Verify username and password against the stored credential.

        Raises:
            AuthenticationError: If credentials are invalid
        """
        username, password = await self.read_credentials(request)
        Credential = self.models["Credential"]

        async with self.character.database.session() as db:
            result = await db.execute(select(Credential).where(Credential.username == username))
            credential = result.scalar_one_or_none()

        if not credential or not verify_password(password, credential.password_hash):
            self.logger.warning(f"Login failed for username: {username}")
            raise AuthenticationError("Invalid username or password")

        self.logger.info(f"Credentials accepted for username: {username}")
        return AuthenticatorAccount(id=str(credential.id), username=credential.username)

    def extend(self) -> None:
        """Register the registration route when enabled.

        Registration needs onboarding: without it a new credential would have
        no identity to log in to.
        """
        if self.config.get("allow_registration") and self.config.get("onboard_known_accounts"):
            self.router.add_api_route(
                "/register",
                self.register,
                methods=["POST"],
                dependencies=[Depends(self.deps.session)],
            )

    async def register(self, request: Request) -> RedirectResponse:
        """Create a credential and its identity, then run the login pipeline"""
        try:
            username, password = await self.read_credentials(request)

            min_length = self.config.get("min_password_length", 8)
            if len(password) < min_length:
                raise AuthenticatorError(
                    f"Password must be at least {min_length} characters",
                    HTTPStatus.UNPROCESSABLE_ENTITY,
                )

            await self.create_credential(username, password)
        except Exception as e:
            return self.failure_response(e)

        return await self.receiver(request)

    async def create_credential(self, username: str, password: str) -> Dict[str, Any]:
        """Store a new credential and onboard its identity in one transaction.

        Raises:
            AuthenticatorError: 409 if the username is taken
        """
        Credential = self.models["Credential"]

        async with self.character.database.session() as db:
            credential = Credential(id=uuid4(), username=username, password_hash=hash_password(password))
            db.add(credential)
            account = AuthenticatorAccount(id=str(credential.id), username=username)
            identity = self.link_identity(db, account)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise AuthenticatorError(f"Username already registered: {username}", HTTPStatus.CONFLICT)
            record = self.identity_record(identity)

        self.logger.info(f"Registered credential for username: {username}")
        await self.announce_onboard(account, record)
        return {"id": credential.id, "username": credential.username, "identity": record}

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        return {
            "allow_registration": True,
            "min_password_length": 8,
        }

    @classmethod
    def models(cls) -> Dict[str, type]:
        """Credential table, created only when the local authenticator is enabled"""
        return {"Credential": Credential}
