"""Base authenticator.

This module defines the contract every authenticator implements. An
authenticator handles one authentication mechanism: it exposes routes on its
own router, validates credentials in ``authenticate`` and maps the resulting
account to a core identity before establishing a session.
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from character_authentication.api.session import AuthenticatorDeps, set_session
from character_authentication.character import Character
from character_authentication.database import authenticator_model_prefix
from character_authentication.domain.models import (
    AuthenticatedUser,
    AuthenticatorAccount,
    AuthenticatorRef,
)
from .errors import AuthenticatorError, IdentityNotFoundError, status_reason

SEE_OTHER = 303

REDIRECT_OPTIONS = ("success_redirect", "deferred_redirect", "failure_redirect")


class BaseAuthenticator:
    """Base class for authenticators.

    Do not override the constructor; use ``define`` and ``extend`` instead.

    Example:
        class TokenAuthenticator(POSTAuthenticator):
            async def authenticate(self, request):
                body = await request.json()
                return AuthenticatorAccount(id=body["token"])
    """

    def __init__(
        self,
        name: str,
        config: Mapping[str, Any],
        deps: AuthenticatorDeps,
        character: Character,
    ):
        """Initialize the authenticator and register its routes.

        Args:
            name: Authenticator name, also used in account links and model names
            config: Authenticator options (copied, never mutated)
            deps: Dependency bag, must supply a session dependency
            character: Host application context

        Raises:
            ValueError: If a redirect option is missing
        """
        self.logger = logging.getLogger(f"{__package__}.{name}")

        self.character = character
        self.config: Dict[str, Any] = copy.deepcopy(dict(config))
        self.deps = deps
        self.name = name

        missing = [option for option in REDIRECT_OPTIONS if not self.config.get(option)]
        if missing:
            raise ValueError(f"Authenticator {name} is missing config: {', '.join(missing)}")

        self.router = APIRouter()

        self.logger.debug("initializing")

        self.attach_models()
        self.define()
        self.extend()

    def attach_models(self) -> None:
        """Expose this authenticator's host models under their short names"""
        prefix = authenticator_model_prefix(self.name)
        self.models: Dict[str, type] = {
            name[len(prefix):]: model
            for name, model in self.character.database.models.items()
            if name.startswith(prefix)
        }

    async def authenticate(self, request: Request) -> AuthenticatorAccount:
        """Validate the request's credentials.

        Override this to return the account the credentials belong to.

        Raises:
            AuthenticatorError: Always, for the base class
        """
        raise AuthenticatorError(
            f"Authenticator.authenticate must be subclassed. My name: {self.name}"
        )

    def define(self) -> None:
        """Define core routes on ``self.router``.

        Override this in the route-method authenticator (POST, GET).
        """
        raise NotImplementedError("Authenticator.define must be overridden by subclass")

    def extend(self) -> None:
        """Define extra routes or behaviour, optional.

        Override this in a concrete authenticator to add routes.
        """

    async def find_identity(self, account: AuthenticatorAccount) -> Optional[Dict[str, Any]]:
        """Find the core identity linked to an authenticator account.

        Args:
            account: Account returned by ``authenticate``

        Returns:
            ``{"id": ...}`` of the linked identity, or None
        """
        Account = self.character.database.models["Authentication$Account"]
        Identity = self.character.database.models["Core$Identity"]

        async with self.character.database.session() as db:
            result = await db.execute(
                select(Identity.id)
                .join(Account, Account.identity_id == Identity.id)
                .where(
                    Account.authenticator_account_id == str(account.id),
                    Account.authenticator_name == self.name,
                )
            )
            row = result.first()

        return {"id": row.id} if row else None

    def link_identity(self, db: AsyncSession, account: AuthenticatorAccount):
        """Add a new core identity linked to the account to an open session.

        The caller commits; use this to create the identity in the same
        transaction as the authenticator's own records.
        """
        Account = self.character.database.models["Authentication$Account"]
        Identity = self.character.database.models["Core$Identity"]

        identity = Identity(
            accounts=[
                Account(
                    authenticator_account_id=str(account.id),
                    authenticator_name=self.name,
                )
            ]
        )
        db.add(identity)
        return identity

    @staticmethod
    def identity_record(identity) -> Dict[str, Any]:
        """Plain dict of a committed identity and its account links"""
        return {
            "id": identity.id,
            "created_at": identity.created_at,
            "accounts": [
                {
                    "authenticator_account_id": link.authenticator_account_id,
                    "authenticator_name": link.authenticator_name,
                }
                for link in identity.accounts
            ],
        }

    async def announce_onboard(self, account: AuthenticatorAccount, record: Dict[str, Any]) -> None:
        """Emit authentication:onboard for a committed identity"""
        self.logger.info(f"Onboarded account {account.id} as identity {record['id']}")
        await self.character.emit(
            "authentication:onboard",
            {
                "account": account,
                "datetime": datetime.now(timezone.utc),
                "identity": record,
            },
        )

    async def onboard(self, account: AuthenticatorAccount) -> Dict[str, Any]:
        """Create a new core identity linked to an authenticator account.

        Args:
            account: Account returned by ``authenticate``

        Returns:
            The new identity as a plain dict, with its account links
        """
        async with self.character.database.session() as db:
            identity = self.link_identity(db, account)
            await db.commit()
            record = self.identity_record(identity)

        await self.announce_onboard(account, record)
        return record

    async def identify(
        self, account: AuthenticatorAccount, request: Optional[Request] = None
    ) -> AuthenticatedUser:
        """Identify or onboard the authenticator account.

        ``account`` is the user record with the authenticator; the identity is
        the user record with the host.

        Raises:
            IdentityNotFoundError: No linked identity and onboarding is disabled
        """
        self.logger.debug(f"got account {account.id}")

        user = AuthenticatedUser(authenticator=AuthenticatorRef(account=account, name=self.name))

        if account.deferred:
            user.deferred = True
        else:
            identity = await self.find_identity(account)

            if identity:
                user.id = identity["id"]
            elif self.config.get("onboard_known_accounts"):
                new_identity = await self.onboard(account)
                user.id = new_identity["id"]
            else:
                # only accept recognized core identities
                raise IdentityNotFoundError()

        await self.character.emit(
            "authentication:authenticate",
            {
                "datetime": datetime.now(timezone.utc),
                "user": user,
            },
        )
        return user

    async def receiver(self, request: Request) -> RedirectResponse:
        """Run the request pipeline.

        authenticate -> identify -> set session -> redirect. Any failure
        redirects to the failure URL with the status text as ``reason``.
        """
        try:
            self.logger.debug("enter app request handler")

            account = await self.authenticate(request)
            user = await self.identify(account, request)

            # deferred users complete out-of-band (e.g. magic link email)
            if not user.deferred:
                set_session(request, {"user": user.to_session()})

            location = (
                self.config["deferred_redirect"] if user.deferred else self.config["success_redirect"]
            )
            return RedirectResponse(location, status_code=SEE_OTHER)
        except Exception as e:
            return self.failure_response(e)

    def failure_response(self, error: Exception) -> RedirectResponse:
        """Redirect to the failure URL with the error's status text as reason"""
        self.logger.warning(f"error authenticating: {error}")
        self.logger.debug("authentication failure details", exc_info=error)
        query = urlencode({"reason": status_reason(error)})
        return RedirectResponse(f"{self.config['failure_redirect']}?{query}", status_code=SEE_OTHER)

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        """Override this to return authenticator option defaults"""
        return {}

    @classmethod
    def models(cls) -> Dict[str, type]:
        """Define authenticator models.

        Override this to return ``{short_name: model_class}``. The host
        registers each one as ``Authentication$<Name>$<short_name>``.
        """
        return {}
