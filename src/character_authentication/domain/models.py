"""Authentication Domain Models

Pydantic models passed between the steps of an authenticator's request
pipeline. None of them are persisted; the account link and identity live in
the SQLAlchemy models.
"""

from typing import Any, Dict, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthenticatorAccount(BaseModel):
    """Account returned by an authenticator's ``authenticate`` step.

    Attributes:
        id: External account id, unique within the authenticator
        deferred: Completion is delivered out-of-band (e.g. an emailed magic link)

    Provider-specific fields are kept as extras.
    """

    model_config = ConfigDict(extra="allow")

    id: Union[int, str]
    deferred: bool = False


class AuthenticatorRef(BaseModel):
    """Which authenticator produced a user, and with which account"""

    account: AuthenticatorAccount
    name: str


class AuthenticatedUser(BaseModel):
    """Session payload produced per request.

    ``id`` is the core identity id; it is unset for deferred users.
    """

    authenticator: AuthenticatorRef
    id: Optional[UUID] = None
    deferred: Optional[bool] = None

    def to_session(self) -> Dict[str, Any]:
        """JSON-compatible form stored in the session cookie"""
        return self.model_dump(mode="json", exclude_none=True)
