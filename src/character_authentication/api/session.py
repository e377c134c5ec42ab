"""Session dependencies

Authenticator routes run behind Starlette's SessionMiddleware, which keeps the
session in an itsdangerous-signed cookie.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)


def require_session(request: Request) -> Dict[str, Any]:
    """Dependency guarding routes that need a session.

    Raises:
        HTTPException: 500 if SessionMiddleware is not installed
    """
    if "session" not in request.scope:
        logger.error("Session middleware is not installed")
        raise HTTPException(status_code=500, detail="Session middleware is not installed")
    return request.session


def set_session(request: Request, values: Dict[str, Any]) -> None:
    """Store values in the request's session"""
    request.session.update(values)


@dataclass(frozen=True)
class AuthenticatorDeps:
    """Dependency bag handed to every authenticator.

    Attributes:
        session: FastAPI dependency guarding session-backed routes
    """

    session: Callable[..., Any] = require_session
