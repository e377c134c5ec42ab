"""Shared test helpers: a stub authenticator and session cookie decoding."""

import base64
import json
from typing import Any, Dict, Optional

from fastapi import Request
from itsdangerous import TimestampSigner

from character_authentication.authenticators import AuthenticatorError, POSTAuthenticator
from character_authentication.domain.models import AuthenticatorAccount

SESSION_SECRET = "test-session-secret"
SESSION_COOKIE = "character_session"


class StubAuthenticator(POSTAuthenticator):
    """Authenticator whose account comes straight from the JSON body.

    ``{"id": ..., "deferred": ...}`` authenticates; ``{"fail": 401}`` raises
    with that status, ``{"fail": null}`` raises without one.
    """

    async def authenticate(self, request: Request) -> AuthenticatorAccount:
        body = await request.json()
        if "fail" in body:
            if body["fail"] is None:
                raise RuntimeError("provider exploded")
            raise AuthenticatorError("rejected by provider", body["fail"])
        return AuthenticatorAccount(**body)


def decode_session_cookie(value: str) -> Dict[str, Any]:
    """Decode a SessionMiddleware cookie"""
    data = TimestampSigner(SESSION_SECRET).unsign(value.encode("utf-8"))
    return json.loads(base64.b64decode(data))


def session_from(response) -> Optional[Dict[str, Any]]:
    """Session stored by a response, or None if no cookie was set"""
    value = response.cookies.get(SESSION_COOKIE)
    return decode_session_cookie(value) if value else None
