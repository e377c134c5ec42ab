"""HTTP plumbing shared by authenticators."""

from .session import AuthenticatorDeps, require_session, set_session

__all__ = [
    "AuthenticatorDeps",
    "require_session",
    "set_session",
]
