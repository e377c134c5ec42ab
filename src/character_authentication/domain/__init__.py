"""Domain models shared by authenticators."""

from .models import AuthenticatedUser, AuthenticatorAccount, AuthenticatorRef

__all__ = [
    "AuthenticatedUser",
    "AuthenticatorAccount",
    "AuthenticatorRef",
]
