"""Authenticators.

Each authenticator handles one authentication mechanism:
- BaseAuthenticator: pipeline and identity resolution
- POSTAuthenticator: credentials posted to ``POST /``
- GETAuthenticator: redirect-then-callback flows (reserved, not ready)
- LocalAuthenticator: username/password
"""

from .base import BaseAuthenticator
from .errors import AuthenticationError, AuthenticatorError, IdentityNotFoundError
from .factory import AUTHENTICATOR_TYPES, get_authenticator_class, load_authenticators
from .get import GETAuthenticator
from .local import LocalAuthenticator
from .post import POSTAuthenticator

__all__ = [
    "AUTHENTICATOR_TYPES",
    "AuthenticationError",
    "AuthenticatorError",
    "BaseAuthenticator",
    "GETAuthenticator",
    "IdentityNotFoundError",
    "LocalAuthenticator",
    "POSTAuthenticator",
    "get_authenticator_class",
    "load_authenticators",
]
