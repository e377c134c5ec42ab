"""Authenticator errors.

Every error raised inside the request pipeline may carry an HTTP status code.
The receiver turns it into the ``reason`` of the failure redirect.
"""

from http import HTTPStatus


class AuthenticatorError(Exception):
    """Base error for authenticator failures."""

    def __init__(self, message: str, http_status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.http_status_code = int(http_status_code)


class AuthenticationError(AuthenticatorError):
    """Credentials were rejected."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, HTTPStatus.UNAUTHORIZED)


class IdentityNotFoundError(AuthenticatorError):
    """No core identity is linked to the account and onboarding is disabled."""

    def __init__(self, message: str = "Could not find identity for account"):
        super().__init__(message, HTTPStatus.NOT_FOUND)


def status_reason(error: BaseException) -> str:
    """Standard status text for an error's ``http_status_code``.

    Errors without a code, or with an unknown one, are internal errors.
    """
    code = getattr(error, "http_status_code", None) or HTTPStatus.INTERNAL_SERVER_ERROR
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return HTTPStatus.INTERNAL_SERVER_ERROR.phrase
