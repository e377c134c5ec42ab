"""GET authenticator.

Reserved for redirect-then-callback flows with external identity providers.
Not ready for use: the callback protocol is not defined yet.
"""

from fastapi import Depends, Request

from .base import BaseAuthenticator


class GETAuthenticator(BaseAuthenticator):
    """Authenticator initiated by ``GET /`` and completed on ``GET /callback``"""

    def define(self) -> None:
        """Define core routes"""
        self.router.add_api_route(
            "/",
            self.receiver,
            methods=["GET"],
            dependencies=[Depends(self.deps.session)],
        )
        self.router.add_api_route(
            "/callback",
            self.callback,
            methods=["GET"],
            dependencies=[Depends(self.deps.session)],
        )

    async def callback(self, request: Request):
        """Handle the identity provider's return trip.

        Raises:
            NotImplementedError: Reserved for future development
        """
        raise NotImplementedError(f"GET authenticator callback is not implemented ({self.name})")
