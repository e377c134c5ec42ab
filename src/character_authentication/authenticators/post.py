"""POST authenticator: credentials are submitted to a single POST route."""

from fastapi import Depends

from .base import BaseAuthenticator


class POSTAuthenticator(BaseAuthenticator):
    """Authenticator whose pipeline runs on ``POST /``"""

    def define(self) -> None:
        """Define core routes"""
        self.router.add_api_route(
            "/",
            self.receiver,
            methods=["POST"],
            dependencies=[Depends(self.deps.session)],
        )
