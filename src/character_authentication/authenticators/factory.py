"""Authenticator factory.

Builds the enabled authenticators from settings and registers their models
on the host.
"""

import logging
from typing import Dict, List, Optional, Type

from character_authentication.api.session import AuthenticatorDeps
from character_authentication.character import Character
from character_authentication.config.settings import Settings
from .base import BaseAuthenticator
from .local import LocalAuthenticator

logger = logging.getLogger(__name__)

AUTHENTICATOR_TYPES: Dict[str, Type[BaseAuthenticator]] = {
    "local": LocalAuthenticator,
}


def get_authenticator_class(kind: str) -> Type[BaseAuthenticator]:
    """Look up an authenticator class by type key.

    Raises:
        ValueError: If the type is unknown
    """
    try:
        return AUTHENTICATOR_TYPES[kind.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown authenticator: {kind}. "
            f"Valid options: {', '.join(sorted(AUTHENTICATOR_TYPES))}"
        ) from None


def create_authenticator(
    name: str,
    authenticator_class: Type[BaseAuthenticator],
    character: Character,
    settings: Settings,
    deps: Optional[AuthenticatorDeps] = None,
) -> BaseAuthenticator:
    """Register an authenticator's models and build it.

    Options are merged in order: class defaults, settings-wide options,
    then ``settings.authenticator_options[name]``.
    """
    character.database.register_authenticator_models(name, authenticator_class.models())

    config = {
        **authenticator_class.defaults(),
        **settings.authenticator_config(),
        **settings.authenticator_options.get(name, {}),
    }

    authenticator = authenticator_class(name, config, deps or AuthenticatorDeps(), character)
    logger.info(f"Authenticator initialized: {name} ({authenticator_class.__name__})")
    return authenticator


def load_authenticators(
    character: Character,
    settings: Settings,
    deps: Optional[AuthenticatorDeps] = None,
) -> List[BaseAuthenticator]:
    """Build every authenticator enabled in ``settings.authenticators``"""
    return [
        create_authenticator(kind.lower(), get_authenticator_class(kind), character, settings, deps)
        for kind in settings.authenticators
    ]
