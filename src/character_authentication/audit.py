"""Audit trail for authentication events.

Subscribes to the host's ``authentication:*`` events and stores one
AuditLog row per event.
"""

import logging
from typing import Any, Dict

from character_authentication.character import Character

logger = logging.getLogger(__name__)

AUDITED_EVENTS = ("authentication:authenticate", "authentication:onboard")


def _audit_entry(event: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    if event == "authentication:onboard":
        account = payload["account"]
        identity = payload["identity"]
        links = identity.get("accounts") or [{}]
        return {
            "authenticator_name": links[0].get("authenticator_name"),
            "authenticator_account_id": str(account.id),
            "identity_id": identity["id"],
            "event_metadata": None,
        }

    user = payload["user"]
    return {
        "authenticator_name": user.authenticator.name,
        "authenticator_account_id": str(user.authenticator.account.id),
        "identity_id": user.id,
        "event_metadata": {"deferred": True} if user.deferred else None,
    }


def attach_audit_log(character: Character) -> None:
    """Record authentication events in the Core$AuditLog table"""
    AuditLog = character.database.models["Core$AuditLog"]

    def make_listener(event: str):
        async def record(payload: Dict[str, Any]) -> None:
            entry = _audit_entry(event, payload)
            logger.info(
                f"{event}: authenticator={entry['authenticator_name']} "
                f"identity={entry['identity_id']}"
            )
            async with character.database.session() as db:
                db.add(AuditLog(event_type=event, **entry))
                await db.commit()

        return record

    for event in AUDITED_EVENTS:
        character.on(event, make_listener(event))
