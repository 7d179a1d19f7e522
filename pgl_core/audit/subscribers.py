# pgl_core/audit/subscribers.py
from uuid import UUID

from pgl_core.audit.services import AuditService
from pgl_core.common.events import subscribe


@subscribe("logbook.entry_transition")
def on_entry_transition(payload: dict) -> None:
    actor = payload.get("actor_profile_id")

    AuditService.log(
        event_code=payload["event_code"],
        entity_type=payload["entity_type"],
        entity_id=UUID(payload["entity_id"]),
        actor_profile_id=UUID(actor) if actor else None,
        metadata={
            "from_status": payload.get("from_status"),
            "to_status": payload.get("to_status"),
            "owner_id": payload.get("owner_id"),
            **(payload.get("meta") or {}),
        },
    )
