# pgl_core/audit/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import UUID

from django.db import IntegrityError, transaction

from pgl_core.audit.models import AuditEvent, DigitalSignature
from pgl_core.common.api.exceptions import ConflictError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditRecord:
    event_code: str
    entity_type: str
    entity_id: UUID
    actor_profile_id: UUID | None
    metadata: Dict[str, Any]


class AuditService:
    """
    Central audit writer. Rows are immutable once written.
    """

    @staticmethod
    @transaction.atomic
    def log(
        *,
        event_code: str,
        entity_type: str,
        entity_id: UUID,
        actor_profile_id: UUID | None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditRecord:
        metadata = metadata or {}

        AuditEvent.objects.create(
            event_code=event_code,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_profile_id,
            metadata=metadata,
        )

        return AuditRecord(
            event_code=event_code,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_profile_id=actor_profile_id,
            metadata=metadata,
        )


class SignatureService:
    @staticmethod
    @transaction.atomic
    def record(
        *,
        entity_type: str,
        entity_id: UUID,
        student_profile_id: UUID,
        signer_profile_id: UUID | None,
        remark: str = "",
        is_automatic: bool = False,
        signed_at=None,
    ) -> DigitalSignature:
        """
        Appends the signature for a freshly signed entry. Must run inside the
        caller's transaction so a failed insert rolls the sign back too.
        """
        kwargs = {}
        if signed_at is not None:
            kwargs["signed_at"] = signed_at

        try:
            # savepoint so the unique violation does not poison the outer transaction
            with transaction.atomic(savepoint=True):
                signature = DigitalSignature.objects.create(
                    entity_type=entity_type,
                    entity_id=entity_id,
                    student_id=student_profile_id,
                    signer_id=signer_profile_id,
                    remark=remark or "",
                    is_automatic=is_automatic,
                    **kwargs,
                )
        except IntegrityError:
            logger.warning("signature_duplicate entity_type=%s entity_id=%s", entity_type, entity_id)
            raise ConflictError("This entry has already been signed.")

        return signature
