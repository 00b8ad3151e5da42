"""
Centralized audit logging service.

Use log_action() to record any company or forklift mutation. It is
fire-and-forget: a logging failure is reported to the application log but
never breaks the calling request.

Usage:
    from apps.audit.audit_service import log_action, AuditAction

    log_action(
        company_id=company.id,
        action=AuditAction.CREATE_FORKLIFT,
        target_type="Forklift",
        target_id=forklift.id,
        target_label=f"{forklift.brand} {forklift.model_type}",
        performed_by=user,
        context={"customer": forklift.customer},
    )
"""
import logging
from uuid import UUID
from typing import Optional

from django.db import transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


class AuditAction:
    """
    Canonical string constants for audit log actions.
    """
    # ── Companies ─────────────────────────────────────────────────────
    CREATE_COMPANY = "CREATE_COMPANY"
    JOIN_COMPANY = "JOIN_COMPANY"
    REGENERATE_JOIN_CODE = "REGENERATE_JOIN_CODE"
    DELETE_COMPANY = "DELETE_COMPANY"

    # ── Members ───────────────────────────────────────────────────────
    UPDATE_MEMBER = "UPDATE_MEMBER"
    REMOVE_MEMBER = "REMOVE_MEMBER"

    # ── Forklifts ─────────────────────────────────────────────────────
    CREATE_FORKLIFT = "CREATE_FORKLIFT"
    UPDATE_FORKLIFT = "UPDATE_FORKLIFT"
    DELETE_FORKLIFT = "DELETE_FORKLIFT"


def log_action(
    *,
    company_id: UUID,
    action: str,
    target_type: str,
    target_id: UUID,
    performed_by,
    target_label: str = "",
    context: Optional[dict] = None,
) -> Optional[AuditLog]:
    """
    Create an AuditLog entry for a critical action.

    Args:
        company_id:    Company UUID for tenant isolation.
        action:        Action constant from AuditAction.
        target_type:   Type of the object acted on (e.g. "Forklift").
        target_id:     Primary key of the object acted on.
        performed_by:  User instance or None.
        target_label:  Optional human-readable description of the object.
        context:       Optional dict of additional metadata stored as JSON.

    Returns:
        The created AuditLog instance, or None if creation failed.
    """
    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                company_id=company_id,
                action=action,
                target_type=target_type,
                target_id=target_id,
                target_label=(target_label or "")[:255],
                performed_by=performed_by,
                context=context or {},
            )
    except Exception:
        logger.exception(f"Failed to write audit log {action} for {target_type} {target_id}")
        return None
