from typing import List, Optional
from uuid import UUID
from datetime import date

from django.http import HttpRequest
from ninja import Router
from ninja.errors import HttpError

from apps.companies.permissions import company_admin_required
from .models import AuditLog
from .dtos import AuditLogOut

router = Router(tags=["Audit"])

MAX_LIMIT = 500


def _serialize_log(log: AuditLog) -> AuditLogOut:
    performed_by_name = log.performed_by.username if log.performed_by_id else None
    return AuditLogOut(
        id=log.id,
        company_id=log.company_id,
        action=log.action,
        target_type=log.target_type,
        target_id=log.target_id,
        target_label=log.target_label,
        performed_by_name=performed_by_name,
        performed_at=log.performed_at,
        context=log.context,
    )


@router.get("/companies/{company_id}", response=List[AuditLogOut], auth=None)
@company_admin_required("Only company admins can view the audit log")
def list_audit_logs(
    request: HttpRequest,
    company_id: UUID,
    action: Optional[str] = None,
    target_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = 100,
):
    """
    Audit entries for one company, newest first.
    """
    qs = AuditLog.objects.filter(company_id=company_id).select_related("performed_by")

    if action:
        qs = qs.filter(action=action)
    if target_type:
        qs = qs.filter(target_type=target_type)
    if start_date:
        qs = qs.filter(performed_at__date__gte=start_date)
    if end_date:
        qs = qs.filter(performed_at__date__lte=end_date)

    qs = qs[:max(1, min(limit, MAX_LIMIT))]
    return [_serialize_log(log) for log in qs]


@router.get("/companies/{company_id}/{log_id}", response=AuditLogOut, auth=None)
@company_admin_required("Only company admins can view the audit log")
def get_audit_log(request: HttpRequest, company_id: UUID, log_id: UUID):
    log = AuditLog.objects.select_related("performed_by").filter(id=log_id, company_id=company_id).first()
    if log is None:
        raise HttpError(404, "Audit log not found")
    return _serialize_log(log)
