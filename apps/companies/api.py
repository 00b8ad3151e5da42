import logging
from typing import List
from uuid import UUID

from django.http import HttpRequest
from ninja import Router
from ninja.errors import HttpError

from apps.identity.api import require_auth
from .dtos import (
    CompanyOut, CompanyIn, JoinCompanyIn, CompanyMemberOut,
    CompanyMemberUpdate, JoinCodeOut,
)
from .permissions import company_admin_required
from . import services

logger = logging.getLogger(__name__)

router = Router(tags=["Companies"])


@router.post("", response={201: CompanyOut}, auth=None)
def create_company(request: HttpRequest, payload: CompanyIn):
    """
    Create a company. The caller becomes its creator and first admin.
    """
    user = require_auth(request)
    company = services.create_company(payload.name, user)
    return 201, company


@router.get("", response=List[CompanyOut], auth=None)
def list_companies(request: HttpRequest):
    """
    Companies where the caller is an active (non-blocked) member.
    """
    user = require_auth(request)
    return services.list_user_companies(user.id)


@router.post("/join", response=CompanyOut, auth=None)
def join_company(request: HttpRequest, payload: JoinCompanyIn):
    """
    Join a company with its share code.
    """
    user = require_auth(request)
    return services.join_company(payload.join_code, user)


@router.get("/{company_id}", response=CompanyOut, auth=None)
def get_company(request: HttpRequest, company_id: UUID):
    user = require_auth(request)
    company = services.get_company_for_user(company_id, user.id)
    if company is None:
        logger.info(f"User {user.id} denied access to company {company_id}")
        raise HttpError(403, "Access denied")
    return company


@router.get("/{company_id}/is-admin", response=bool, auth=None)
def get_is_admin(request: HttpRequest, company_id: UUID):
    """
    Whether the caller may manage this company.
    """
    user = require_auth(request)
    return services.is_company_admin(user.id, company_id)


@router.delete("/{company_id}", response={204: None}, auth=None)
@company_admin_required("Only company admins can delete companies")
def delete_company(request: HttpRequest, company_id: UUID):
    services.delete_company(request.company, performed_by=request.current_user)
    return 204, None


@router.post("/{company_id}/regenerate-code", response=JoinCodeOut, auth=None)
@company_admin_required("Only company admins can regenerate join codes")
def regenerate_join_code(request: HttpRequest, company_id: UUID):
    join_code = services.regenerate_join_code(request.company, performed_by=request.current_user)
    return {"join_code": join_code}


# =============================================================================
# Member management
# =============================================================================

@router.get("/{company_id}/users", response=List[CompanyMemberOut], auth=None)
@company_admin_required("Only company admins can view user list")
def list_members(request: HttpRequest, company_id: UUID):
    return services.list_company_members(request.company)


@router.patch("/{company_id}/users/{user_id}", response=CompanyMemberOut, auth=None)
@company_admin_required("Only company admins can modify user permissions")
def update_member(request: HttpRequest, company_id: UUID, user_id: UUID, payload: CompanyMemberUpdate):
    return services.update_company_member(
        request.company,
        user_id,
        is_admin=payload.is_admin,
        is_blocked=payload.is_blocked,
        performed_by=request.current_user,
    )


@router.delete("/{company_id}/users/{user_id}", response={204: None}, auth=None)
@company_admin_required("Only company admins can remove users")
def remove_member(request: HttpRequest, company_id: UUID, user_id: UUID):
    services.remove_company_member(request.company, user_id, performed_by=request.current_user)
    return 204, None
