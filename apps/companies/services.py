"""
Services for Companies app.

This is the public API for other apps to interact with companies and
memberships. Authorization rules:

- An *active member* holds a membership that is not blocked.
- An *admin* is the company creator, or an active member flagged is_admin.
"""
import logging
import secrets
import string
from typing import List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.audit.audit_service import log_action, AuditAction
from .models import Company, Membership
from .dtos import CompanyMemberDTO

logger = logging.getLogger(__name__)

JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits
JOIN_CODE_LENGTH = 8
MAX_JOIN_CODE_ATTEMPTS = 10


class MemberNotFound(Membership.DoesNotExist):
    pass


# =============================================================================
# Join codes
# =============================================================================

def generate_join_code() -> str:
    """Random 8-character uppercase share code."""
    return ''.join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))


def _unique_join_code() -> str:
    for _ in range(MAX_JOIN_CODE_ATTEMPTS):
        code = generate_join_code()
        if not Company.objects.filter(join_code=code).exists():
            return code
    raise RuntimeError("Could not generate a unique join code")


def normalize_join_code(join_code: Optional[str]) -> str:
    return (join_code or '').strip().upper()


# =============================================================================
# Membership checks
# =============================================================================

def get_membership(user_id: UUID, company_id: UUID) -> Optional[Membership]:
    return Membership.objects.filter(user_id=user_id, company_id=company_id).first()


def is_active_member(user_id: UUID, company_id: UUID) -> bool:
    return Membership.objects.filter(
        user_id=user_id, company_id=company_id, is_blocked=False
    ).exists()


def is_company_admin(user_id: UUID, company_id: UUID) -> bool:
    """
    True for the company creator, or a non-blocked member flagged is_admin.
    Unknown companies yield False.
    """
    company = Company.objects.filter(id=company_id).only('id', 'created_by_id').first()
    if company is None:
        return False
    if company.created_by_id == user_id:
        return True

    membership = get_membership(user_id, company_id)
    is_admin = bool(membership and membership.is_admin and not membership.is_blocked)
    logger.debug(f"User {user_id} admin status in company {company_id}: {is_admin}")
    return is_admin


def active_company_ids(user_id: UUID) -> List[UUID]:
    return list(
        Membership.objects.filter(user_id=user_id, is_blocked=False)
        .values_list('company_id', flat=True)
    )


def list_user_companies(user_id: UUID) -> List[Company]:
    """Companies where the user is an active member."""
    return list(Company.objects.filter(id__in=active_company_ids(user_id)))


def get_company_for_user(company_id: UUID, user_id: UUID) -> Optional[Company]:
    """
    The company if the user is an active member of it, else None.
    Unknown ids and foreign companies are indistinguishable to the caller.
    """
    if not is_active_member(user_id, company_id):
        return None
    return Company.objects.filter(id=company_id).first()


# =============================================================================
# Company lifecycle
# =============================================================================

def create_company(name: str, user) -> Company:
    """
    Create a company and add its creator as an admin member, atomically.
    """
    name = (name or '').strip()
    if not name:
        raise ValidationError("Company name is required")

    with transaction.atomic():
        company = Company.objects.create(
            name=name,
            join_code=_unique_join_code(),
            created_by=user,
        )
        Membership.objects.create(
            user=user,
            company=company,
            is_admin=True,
            is_blocked=False,
        )

    logger.info(f"User {user.id} created company {company.id} ({company.name})")
    log_action(
        company_id=company.id,
        action=AuditAction.CREATE_COMPANY,
        target_type="Company",
        target_id=company.id,
        target_label=company.name,
        performed_by=user,
    )
    return company


def join_company(join_code: Optional[str], user) -> Company:
    """
    Add the user to the company owning `join_code`.

    Joining twice is a no-op; an existing membership keeps its flags, so a
    blocked member cannot unblock themselves by re-joining.

    Raises:
        ValidationError: no code supplied.
        Company.DoesNotExist: the code matches no company.
    """
    code = normalize_join_code(join_code)
    if not code:
        raise ValidationError("Join code is required")

    company = Company.objects.filter(join_code=code).first()
    if company is None:
        raise Company.DoesNotExist("Invalid join code")

    membership, created = Membership.objects.get_or_create(user=user, company=company)
    if created:
        logger.info(f"User {user.id} joined company {company.id}")
        log_action(
            company_id=company.id,
            action=AuditAction.JOIN_COMPANY,
            target_type="User",
            target_id=user.id,
            target_label=user.username,
            performed_by=user,
        )
    return company


def regenerate_join_code(company: Company, performed_by=None) -> str:
    """Replace the join code; the previous code stops working at once."""
    company.join_code = _unique_join_code()
    company.save(update_fields=['join_code'])

    log_action(
        company_id=company.id,
        action=AuditAction.REGENERATE_JOIN_CODE,
        target_type="Company",
        target_id=company.id,
        target_label=company.name,
        performed_by=performed_by,
    )
    return company.join_code


def delete_company(company: Company, performed_by=None) -> None:
    """Delete the company with its memberships and forklift records."""
    company_id = company.id
    company_name = company.name

    with transaction.atomic():
        forklift_count = company.forklifts.count()
        member_count = company.memberships.count()
        company.forklifts.all().delete()
        company.memberships.all().delete()
        company.delete()

    logger.info(
        f"Company {company_id} deleted with {member_count} memberships "
        f"and {forklift_count} forklifts"
    )
    log_action(
        company_id=company_id,
        action=AuditAction.DELETE_COMPANY,
        target_type="Company",
        target_id=company_id,
        target_label=company_name,
        performed_by=performed_by,
        context={"forklifts": forklift_count, "members": member_count},
    )


# =============================================================================
# Member management
# =============================================================================

def _to_member_dto(membership: Membership, creator_id: UUID) -> CompanyMemberDTO:
    return CompanyMemberDTO(
        user_id=membership.user_id,
        username=membership.user.username,
        email=membership.user.email,
        is_admin=membership.is_admin,
        is_blocked=membership.is_blocked,
        is_creator=membership.user_id == creator_id,
        joined_at=membership.joined_at,
    )


def list_company_members(company: Company) -> List[CompanyMemberDTO]:
    memberships = Membership.objects.filter(company=company).select_related('user')
    return [_to_member_dto(m, company.created_by_id) for m in memberships]


def _get_member(company: Company, user_id: UUID) -> Membership:
    try:
        return Membership.objects.select_related('user').get(company=company, user_id=user_id)
    except Membership.DoesNotExist:
        raise MemberNotFound("User is not a member of this company")


def update_company_member(
    company: Company,
    user_id: UUID,
    is_admin: Optional[bool] = None,
    is_blocked: Optional[bool] = None,
    performed_by=None,
) -> CompanyMemberDTO:
    """
    Change a member's admin/blocked flags. Flags left as None are untouched.
    The creator's flags are fixed.
    """
    membership = _get_member(company, user_id)
    if membership.user_id == company.created_by_id:
        raise ValidationError("The company creator's permissions cannot be changed")

    changes = {}
    if is_admin is not None:
        membership.is_admin = is_admin
        changes['is_admin'] = is_admin
    if is_blocked is not None:
        membership.is_blocked = is_blocked
        changes['is_blocked'] = is_blocked

    if changes:
        membership.save(update_fields=list(changes))
        logger.info(f"Membership of user {user_id} in company {company.id} updated: {changes}")
        log_action(
            company_id=company.id,
            action=AuditAction.UPDATE_MEMBER,
            target_type="User",
            target_id=membership.user_id,
            target_label=membership.user.username,
            performed_by=performed_by,
            context=changes,
        )

    return _to_member_dto(membership, company.created_by_id)


def remove_company_member(company: Company, user_id: UUID, performed_by=None) -> None:
    """
    Remove a member. Their forklift records stay with the company.
    """
    membership = _get_member(company, user_id)
    if membership.user_id == company.created_by_id:
        raise ValidationError("The company creator cannot be removed")

    username = membership.user.username
    membership.delete()
    logger.info(f"User {user_id} removed from company {company.id}")
    log_action(
        company_id=company.id,
        action=AuditAction.REMOVE_MEMBER,
        target_type="User",
        target_id=user_id,
        target_label=username,
        performed_by=performed_by,
    )
