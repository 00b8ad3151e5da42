"""
Services for Forklifts app.

Every member of a company sees and edits all of the company's forklifts;
only the member who created a record may delete it.
"""
import logging
from itertools import groupby
from typing import List, Optional
from uuid import UUID

from django.core.exceptions import PermissionDenied, ValidationError
from django.db.models import Q

from apps.audit.audit_service import log_action, AuditAction
from apps.companies.services import active_company_ids, is_active_member
from .attachment_service import Document, decode_document, InvalidDocument, validate_documents
from .dtos import ForkliftIn, ForkliftPatch
from .models import Forklift, SERVICE_INTERVALS

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = {
    'customer': "Customer is required",
    'brand': "Brand is required",
    'model_type': "Model type is required",
}

OPTIONAL_TEXT_FIELDS = (
    'serial_number',
    'engine_specs',
    'transmission',
    'tire_specs',
    'service_notes',
) + tuple(
    f'{group}_{hours}h' for hours in SERVICE_INTERVALS for group in ('filters', 'lubricants')
)

DOCUMENT_FIELDS = tuple(f'documents_{hours}h' for hours in SERVICE_INTERVALS)


# =============================================================================
# Validation
# =============================================================================

def _clean_fields(data: dict) -> dict:
    """
    Normalize and validate submitted forklift fields in place.
    Only keys present in `data` are checked.
    """
    for field, message in REQUIRED_TEXT_FIELDS.items():
        if field in data:
            value = (data[field] or '').strip()
            if not value:
                raise ValidationError(message)
            data[field] = value

    for field in OPTIONAL_TEXT_FIELDS:
        if field in data and data[field] is None:
            data[field] = ''

    if data.get('service_hours') is not None and data['service_hours'] < 0:
        raise ValidationError("Service hours cannot be negative")

    for field in DOCUMENT_FIELDS:
        if field in data:
            data[field] = validate_documents(field, data[field])

    return data


# =============================================================================
# Queries
# =============================================================================

def list_forklifts_for_user(
    user_id: UUID,
    company_id: Optional[UUID] = None,
    customer: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Forklift]:
    """
    Forklifts of every company where the user is an active member,
    including records created by other members.
    """
    queryset = Forklift.objects.filter(company_id__in=active_company_ids(user_id))

    if company_id:
        queryset = queryset.filter(company_id=company_id)
    if customer:
        queryset = queryset.filter(customer=customer)
    if search:
        queryset = queryset.filter(
            Q(customer__icontains=search) |
            Q(brand__icontains=search) |
            Q(model_type__icontains=search) |
            Q(serial_number__icontains=search)
        )

    return list(queryset.order_by('customer', 'brand', 'model_type'))


def group_by_customer(forklifts: List[Forklift]) -> List[dict]:
    """
    Group forklifts under their customer, ordered by customer name.
    """
    ordered = sorted(forklifts, key=lambda f: (f.customer.lower(), f.customer))
    groups = []
    for customer, items in groupby(ordered, key=lambda f: f.customer):
        items = list(items)
        groups.append({'customer': customer, 'count': len(items), 'forklifts': items})
    return groups


def get_forklift_for_user(forklift_id: UUID, user_id: UUID) -> Forklift:
    """
    Fetch a forklift the user may see.

    Raises:
        Forklift.DoesNotExist: no such forklift.
        PermissionDenied: the user is not an active member of its company.
    """
    forklift = Forklift.objects.filter(id=forklift_id).first()
    if forklift is None:
        raise Forklift.DoesNotExist("Forklift not found")

    if not is_active_member(user_id, forklift.company_id):
        logger.warning(f"User {user_id} denied access to forklift {forklift_id}")
        raise PermissionDenied("Access denied")
    return forklift


def get_document(forklift: Forklift, hours: int, index: int) -> Document:
    """
    Decode one stored document.

    Raises:
        Forklift.DoesNotExist: unknown interval or index out of range.
    """
    if hours not in SERVICE_INTERVALS:
        raise Forklift.DoesNotExist(f"Unknown service interval: {hours}h")

    documents = forklift.documents_for(hours)
    if index < 0 or index >= len(documents):
        raise Forklift.DoesNotExist("Document not found")

    try:
        return decode_document(documents[index])
    except InvalidDocument:
        logger.error(f"Stored document {index} of forklift {forklift.id} ({hours}h) is corrupt")
        raise


# =============================================================================
# Mutations
# =============================================================================

def create_forklift(user, payload: ForkliftIn) -> Forklift:
    """
    Create a forklift in `payload.company_id`, owned by `user`.
    """
    data = payload.dict()
    company_id = data.pop('company_id', None)
    if not company_id:
        raise ValidationError("company_id is required")

    if not is_active_member(user.id, company_id):
        logger.warning(f"User {user.id} tried to add a forklift to company {company_id}")
        raise PermissionDenied("You are not a member of this company")

    data = _clean_fields(data)
    for field in DOCUMENT_FIELDS:
        data[field] = data.get(field) or []

    forklift = Forklift.objects.create(company_id=company_id, user=user, **data)

    logger.info(f"User {user.id} created forklift {forklift.id} in company {company_id}")
    log_action(
        company_id=company_id,
        action=AuditAction.CREATE_FORKLIFT,
        target_type="Forklift",
        target_id=forklift.id,
        target_label=forklift.label,
        performed_by=user,
        context={"customer": forklift.customer},
    )
    return forklift


def update_forklift(forklift_id: UUID, user, payload: ForkliftPatch) -> Forklift:
    """
    Apply a partial update. Moving a forklift to another company requires
    both its owner and the acting user to be active members there.
    """
    forklift = get_forklift_for_user(forklift_id, user.id)
    changes = payload.dict(exclude_unset=True)

    previous_company_id = forklift.company_id
    company_id = changes.pop('company_id', None)
    if company_id and company_id != forklift.company_id:
        if not (is_active_member(forklift.user_id, company_id) and is_active_member(user.id, company_id)):
            logger.warning(
                f"User {user.id} tried to move forklift {forklift_id} to company {company_id}"
            )
            raise PermissionDenied(
                "Both the owner and the editor must be members of the target company"
            )
        forklift.company_id = company_id

    changes = _clean_fields(changes)
    for field, value in changes.items():
        setattr(forklift, field, value)
    forklift.save()

    context = {"fields": sorted(changes)}
    if forklift.company_id != previous_company_id:
        context["moved_from"] = str(previous_company_id)

    logger.info(f"User {user.id} updated forklift {forklift.id}")
    log_action(
        company_id=forklift.company_id,
        action=AuditAction.UPDATE_FORKLIFT,
        target_type="Forklift",
        target_id=forklift.id,
        target_label=forklift.label,
        performed_by=user,
        context=context,
    )
    return forklift


def delete_forklift(forklift_id: UUID, user) -> None:
    """
    Delete a forklift. Only its owner may do so.
    """
    forklift = get_forklift_for_user(forklift_id, user.id)
    if forklift.user_id != user.id:
        logger.warning(f"User {user.id} tried to delete forklift {forklift_id} owned by {forklift.user_id}")
        raise PermissionDenied("Only the owner can delete this forklift")

    company_id = forklift.company_id
    label = forklift.label
    forklift.delete()

    logger.info(f"User {user.id} deleted forklift {forklift_id}")
    log_action(
        company_id=company_id,
        action=AuditAction.DELETE_FORKLIFT,
        target_type="Forklift",
        target_id=forklift_id,
        target_label=label,
        performed_by=user,
    )
