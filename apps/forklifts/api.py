"""
Forklift API endpoints.

CRUD for company forklift records, document downloads and print sheets.
Static routes are declared before `/{forklift_id}` so they are matched first.
"""
from typing import List, Optional
from uuid import UUID

from django.http import HttpRequest, HttpResponse
from ninja import Router
from ninja.errors import HttpError

from apps.identity.api import require_auth
from .attachment_service import document_filename
from .dtos import ForkliftIn, ForkliftPatch, ForkliftOut, CustomerGroupOut
from . import report_service, services

router = Router(tags=["Forklifts"])

PRINT_FORMATS = ('html', 'pdf')


def _print_response(html_content: str, format: str, filename: str) -> HttpResponse:
    if format not in PRINT_FORMATS:
        raise HttpError(400, f"Unsupported format: {format}")

    if format == 'pdf':
        try:
            pdf = report_service.html_to_pdf(html_content)
        except ImportError as exc:
            raise HttpError(501, str(exc))
        response = HttpResponse(pdf, content_type='application/pdf')
        response['Content-Disposition'] = f'inline; filename="{filename}.pdf"'
        return response

    return HttpResponse(html_content, content_type='text/html; charset=utf-8')


@router.get("", response=List[ForkliftOut], auth=None)
def list_forklifts(
    request: HttpRequest,
    company_id: Optional[UUID] = None,
    customer: Optional[str] = None,
    search: Optional[str] = None,
):
    """
    Forklifts of every company the caller is an active member of.

    Query Parameters:
    - company_id: only this company's forklifts
    - customer: exact customer name
    - search: matches customer, brand, model type or serial number
    """
    user = require_auth(request)
    return services.list_forklifts_for_user(
        user.id,
        company_id=company_id,
        customer=customer,
        search=search,
    )


@router.get("/by-customer", response=List[CustomerGroupOut], auth=None)
def list_forklifts_by_customer(
    request: HttpRequest,
    company_id: Optional[UUID] = None,
    search: Optional[str] = None,
):
    user = require_auth(request)
    forklifts = services.list_forklifts_for_user(user.id, company_id=company_id, search=search)
    return services.group_by_customer(forklifts)


@router.get("/print", auth=None)
def print_customer_list(
    request: HttpRequest,
    customer: str,
    company_id: Optional[UUID] = None,
    format: str = 'html',
    lang: str = 'en',
):
    """
    Printable list of one customer's forklifts.
    """
    user = require_auth(request)
    forklifts = services.list_forklifts_for_user(user.id, company_id=company_id, customer=customer)
    html_content = report_service.render_customer_list(customer, forklifts, lang)
    return _print_response(html_content, format, "forklift-list")


@router.post("", response={201: ForkliftOut}, auth=None)
def create_forklift(request: HttpRequest, payload: ForkliftIn):
    user = require_auth(request)
    forklift = services.create_forklift(user, payload)
    return 201, forklift


@router.get("/{forklift_id}", response=ForkliftOut, auth=None)
def get_forklift(request: HttpRequest, forklift_id: UUID):
    user = require_auth(request)
    return services.get_forklift_for_user(forklift_id, user.id)


@router.get("/{forklift_id}/print", auth=None)
def print_forklift(request: HttpRequest, forklift_id: UUID, format: str = 'html', lang: str = 'en'):
    """
    Printable service sheet for one forklift.
    """
    user = require_auth(request)
    forklift = services.get_forklift_for_user(forklift_id, user.id)
    html_content = report_service.render_forklift_sheet(forklift, lang)
    return _print_response(html_content, format, f"forklift-{forklift.id}")


@router.get("/{forklift_id}/documents/{interval}/{index}", auth=None)
def download_document(request: HttpRequest, forklift_id: UUID, interval: int, index: int):
    """
    Download a stored service document as a file.
    """
    user = require_auth(request)
    forklift = services.get_forklift_for_user(forklift_id, user.id)
    document = services.get_document(forklift, interval, index)

    response = HttpResponse(document.content, content_type=document.mime_type)
    response['Content-Disposition'] = f'attachment; filename="{document_filename(index, document)}"'
    return response


@router.patch("/{forklift_id}", response=ForkliftOut, auth=None)
def update_forklift(request: HttpRequest, forklift_id: UUID, payload: ForkliftPatch):
    user = require_auth(request)
    return services.update_forklift(forklift_id, user, payload)


@router.delete("/{forklift_id}", response={204: None}, auth=None)
def delete_forklift(request: HttpRequest, forklift_id: UUID):
    user = require_auth(request)
    services.delete_forklift(forklift_id, user)
    return 204, None
