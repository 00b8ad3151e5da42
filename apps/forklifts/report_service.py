"""
Print sheets for forklifts.

Renders HTML service sheets from Django templates and, on request, turns
them into PDF with WeasyPrint.
"""
import logging
from io import BytesIO
from typing import List

from django.template.loader import render_to_string
from django.utils import timezone

from apps.core.i18n import normalize_language, translate
from .models import Forklift

logger = logging.getLogger(__name__)

LABEL_KEYS = (
    'app.title',
    'forklift.customer',
    'forklift.brand',
    'forklift.model',
    'forklift.serial',
    'forklift.engine',
    'forklift.transmission',
    'forklift.tires',
    'forklift.notes',
    'forklift.service.info',
    'forklift.service.last',
    'forklift.service.hours',
    'forklift.service.next',
    'forklift.filters',
    'forklift.lubricants',
    'forklift.documents',
    'forklift.list',
    'forklift.total',
    'service.overdue',
    'service.days_until',
)


def _get_weasyprint():
    """Lazy import WeasyPrint to avoid import errors if not installed."""
    try:
        from weasyprint import HTML
        return HTML
    except ImportError:
        logger.error("WeasyPrint is not installed. Install with: pip install forklift-tracker[pdf]")
        raise ImportError(
            "WeasyPrint is required for PDF generation. "
            "Install it with: pip install forklift-tracker[pdf]"
        )


def get_labels(language: str) -> dict:
    """
    Translated labels keyed for template lookup (`forklift.brand` becomes
    `forklift_brand`).
    """
    return {key.replace('.', '_'): translate(key, language) for key in LABEL_KEYS}


def _interval_rows(forklift: Forklift, language: str) -> List[dict]:
    rows = []
    for interval in forklift.service_intervals():
        rows.append({
            'title': translate(f"service.{interval['hours']}h", language),
            'filters': interval['filters'],
            'lubricants': interval['lubricants'],
            'document_count': len(interval['documents']),
        })
    return rows


def _base_context(language: str) -> dict:
    language = normalize_language(language)
    return {
        'language': language,
        'labels': get_labels(language),
        'generated_at': timezone.now().strftime('%Y-%m-%d %H:%M'),
    }


def render_forklift_sheet(forklift: Forklift, language: str = 'en') -> str:
    """HTML service sheet for one forklift."""
    context = _base_context(language)
    context.update({
        'forklift': forklift,
        'days_until_service': forklift.days_until_service(),
        'service_status': forklift.service_status(),
        'intervals': _interval_rows(forklift, context['language']),
    })
    return render_to_string('forklifts/print_sheet.html', context)


def render_customer_list(customer: str, forklifts: List[Forklift], language: str = 'en') -> str:
    """HTML list of one customer's forklifts with the total count."""
    context = _base_context(language)
    context.update({
        'customer': customer,
        'forklifts': forklifts,
        'total': len(forklifts),
    })
    return render_to_string('forklifts/customer_list.html', context)


def html_to_pdf(html_content: str) -> bytes:
    """
    Render an HTML print sheet to PDF bytes.

    Raises:
        ImportError: WeasyPrint is not installed.
    """
    HTML = _get_weasyprint()

    pdf_file = BytesIO()
    HTML(string=html_content).write_pdf(pdf_file)
    pdf_file.seek(0)

    return pdf_file.read()
