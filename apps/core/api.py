from typing import Dict

from django.http import HttpRequest
from ninja import Router
from ninja.errors import HttpError

from .i18n import get_translations

router = Router(tags=["I18n"])


@router.get("/{language}", response=Dict[str, str], auth=None)
def get_language_table(request: HttpRequest, language: str):
    """
    **Public Endpoint**: the UI string table for a language (`en`, `sv`).
    """
    table = get_translations(language.lower())
    if table is None:
        raise HttpError(404, f"Unsupported language: {language}")
    return table
