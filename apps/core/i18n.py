"""
String tables for the supported UI languages.

The single-page client fetches a whole table once and looks keys up
locally; the print sheets use `translate()` server-side.
"""
from typing import Dict

DEFAULT_LANGUAGE = 'en'

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    'en': {
        "app.title": "Forklift Service Tracker",
        "auth.login": "Login",
        "auth.register": "Register",
        "auth.username": "Username",
        "auth.password": "Password",
        "forklift.customer": "Customer",
        "forklift.brand": "Brand",
        "forklift.model": "Model Type",
        "forklift.serial": "Serial Number",
        "forklift.engine": "Engine Specifications",
        "forklift.transmission": "Transmission",
        "forklift.tires": "Tire Specifications",
        "forklift.mast": "Mast Information",
        "forklift.forks": "Fork Details",
        "forklift.notes": "Service Notes",
        "forklift.service.info": "Service Information",
        "forklift.service.last": "Last Service",
        "forklift.service.hours": "Service Hours",
        "forklift.service.next": "Next Service Due",
        "forklift.filters": "Filters",
        "forklift.lubricants": "Lubricants",
        "forklift.documents": "Documents",
        "forklift.list": "Forklift List",
        "forklift.total": "Total Forklifts",
        "service.500h": "500h Service",
        "service.1000h": "1000h Service",
        "service.1500h": "1500h Service",
        "service.2000h": "2000h Service",
        "service.overdue": "Overdue",
        "service.days_until": "days until service",
        "action.add": "Add Forklift",
        "action.edit": "Edit",
        "action.delete": "Delete",
        "action.save": "Save",
    },
    'sv': {
        "app.title": "Truckunderhållsspårare",
        "auth.login": "Logga in",
        "auth.register": "Registrera",
        "auth.username": "Användarnamn",
        "auth.password": "Lösenord",
        "forklift.customer": "Kund",
        "forklift.brand": "Märke",
        "forklift.model": "Modelltyp",
        "forklift.serial": "Serienummer",
        "forklift.engine": "Motorspecifikationer",
        "forklift.transmission": "Transmission",
        "forklift.tires": "Däckspecifikationer",
        "forklift.mast": "Mastinformation",
        "forklift.forks": "Gaffeldetaljer",
        "forklift.notes": "Serviceanteckningar",
        "forklift.service.info": "Serviceinformation",
        "forklift.service.last": "Senaste service",
        "forklift.service.hours": "Servicetimmar",
        "forklift.service.next": "Nästa service",
        "forklift.filters": "Filter",
        "forklift.lubricants": "Smörjmedel",
        "forklift.documents": "Dokument",
        "forklift.list": "Trucklista",
        "forklift.total": "Antal truckar",
        "service.500h": "500h Service",
        "service.1000h": "1000h Service",
        "service.1500h": "1500h Service",
        "service.2000h": "2000h Service",
        "service.overdue": "Försenad",
        "service.days_until": "dagar till service",
        "action.add": "Lägg till truck",
        "action.edit": "Redigera",
        "action.delete": "Ta bort",
        "action.save": "Spara",
    },
}

SUPPORTED_LANGUAGES = tuple(TRANSLATIONS)


def normalize_language(language: str | None) -> str:
    """Map `sv-SE`, `SV` etc. onto a supported table, defaulting to English."""
    if not language:
        return DEFAULT_LANGUAGE
    code = language.strip().lower().replace('_', '-').split('-')[0]
    return code if code in TRANSLATIONS else DEFAULT_LANGUAGE


def translate(key: str, language: str = DEFAULT_LANGUAGE) -> str:
    table = TRANSLATIONS.get(normalize_language(language), {})
    return table.get(key) or TRANSLATIONS[DEFAULT_LANGUAGE].get(key) or key


def get_translations(language: str) -> Dict[str, str] | None:
    return TRANSLATIONS.get(language)

