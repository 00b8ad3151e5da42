"""
Attachment service for forklift service documents.

Documents travel and are stored inline as base64 `data:` URLs, one list per
service interval. This module validates them on the way in and decodes
them for download.
"""
import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from django.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Allowed document types and the extension used for downloads
ALLOWED_MIME_TYPES = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/gif': '.gif',
    'image/webp': '.webp',
    'application/pdf': '.pdf',
}

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB

DATA_URL_PATTERN = re.compile(
    r'^data:(?P<mime_type>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$',
    re.DOTALL,
)


class InvalidDocument(ValueError):
    pass


@dataclass(frozen=True)
class Document:
    content: bytes
    mime_type: str

    @property
    def extension(self) -> str:
        return ALLOWED_MIME_TYPES.get(self.mime_type, '.bin')


def parse_data_url(data_url: str) -> Tuple[str, str]:
    """
    Split a data URL into (mime_type, base64 payload).

    Raises:
        InvalidDocument: not a base64 data URL.
    """
    match = DATA_URL_PATTERN.match(data_url or '')
    if not match:
        raise InvalidDocument("Document must be a base64 data URL")
    return match.group('mime_type').lower(), match.group('payload')


def decode_document(data_url: str) -> Document:
    """
    Decode and validate a stored document.

    Raises:
        InvalidDocument: malformed URL, disallowed type or oversized file.
    """
    mime_type, payload = parse_data_url(data_url)
    if mime_type not in ALLOWED_MIME_TYPES:
        raise InvalidDocument(
            f"Invalid file type: {mime_type}. Allowed: JPEG, PNG, GIF, WEBP, PDF"
        )

    # Reject oversized payloads before decoding
    if len(payload) * 3 // 4 > MAX_FILE_SIZE + 2:
        raise InvalidDocument(_too_large_message())

    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidDocument("Document payload is not valid base64")

    if len(content) > MAX_FILE_SIZE:
        raise InvalidDocument(_too_large_message())

    return Document(content=content, mime_type=mime_type)


def _too_large_message() -> str:
    return f"File too large. Maximum size is {MAX_FILE_SIZE // (1024 * 1024)} MB"


def validate_document(data_url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a single document.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        decode_document(data_url)
    except InvalidDocument as exc:
        return False, str(exc)
    return True, None


def validate_documents(field_name: str, documents: Optional[Iterable[str]]) -> List[str]:
    """
    Validate every document of one interval field and return them as a list.

    Raises:
        ValidationError: naming the field and the position of the bad document.
    """
    documents = list(documents or [])
    for index, data_url in enumerate(documents):
        if not isinstance(data_url, str):
            raise ValidationError(f"{field_name}[{index}]: document must be a string")
        is_valid, error = validate_document(data_url)
        if not is_valid:
            logger.info(f"Rejected document {field_name}[{index}]: {error}")
            raise ValidationError(f"{field_name}[{index}]: {error}")
    return documents


def document_filename(index: int, document: Document) -> str:
    """Download name for the document at zero-based `index`."""
    return f"forklift-document-{index + 1}{document.extension}"
