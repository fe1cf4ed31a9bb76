"""DOCX to PDF conversion through a Gotenberg instance (LibreOffice route)."""
import logging

import requests
from django.conf import settings

from sita.exceptions import ConversionFailed

logger = logging.getLogger(__name__)

DOCX_MIME = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'


def _base_url() -> str:
    return str(getattr(settings, 'GOTENBERG_URL', '') or 'http://localhost:3000').rstrip('/')


def _timeout() -> float:
    return float(getattr(settings, 'GOTENBERG_TIMEOUT_SECONDS', 60) or 60)


def convert_docx_to_pdf(docx_bytes: bytes, filename: str = 'document.docx') -> bytes:
    url = f'{_base_url()}/forms/libreoffice/convert'
    try:
        response = requests.post(
            url,
            files={'files': (filename, docx_bytes, DOCX_MIME)},
            timeout=_timeout(),
        )
    except requests.RequestException:
        logger.exception('Gotenberg request failed url=%s', url)
        raise ConversionFailed('Failed to convert document to PDF')

    if response.status_code != 200:
        logger.error('Gotenberg HTTP %s: %s', response.status_code, response.text[:500])
        raise ConversionFailed('Failed to convert document to PDF')

    return response.content


def check_connection() -> bool:
    try:
        response = requests.get(f'{_base_url()}/health', timeout=5)
    except requests.RequestException:
        logger.warning('Gotenberg is not reachable at %s', _base_url())
        return False
    return response.status_code == 200
