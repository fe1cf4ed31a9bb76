import logging
import re
from datetime import date, datetime
from typing import Optional, Tuple

from django.core.files.base import ContentFile

from documents.models import Document
from documents.services import docx_filler, gotenberg
from documents.services import template_service
from documents.services.uploads import get_or_create_document_type

logger = logging.getLogger(__name__)

APPLICATION_LETTER_TEMPLATE = 'surat_permohonan'
APPLICATION_LETTER_TYPE = 'Surat Permohonan KP'

MONTHS_ID = (
    'Januari', 'Februari', 'Maret', 'April', 'Mei', 'Juni',
    'Juli', 'Agustus', 'September', 'Oktober', 'November', 'Desember',
)


def format_date_id(value) -> str:
    """``date(2025, 3, 7)`` -> ``'7 Maret 2025'``."""
    if not value:
        return ''
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        value = value.date()
    return f'{value.day} {MONTHS_ID[value.month - 1]} {value.year}'


def _letter_filename(document_number: str, extension: str) -> str:
    safe = re.sub(r'[^a-zA-Z0-9]', '_', document_number or 'surat')
    return f'Surat_Permohonan_{safe}.{extension}'


def generate_application_letter(data: dict, *, as_pdf: bool = False, user=None) -> Tuple[str, bytes]:
    """Fill the stored application-letter template.

    ``data`` keys: document_number, date_issued, company_name,
    company_address, start_date, end_date and members (``[{name, nim}]``).
    Returns ``(filename, bytes)``; DOCX unless *as_pdf*. When *user* is given
    the letter is also kept as a ``Surat Permohonan KP`` document.
    """
    template = template_service.get_template(APPLICATION_LETTER_TEMPLATE)
    template_bytes = template_service.read_docx(template)

    context = {
        'nomor_surat': data.get('document_number') or '',
        'tanggal_surat': format_date_id(data.get('date_issued')),
        'nama_perusahaan': data.get('company_name') or '',
        'alamat_perusahaan': data.get('company_address') or '',
        'tanggal_mulai': format_date_id(data.get('start_date')),
        'tanggal_selesai': format_date_id(data.get('end_date')),
        'mahasiswa': [
            {'nama': m.get('name') or '', 'nim': m.get('nim') or ''}
            for m in (data.get('members') or [])
        ],
    }

    docx_bytes = docx_filler.render_docx(template_bytes, context)
    filename = _letter_filename(context['nomor_surat'], 'docx')
    logger.info('Application letter generated number=%s members=%s', context['nomor_surat'], len(context['mahasiswa']))

    content = docx_bytes
    if as_pdf:
        content = gotenberg.convert_docx_to_pdf(docx_bytes, filename)
        filename = _letter_filename(context['nomor_surat'], 'pdf')

    if user is not None:
        _save_letter(user, filename, content)
    return filename, content


def _save_letter(user, filename: str, content: bytes) -> Document:
    document = Document(
        user=user,
        document_type=get_or_create_document_type(APPLICATION_LETTER_TYPE),
        file_name=filename,
    )
    document.file.save(filename, ContentFile(content), save=True)
    logger.info('Application letter stored id=%s user=%s', document.pk, user.pk)
    return document
