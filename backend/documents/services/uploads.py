import logging
import os

from django.conf import settings
from django.core.exceptions import ValidationError
from rest_framework.exceptions import NotFound

from documents.models import Document, DocumentType

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = {'application/pdf', 'application/x-pdf'}


def _check_size(upload, setting_name: str, default_mb: int) -> None:
    max_mb = int(getattr(settings, setting_name, default_mb))
    if upload.size > max_mb * 1024 * 1024:
        raise ValidationError(f'File must not exceed {max_mb} MB.')


def validate_pdf(upload) -> None:
    ext = os.path.splitext(upload.name or '')[1].lower()
    content_type = str(getattr(upload, 'content_type', '') or '').lower()
    if ext != '.pdf' or (content_type and content_type not in PDF_CONTENT_TYPES):
        raise ValidationError('Only PDF files are allowed.')
    _check_size(upload, 'UPLOAD_MAX_DOCUMENT_MB', 10)


def validate_docx(upload) -> None:
    ext = os.path.splitext(upload.name or '')[1].lower()
    if ext != '.docx':
        raise ValidationError('Only .docx files are allowed.')
    _check_size(upload, 'UPLOAD_MAX_TEMPLATE_MB', 5)


def get_or_create_document_type(name: str) -> DocumentType:
    name = (name or '').strip()
    if not name:
        raise ValidationError('Document type is required.')
    document_type = DocumentType.objects.filter(name__iexact=name).first()
    if document_type is None:
        document_type = DocumentType.objects.create(name=name)
    return document_type


def upload_document(user, upload, document_type_name: str = '') -> Document:
    """Store a PDF for *user*; a blank type name leaves the document untyped."""
    validate_pdf(upload)
    name = (document_type_name or '').strip()
    document = Document.objects.create(
        user=user,
        document_type=get_or_create_document_type(name) if name else None,
        file_name=os.path.basename(upload.name),
        file=upload,
    )
    logger.info('Document uploaded id=%s user=%s type=%s', document.pk, getattr(user, 'pk', None), document.document_type)
    return document


def get_document(document_id) -> Document:
    document = Document.objects.select_related('document_type', 'user').filter(pk=document_id).first()
    if document is None:
        raise NotFound('Document not found.')
    return document
