import logging
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from rest_framework.exceptions import NotFound

from documents.models import DocumentTemplate
from documents.services import gotenberg

logger = logging.getLogger(__name__)


def list_templates():
    return DocumentTemplate.objects.all().order_by('name')


def get_template(name: str) -> DocumentTemplate:
    template = DocumentTemplate.objects.filter(name=name).first()
    if template is None:
        raise NotFound(f'Template "{name}" not found.')
    return template


def _delete_file(name: Optional[str], storage) -> None:
    if not name:
        return
    try:
        storage.delete(name)
    except OSError:
        logger.warning('Failed to delete old template file=%s', name)


@transaction.atomic
def save_template(name: str, *, type: Optional[str] = None, content: Optional[str] = None,
                  file=None) -> DocumentTemplate:
    """Create or update the template called *name*.

    Uploading a new file replaces (and deletes) the previous one.
    """
    name = (name or '').strip()
    if not name:
        raise ValidationError('Template name is required.')

    template = DocumentTemplate.objects.filter(name=name).first() or DocumentTemplate(name=name)
    if type is not None:
        template.type = type
    elif file is not None:
        template.type = DocumentTemplate.TemplateType.DOCX
    if content is not None:
        template.content = content

    old_file = template.file.name if template.file else None
    if file is not None:
        template.file = file
    template.save()

    if file is not None and old_file and old_file != template.file.name:
        _delete_file(old_file, template.file.storage)

    logger.info('Template saved name=%s type=%s', template.name, template.type)
    return template


def delete_template(name: str) -> None:
    template = get_template(name)
    file_name = template.file.name if template.file else None
    storage = template.file.storage if template.file else None
    template.delete()
    if file_name:
        _delete_file(file_name, storage)


def read_docx(template: DocumentTemplate) -> bytes:
    if template.type != DocumentTemplate.TemplateType.DOCX or not template.file:
        raise NotFound(f'Template "{template.name}" has no DOCX file.')
    try:
        with template.file.open('rb') as fh:
            return fh.read()
    except (FileNotFoundError, OSError):
        raise NotFound(f'DOCX file for template "{template.name}" is missing.')


def generate_preview(name: str) -> bytes:
    """PDF rendering of a stored DOCX template, unfilled."""
    template = get_template(name)
    docx_bytes = read_docx(template)
    return gotenberg.convert_docx_to_pdf(docx_bytes, f'{template.name}.docx')
