"""Fill ``{placeholder}`` tokens in a DOCX template with python-docx.

Scalars replace ``{key}`` anywhere in the body, tables, headers and footers.
A table row holding ``{items.field}`` tokens, where ``items`` is a list in the
context, is repeated once per item.

Word often splits a token over several runs; a paragraph with a token is
rewritten into its first run, so that run's formatting wins.
"""
import io
import logging
import re
from copy import deepcopy
from typing import Any, Dict, Iterable

from django.core.exceptions import ValidationError
from docx import Document
from docx.table import _Row

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r'\{([A-Za-z_][\w]*(?:\.[\w]+)?)\}')


def _stringify(value: Any) -> str:
    return '' if value is None else str(value)


def _replace_in_paragraph(paragraph, values: Dict[str, Any]) -> None:
    runs = paragraph.runs
    if not runs:
        return
    text = ''.join(run.text for run in runs)
    if '{' not in text:
        return

    def _sub(match):
        key = match.group(1)
        return _stringify(values[key]) if key in values else match.group(0)

    new_text = PLACEHOLDER.sub(_sub, text)
    if new_text == text:
        return
    runs[0].text = new_text
    for run in runs[1:]:
        run.text = ''


def _fill_paragraphs(paragraphs: Iterable, values: Dict[str, Any]) -> None:
    for paragraph in paragraphs:
        _replace_in_paragraph(paragraph, values)


def _row_list_key(row, list_keys) -> str:
    for cell in row.cells:
        for match in PLACEHOLDER.finditer(cell.text):
            head = match.group(1).split('.', 1)[0]
            if '.' in match.group(1) and head in list_keys:
                return head
    return ''


def _fill_row(row, values: Dict[str, Any], list_keys) -> None:
    for cell in row.cells:
        _fill_container(cell, values, list_keys)


def _fill_table(table, values: Dict[str, Any], list_keys) -> None:
    for row in list(table.rows):
        key = _row_list_key(row, list_keys)
        if not key:
            _fill_row(row, values, list_keys)
            continue

        template_tr = row._tr
        for index, item in enumerate(values[key], start=1):
            new_tr = deepcopy(template_tr)
            template_tr.addprevious(new_tr)
            item_values = dict(values)
            item_values[f'{key}.no'] = index
            for field, field_value in (item or {}).items():
                item_values[f'{key}.{field}'] = field_value
            _fill_row(_Row(new_tr, table), item_values, list_keys)
        template_tr.getparent().remove(template_tr)


def _fill_container(container, values: Dict[str, Any], list_keys) -> None:
    _fill_paragraphs(container.paragraphs, values)
    for table in container.tables:
        _fill_table(table, values, list_keys)


def render_docx(template_bytes: bytes, context: Dict[str, Any]) -> bytes:
    try:
        document = Document(io.BytesIO(template_bytes))
    except Exception as e:
        logger.warning('Unreadable DOCX template: %s', e)
        raise ValidationError('Template is not a valid DOCX file.')

    list_keys = {k for k, v in context.items() if isinstance(v, (list, tuple))}
    values = {k: v for k, v in context.items() if k not in list_keys}
    for key in list_keys:
        values[key] = list(context[key])

    _fill_container(document, values, list_keys)
    for section in document.sections:
        _fill_container(section.header, values, list_keys)
        _fill_container(section.footer, values, list_keys)

    out = io.BytesIO()
    document.save(out)
    return out.getvalue()
