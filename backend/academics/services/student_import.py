"""Bulk student import from CSV or XLSX.

Expected columns (header row, case-insensitive): ``nim``, ``full_name``,
``email``. Optional: ``phone_number``, ``password``. Students are matched
on NIM; existing rows are updated, new ones get the Mahasiswa role.
"""
import csv
import io
import logging
from typing import Dict, Iterable, List

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from openpyxl import load_workbook

from accounts import roles
from accounts.utils import assign_roles

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('nim', 'full_name', 'email')


def _normalize_header(value) -> str:
    return str(value or '').strip().lower().replace(' ', '_')


def _check_columns(headers: Iterable[str]) -> None:
    present = set(headers)
    missing = [c for c in REQUIRED_COLUMNS if c not in present]
    if missing:
        raise ValidationError({'columns': [f'Missing required column(s): {", ".join(missing)}']})


def read_rows(uploaded) -> List[Dict[str, str]]:
    """Parse an uploaded CSV/XLSX file into a list of dict rows.

    The header row is checked even when the file has no data rows.
    """
    name = str(getattr(uploaded, 'name', '') or '').lower()

    if name.endswith('.xlsx'):
        workbook = load_workbook(uploaded, read_only=True, data_only=True)
        sheet = workbook.active
        rows_iter = sheet.iter_rows(values_only=True)
        try:
            headers = [_normalize_header(h) for h in next(rows_iter)]
        except StopIteration:
            headers = []
        _check_columns(headers)
        rows = []
        for values in rows_iter:
            if values is None or all(v in (None, '') for v in values):
                continue
            rows.append({headers[i]: ('' if v is None else str(v).strip()) for i, v in enumerate(values) if i < len(headers)})
        return rows

    if name.endswith('.csv'):
        try:
            data = uploaded.read().decode('utf-8-sig')
        except UnicodeDecodeError:
            raise ValidationError('CSV file must be UTF-8 encoded.')
        reader = csv.DictReader(io.StringIO(data))
        _check_columns(_normalize_header(h) for h in reader.fieldnames or [])
        return [
            {_normalize_header(k): (v or '').strip() for k, v in row.items() if k is not None}
            for row in reader
        ]

    raise ValidationError('Only .csv or .xlsx files are supported.')


@transaction.atomic
def import_students(rows: Iterable[Dict[str, str]]) -> dict:
    rows = list(rows)
    if rows:
        _check_columns(rows[0])

    User = get_user_model()
    created = 0
    updated = 0
    errors = []

    for idx, row in enumerate(rows, start=1):
        nim = (row.get('nim') or '').strip()
        full_name = (row.get('full_name') or '').strip()
        email = (row.get('email') or '').strip()
        if not nim or not full_name:
            errors.append(f'Row {idx}: nim and full_name are required')
            continue

        user = User.objects.filter(Q(identity_number=nim) | Q(username=nim)).first()
        if user is None:
            user = User(username=nim, identity_number=nim)
            password = (row.get('password') or '').strip()
            if password:
                user.set_password(password)
            else:
                user.set_unusable_password()
            created += 1
        else:
            user.identity_number = nim
            updated += 1

        user.full_name = full_name
        user.email = email
        if row.get('phone_number'):
            user.phone_number = row['phone_number'].strip()
        user.save()
        assign_roles(user, [roles.MAHASISWA])

    logger.info('Student import finished created=%s updated=%s errors=%s', created, updated, len(errors))
    return {'created': created, 'updated': updated, 'errors': errors}
