"""CPL / CPMK master data.

Codes are unique per table. Records that are already referenced elsewhere
(student CPL scores, yudisium recommendations, assessment criteria) cannot
be deleted; deactivate them with the toggle instead.
"""
import logging

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from OBE.models import Cpl, Cpmk
from sita.exceptions import Conflict

logger = logging.getLogger(__name__)

_UNSET = object()


# CPL

def list_cpls() -> QuerySet:
    return Cpl.objects.all().order_by('code')


def get_cpl(cpl_id) -> Cpl:
    cpl = Cpl.objects.filter(pk=cpl_id).first()
    if cpl is None:
        raise NotFound('CPL not found.')
    return cpl


def _ensure_unique_cpl_code(code: str, exclude_id=None) -> None:
    qs = Cpl.objects.filter(code=code)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise Conflict(f'CPL code "{code}" is already in use.')


def create_cpl(*, code: str, description: str, minimal_score: int) -> Cpl:
    _ensure_unique_cpl_code(code)
    return Cpl.objects.create(code=code, description=description, minimal_score=minimal_score)


def update_cpl(cpl_id, *, code=_UNSET, description=_UNSET, minimal_score=_UNSET) -> Cpl:
    cpl = get_cpl(cpl_id)
    changed = []
    if code is not _UNSET:
        _ensure_unique_cpl_code(code, exclude_id=cpl.pk)
        cpl.code = code
        changed.append('code')
    if description is not _UNSET:
        cpl.description = description
        changed.append('description')
    if minimal_score is not _UNSET:
        cpl.minimal_score = minimal_score
        changed.append('minimal_score')
    if changed:
        cpl.save(update_fields=changed + ['updated_at'])
    return cpl


def toggle_cpl(cpl_id) -> Cpl:
    cpl = get_cpl(cpl_id)
    cpl.is_active = not cpl.is_active
    cpl.save(update_fields=['is_active', 'updated_at'])
    return cpl


def delete_cpl(cpl_id) -> None:
    cpl = get_cpl(cpl_id)
    if cpl.student_scores.exists() or cpl.yudisium_recommendations.exists():
        raise Conflict(
            'CPL cannot be deleted because it already has related data '
            '(student scores or yudisium recommendations).'
        )
    cpl.delete()
    logger.info('CPL deleted code=%s', cpl.code)


# CPMK

def list_cpmks(cpmk_type: str = None) -> QuerySet:
    qs = Cpmk.objects.all().order_by('code')
    if cpmk_type:
        qs = qs.filter(type=cpmk_type)
    return qs


def get_cpmk(cpmk_id) -> Cpmk:
    cpmk = Cpmk.objects.filter(pk=cpmk_id).first()
    if cpmk is None:
        raise NotFound('CPMK not found.')
    return cpmk


def _ensure_unique_cpmk_code(code: str, exclude_id=None) -> None:
    qs = Cpmk.objects.filter(code=code)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise Conflict(f'CPMK code "{code}" is already in use.')


def create_cpmk(*, code: str, description: str, type: str) -> Cpmk:
    _ensure_unique_cpmk_code(code)
    return Cpmk.objects.create(code=code, description=description, type=type)


def update_cpmk(cpmk_id, *, code=_UNSET, description=_UNSET, type=_UNSET) -> Cpmk:
    cpmk = get_cpmk(cpmk_id)
    changed = []
    if code is not _UNSET:
        _ensure_unique_cpmk_code(code, exclude_id=cpmk.pk)
        cpmk.code = code
        changed.append('code')
    if description is not _UNSET:
        cpmk.description = description
        changed.append('description')
    if type is not _UNSET:
        cpmk.type = type
        changed.append('type')
    if changed:
        cpmk.save(update_fields=changed + ['updated_at'])
    return cpmk


def toggle_cpmk(cpmk_id) -> Cpmk:
    cpmk = get_cpmk(cpmk_id)
    cpmk.is_active = not cpmk.is_active
    cpmk.save(update_fields=['is_active', 'updated_at'])
    return cpmk


def delete_cpmk(cpmk_id) -> None:
    cpmk = get_cpmk(cpmk_id)
    if cpmk.assessment_criteria.exists():
        raise Conflict('CPMK cannot be deleted because it is used by assessment criteria.')
    cpmk.delete()
    logger.info('CPMK deleted code=%s', cpmk.code)
