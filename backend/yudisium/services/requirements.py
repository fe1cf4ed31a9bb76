import logging
from typing import Optional

from django.db import transaction
from django.db.models import Count, Max, QuerySet
from rest_framework.exceptions import NotFound

from sita.exceptions import Conflict
from yudisium.models import YudisiumRequirement

logger = logging.getLogger(__name__)

_UNSET = object()


def normalize_text(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def list_requirements() -> QuerySet:
    return YudisiumRequirement.objects.all().order_by('order', 'name')


def get_requirement(requirement_id) -> YudisiumRequirement:
    requirement = (
        YudisiumRequirement.objects.annotate(usage_count=Count('participant_requirements'))
        .filter(pk=requirement_id)
        .first()
    )
    if requirement is None:
        raise NotFound('Yudisium requirement not found.')
    return requirement


def _ensure_unique_name(name: str, exclude_id=None) -> None:
    qs = YudisiumRequirement.objects.filter(name=name)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise Conflict(f'Requirement name "{name}" is already in use.')


def _next_order() -> int:
    last = YudisiumRequirement.objects.aggregate(last=Max('order'))['last']
    return 0 if last is None else last + 1


def create_requirement(*, name: str, description=None, notes=None, order=None,
                       is_active: bool = True) -> YudisiumRequirement:
    name = name.strip()
    _ensure_unique_name(name)
    requirement = YudisiumRequirement.objects.create(
        name=name,
        description=normalize_text(description),
        notes=normalize_text(notes),
        order=_next_order() if order is None else order,
        is_active=is_active,
    )
    logger.info('Yudisium requirement created id=%s name=%s', requirement.pk, name)
    return requirement


def update_requirement(requirement_id, *, name=_UNSET, description=_UNSET, notes=_UNSET,
                       order=_UNSET, is_active=_UNSET) -> YudisiumRequirement:
    requirement = get_requirement(requirement_id)
    changed = []

    if name is not _UNSET:
        name = name.strip()
        _ensure_unique_name(name, exclude_id=requirement.pk)
        requirement.name = name
        changed.append('name')
    if description is not _UNSET:
        requirement.description = normalize_text(description)
        changed.append('description')
    if notes is not _UNSET:
        requirement.notes = normalize_text(notes)
        changed.append('notes')
    if order is not _UNSET:
        requirement.order = order
        changed.append('order')
    if is_active is not _UNSET:
        requirement.is_active = is_active
        changed.append('is_active')

    if changed:
        requirement.save(update_fields=changed + ['updated_at'])
    return requirement


def toggle_requirement(requirement_id) -> YudisiumRequirement:
    requirement = get_requirement(requirement_id)
    requirement.is_active = not requirement.is_active
    requirement.save(update_fields=['is_active', 'updated_at'])
    return requirement


@transaction.atomic
def _move_to_edge(requirement_id, edge: str) -> YudisiumRequirement:
    requirement = get_requirement(requirement_id)
    others = list(
        YudisiumRequirement.objects.exclude(pk=requirement.pk)
        .order_by('order', 'name')
        .values_list('id', flat=True)
    )
    ordered = [requirement.pk] + others if edge == 'top' else others + [requirement.pk]
    for index, pk in enumerate(ordered):
        YudisiumRequirement.objects.filter(pk=pk).update(order=index)
    return get_requirement(requirement.pk)


def move_to_top(requirement_id) -> YudisiumRequirement:
    return _move_to_edge(requirement_id, 'top')


def move_to_bottom(requirement_id) -> YudisiumRequirement:
    return _move_to_edge(requirement_id, 'bottom')


def delete_requirement(requirement_id) -> None:
    requirement = get_requirement(requirement_id)
    if requirement.usage_count:
        raise Conflict('Requirement cannot be deleted because participants already submitted documents for it.')
    requirement.delete()
    logger.info('Yudisium requirement deleted id=%s', requirement_id)
