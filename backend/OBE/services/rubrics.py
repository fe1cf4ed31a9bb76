"""Seminar and defence rubric configuration.

Two invariants are guarded on every write:

* Score budget: the ``max_score`` of all *active* criteria in one budget
  never sums above 100. Seminar criteria form one budget on their own
  (role ``default``). Defence criteria of both the examiner and the
  supervisor role draw from a single shared budget.
* Rubric ranges: every rubric under a criteria is a closed band
  ``[min_score, max_score]`` inside ``[0, criteria.max_score]``, and no two
  bands of the same criteria overlap (boundaries included).

The totals are aggregated from the rows on every check; nothing is cached.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max, Prefetch, Sum
from rest_framework.exceptions import NotFound

from OBE.models import AssessmentCriteria, AssessmentRubric, AssessmentScore, Cpmk
from sita.exceptions import Conflict

logger = logging.getLogger(__name__)

SCORE_CAP = 100

_UNSET = object()


@dataclass(frozen=True)
class RubricScope:
    applies_to: str
    roles: Tuple[str, ...]
    # defence: examiner + supervisor criteria share one 100-point budget
    shared_role_budget: bool = False

    def resolve_role(self, role: Optional[str]) -> str:
        if not role and len(self.roles) == 1:
            return self.roles[0]
        if role not in self.roles:
            raise ValidationError(f"Invalid role. Use one of: {', '.join(self.roles)}.")
        return role

    def budget_filter(self, role: str) -> dict:
        if self.shared_role_budget:
            return {'applies_to': self.applies_to, 'role__in': self.roles}
        return {'applies_to': self.applies_to, 'role': role}


SEMINAR = RubricScope(
    applies_to=AssessmentCriteria.AppliesTo.SEMINAR,
    roles=(AssessmentCriteria.AssessorRole.DEFAULT,),
)
DEFENCE = RubricScope(
    applies_to=AssessmentCriteria.AppliesTo.DEFENCE,
    roles=(AssessmentCriteria.AssessorRole.EXAMINER, AssessmentCriteria.AssessorRole.SUPERVISOR),
    shared_role_budget=True,
)

SCOPES = {
    SEMINAR.applies_to: SEMINAR,
    DEFENCE.applies_to: DEFENCE,
}


def get_scope(applies_to: str) -> RubricScope:
    try:
        return SCOPES[applies_to]
    except KeyError:
        raise NotFound(f'Unknown rubric context "{applies_to}".')


# Budget

def active_total(scope: RubricScope, role: Optional[str] = None, exclude_id=None) -> int:
    role = scope.resolve_role(role) if not scope.shared_role_budget else role
    qs = AssessmentCriteria.objects.filter(is_active=True, **scope.budget_filter(role))
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.aggregate(total=Sum('max_score'))['total'] or 0


def remaining_budget(scope: RubricScope, role: Optional[str] = None, exclude_id=None) -> int:
    return SCORE_CAP - active_total(scope, role, exclude_id=exclude_id)


def _check_budget(scope: RubricScope, role: str, max_score: int, exclude_id=None) -> None:
    remaining = remaining_budget(scope, role, exclude_id=exclude_id)
    if max_score > remaining:
        raise Conflict(f'Score exceeds the limit. Remaining score available: {remaining} of {SCORE_CAP}.')


# Lookups

def _validate_max_score(value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError('Criteria max score must be an integer greater than 0.')


def _clean_name(name) -> Optional[str]:
    if name is None:
        return None
    name = str(name).strip()
    return name or None


def _get_thesis_cpmk(cpmk_id) -> Cpmk:
    cpmk = Cpmk.objects.filter(pk=cpmk_id).first()
    if cpmk is None:
        raise NotFound('CPMK not found.')
    if cpmk.type != Cpmk.CpmkType.THESIS:
        raise ValidationError('Only CPMK of type thesis can be used.')
    return cpmk


def _ensure_in_scope(scope: RubricScope, criteria: AssessmentCriteria) -> None:
    if criteria.applies_to != scope.applies_to:
        raise ValidationError(f'Criteria is not part of the {scope.applies_to} rubric configuration.')
    if criteria.role not in scope.roles:
        raise ValidationError(f'Criteria role is not valid for the {scope.applies_to} context.')


def get_criteria(scope: RubricScope, criteria_id) -> AssessmentCriteria:
    criteria = AssessmentCriteria.objects.select_related('cpmk').filter(pk=criteria_id).first()
    if criteria is None:
        raise NotFound('Criteria not found.')
    _ensure_in_scope(scope, criteria)
    return criteria


def get_rubric(scope: RubricScope, rubric_id) -> AssessmentRubric:
    rubric = AssessmentRubric.objects.select_related('criteria').filter(pk=rubric_id).first()
    if rubric is None:
        raise NotFound('Rubric not found.')
    _ensure_in_scope(scope, rubric.criteria)
    return rubric


def criteria_has_scores(criteria_ids: Iterable[int]) -> bool:
    return AssessmentScore.objects.filter(criteria_id__in=list(criteria_ids)).exists()


# Criteria

def create_criteria(scope: RubricScope, *, cpmk_id, max_score: int, role: Optional[str] = None,
                    name: Optional[str] = None) -> AssessmentCriteria:
    cpmk = Cpmk.objects.filter(pk=cpmk_id).first()
    if cpmk is None:
        raise NotFound('CPMK not found.')
    if not cpmk.is_active:
        raise ValidationError('CPMK is not active.')
    if cpmk.type != Cpmk.CpmkType.THESIS:
        raise ValidationError('Only CPMK of type thesis can be used.')

    role = scope.resolve_role(role)
    _validate_max_score(max_score)

    with transaction.atomic():
        _check_budget(scope, role, max_score)
        last_order = (
            AssessmentCriteria.objects.filter(cpmk=cpmk, applies_to=scope.applies_to, role=role)
            .aggregate(last=Max('display_order'))['last']
        ) or 0
        criteria = AssessmentCriteria.objects.create(
            cpmk=cpmk,
            name=_clean_name(name),
            applies_to=scope.applies_to,
            role=role,
            max_score=max_score,
            display_order=last_order + 1,
        )

    logger.info('Criteria created id=%s scope=%s/%s max_score=%s', criteria.pk, scope.applies_to, role, max_score)
    return criteria


def update_criteria(scope: RubricScope, criteria_id, *, name=_UNSET, max_score=_UNSET) -> AssessmentCriteria:
    criteria = get_criteria(scope, criteria_id)
    changed = []

    if name is not _UNSET:
        criteria.name = _clean_name(name)
        changed.append('name')

    if max_score is not _UNSET:
        _validate_max_score(max_score)
        highest = criteria.rubrics.aggregate(highest=Max('max_score'))['highest'] or 0
        if highest > max_score:
            raise ValidationError(
                f'New criteria max score ({max_score}) must not be lower than the highest rubric score ({highest}).'
            )
        # inactive criteria do not consume budget until they are activated
        if criteria.is_active:
            _check_budget(scope, criteria.role, max_score, exclude_id=criteria.pk)
        criteria.max_score = max_score
        changed.append('max_score')

    if not changed:
        raise ValidationError('Nothing to update.')

    criteria.save(update_fields=changed + ['updated_at'])
    return criteria


def toggle_criteria(scope: RubricScope, criteria_id, is_active: bool) -> AssessmentCriteria:
    criteria = get_criteria(scope, criteria_id)

    if is_active and not criteria.is_active:
        remaining = remaining_budget(scope, criteria.role)
        if criteria.max_score > remaining:
            raise Conflict(
                f'Cannot activate criteria. Its score ({criteria.max_score}) exceeds the remaining '
                f'budget ({remaining} of {SCORE_CAP}).'
            )

    criteria.is_active = bool(is_active)
    criteria.save(update_fields=['is_active', 'updated_at'])
    return criteria


def delete_criteria(scope: RubricScope, criteria_id) -> None:
    criteria = get_criteria(scope, criteria_id)
    if criteria_has_scores([criteria.pk]):
        raise Conflict('Criteria cannot be deleted because it is already used in assessment data.')

    with transaction.atomic():
        criteria.rubrics.all().delete()
        criteria.delete()
    logger.info('Criteria deleted id=%s scope=%s', criteria_id, scope.applies_to)


def remove_cpmk_config(scope: RubricScope, cpmk_id, role: Optional[str] = None) -> dict:
    """Drop every criteria (and its rubrics) a CPMK has in this scope/role."""
    cpmk = _get_thesis_cpmk(cpmk_id)
    role = scope.resolve_role(role)

    criteria_ids = list(
        AssessmentCriteria.objects.filter(cpmk=cpmk, applies_to=scope.applies_to, role=role)
        .values_list('id', flat=True)
    )
    if criteria_has_scores(criteria_ids):
        raise Conflict(
            'CPMK configuration cannot be removed because some of its criteria are already used in assessment data.'
        )

    with transaction.atomic():
        deleted_rubrics, _ = AssessmentRubric.objects.filter(criteria_id__in=criteria_ids).delete()
        deleted_criteria, _ = AssessmentCriteria.objects.filter(id__in=criteria_ids).delete()

    logger.info('CPMK config removed cpmk=%s scope=%s/%s criteria=%s rubrics=%s',
                cpmk.code, scope.applies_to, role, deleted_criteria, deleted_rubrics)
    return {'deleted_criteria': deleted_criteria, 'deleted_rubrics': deleted_rubrics}


# Rubrics

def ranges_overlap(a_min: int, a_max: int, b_min: int, b_max: int) -> bool:
    """Closed ranges overlap unless one ends strictly before the other starts."""
    return not (a_max < b_min or a_min > b_max)


def _check_range(min_score: int, max_score: int, criteria: AssessmentCriteria) -> None:
    if min_score < 0:
        raise ValidationError('Minimum score must be greater than or equal to 0.')
    if min_score > max_score:
        raise ValidationError('Minimum score must be less than or equal to the maximum score.')
    if max_score > criteria.max_score:
        raise ValidationError(
            f'Rubric max score ({max_score}) must not exceed the criteria max score ({criteria.max_score}).'
        )


def _check_overlap(criteria: AssessmentCriteria, min_score: int, max_score: int, exclude_id=None) -> None:
    others = AssessmentRubric.objects.filter(criteria=criteria)
    if exclude_id is not None:
        others = others.exclude(pk=exclude_id)
    for low, high in others.values_list('min_score', 'max_score'):
        if ranges_overlap(min_score, max_score, low, high):
            raise ValidationError('Rubric score range overlaps another rubric.')


def create_rubric(scope: RubricScope, criteria_id, *, description: str, min_score: int,
                  max_score: int) -> AssessmentRubric:
    criteria = get_criteria(scope, criteria_id)
    _check_range(min_score, max_score, criteria)

    with transaction.atomic():
        _check_overlap(criteria, min_score, max_score)
        last_order = criteria.rubrics.aggregate(last=Max('display_order'))['last'] or 0
        return AssessmentRubric.objects.create(
            criteria=criteria,
            description=description,
            min_score=min_score,
            max_score=max_score,
            display_order=last_order + 1,
        )


def update_rubric(scope: RubricScope, rubric_id, *, description=_UNSET, min_score=_UNSET,
                  max_score=_UNSET) -> AssessmentRubric:
    rubric = get_rubric(scope, rubric_id)

    new_min = rubric.min_score if min_score is _UNSET else min_score
    new_max = rubric.max_score if max_score is _UNSET else max_score
    _check_range(new_min, new_max, rubric.criteria)
    _check_overlap(rubric.criteria, new_min, new_max, exclude_id=rubric.pk)

    changed = []
    if description is not _UNSET:
        rubric.description = description
        changed.append('description')
    if min_score is not _UNSET:
        rubric.min_score = min_score
        changed.append('min_score')
    if max_score is not _UNSET:
        rubric.max_score = max_score
        changed.append('max_score')
    if changed:
        rubric.save(update_fields=changed + ['updated_at'])
    return rubric


def delete_rubric(scope: RubricScope, rubric_id) -> None:
    rubric = get_rubric(scope, rubric_id)
    if rubric.scores.exists():
        raise Conflict('Rubric cannot be deleted because it is already used in assessment data.')
    rubric.delete()


# Ordering

def _normalize_ids(ordered_ids) -> List[int]:
    if not ordered_ids:
        raise ValidationError('At least one item is required.')
    try:
        ids = [int(pk) for pk in ordered_ids]
    except (TypeError, ValueError):
        raise ValidationError('Ordered ids must be integers.')
    if len(set(ids)) != len(ids):
        raise ValidationError('Ordered ids must not contain duplicates.')
    return ids


def _apply_order(model, ids: List[int]) -> None:
    with transaction.atomic():
        for index, pk in enumerate(ids, start=1):
            model.objects.filter(pk=pk).update(display_order=index)


def reorder_criteria(scope: RubricScope, cpmk_id, ordered_ids, role: Optional[str] = None) -> List[AssessmentCriteria]:
    cpmk = Cpmk.objects.filter(pk=cpmk_id).first()
    if cpmk is None:
        raise NotFound('CPMK not found.')
    ids = _normalize_ids(ordered_ids)

    qs = AssessmentCriteria.objects.filter(pk__in=ids, cpmk=cpmk, applies_to=scope.applies_to)
    if role:
        qs = qs.filter(role=scope.resolve_role(role))
    if qs.count() != len(ids):
        raise ValidationError('Some criteria do not belong to this CPMK configuration.')

    _apply_order(AssessmentCriteria, ids)
    return list(AssessmentCriteria.objects.filter(pk__in=ids).order_by('display_order'))


def reorder_rubrics(scope: RubricScope, criteria_id, ordered_ids) -> List[AssessmentRubric]:
    criteria = get_criteria(scope, criteria_id)
    ids = _normalize_ids(ordered_ids)

    if AssessmentRubric.objects.filter(pk__in=ids, criteria=criteria).count() != len(ids):
        raise ValidationError('Some rubrics do not belong to this criteria.')

    _apply_order(AssessmentRubric, ids)
    return list(AssessmentRubric.objects.filter(pk__in=ids).order_by('display_order'))


# Read models

def get_cpmks_with_rubrics(scope: RubricScope, role: Optional[str] = None) -> List[Cpmk]:
    """Active thesis CPMKs configured in this scope, with criteria and rubrics attached.

    Criteria are exposed on ``cpmk.scoped_criteria`` ordered by display order,
    each with its rubrics prefetched in display order.
    """
    role = scope.resolve_role(role)
    criteria_qs = (
        AssessmentCriteria.objects.filter(applies_to=scope.applies_to, role=role)
        .order_by('display_order', 'id')
        .prefetch_related(Prefetch('rubrics', queryset=AssessmentRubric.objects.order_by('display_order', 'id')))
    )
    return list(
        Cpmk.objects.filter(
            type=Cpmk.CpmkType.THESIS,
            is_active=True,
            assessment_criteria__applies_to=scope.applies_to,
            assessment_criteria__role=role,
        )
        .distinct()
        .order_by('code')
        .prefetch_related(Prefetch('assessment_criteria', queryset=criteria_qs, to_attr='scoped_criteria'))
    )


def get_weight_summary(scope: RubricScope, role: Optional[str] = None) -> dict:
    role = scope.resolve_role(role)
    total = 0
    details = []
    for cpmk in get_cpmks_with_rubrics(scope, role):
        criteria = cpmk.scoped_criteria
        score_sum = sum(c.max_score or 0 for c in criteria if c.is_active)
        total += score_sum
        details.append({
            'cpmk_id': cpmk.pk,
            'cpmk_code': cpmk.code,
            'cpmk_description': cpmk.description,
            'criteria_count': len(criteria),
            'criteria_score_sum': score_sum,
            'rubric_count': sum(len(c.rubrics.all()) for c in criteria),
        })

    scope_total = active_total(scope, role)
    return {
        'role': role,
        'total_score': total,
        'is_complete': total > 0,
        'scope_total': scope_total,
        'remaining': SCORE_CAP - scope_total,
        'details': details,
    }
