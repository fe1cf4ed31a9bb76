"""Thesis master data maintained by the department admin."""
import logging
import math
from datetime import timedelta
from typing import Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound

from academics.services import academic_year as academic_year_service
from academics.utils import campus_timezone
from sita.exceptions import Conflict
from thesis.models import Thesis, ThesisStatus, ThesisSupervisor, Topic
from thesis.services import milestones as milestone_service

logger = logging.getLogger(__name__)

THESIS_DURATION = timedelta(days=365)

_UNSET = object()


def _thesis_queryset():
    return Thesis.objects.select_related(
        'student', 'topic', 'academic_year', 'thesis_status',
    ).prefetch_related('supervisors__lecturer')


def get_thesis(thesis_id) -> Thesis:
    thesis = _thesis_queryset().filter(pk=thesis_id).first()
    if thesis is None:
        raise NotFound('Thesis not found.')
    return thesis


def list_statuses():
    return ThesisStatus.objects.all().order_by('id')


def list_theses(*, page: int = 1, page_size: int = 10, search: str = '') -> dict:
    page = max(int(page or 1), 1)
    page_size = max(int(page_size or 10), 1)
    search = (search or '').strip()

    qs = _thesis_queryset().order_by('-created_at', '-id')
    if search:
        qs = qs.filter(
            Q(title__icontains=search)
            | Q(student__full_name__icontains=search)
            | Q(student__identity_number__icontains=search)
        )

    total = qs.count()
    offset = (page - 1) * page_size
    return {
        'items': list(qs[offset:offset + page_size]),
        'total': total,
        'page': page,
        'page_size': page_size,
        'total_pages': math.ceil(total / page_size) if total else 0,
    }


def _get_user(user_id, label: str):
    user = get_user_model().objects.filter(pk=user_id).first()
    if user is None:
        raise NotFound(f'{label} not found.')
    return user


def _get_topic(topic_id) -> Optional[Topic]:
    if topic_id is None:
        return None
    topic = Topic.objects.filter(pk=topic_id).first()
    if topic is None:
        raise NotFound('Topic not found.')
    return topic


def _set_supervisors(thesis: Thesis, pembimbing1, pembimbing2=None) -> None:
    if not pembimbing1:
        raise ValidationError('Pembimbing 1 is required.')
    if pembimbing2 and int(pembimbing2) == int(pembimbing1):
        raise ValidationError('Pembimbing 1 and Pembimbing 2 must be different lecturers.')

    lecturer1 = _get_user(pembimbing1, 'Pembimbing 1')
    lecturer2 = _get_user(pembimbing2, 'Pembimbing 2') if pembimbing2 else None

    thesis.supervisors.all().delete()
    ThesisSupervisor.objects.create(thesis=thesis, lecturer=lecturer1, role=ThesisSupervisor.SupervisorRole.PEMBIMBING_1)
    if lecturer2 is not None:
        ThesisSupervisor.objects.create(thesis=thesis, lecturer=lecturer2, role=ThesisSupervisor.SupervisorRole.PEMBIMBING_2)


@transaction.atomic
def create_thesis(*, student_id, pembimbing1, pembimbing2=None, title: Optional[str] = None,
                  topic_id=None, now=None) -> Thesis:
    """Register a new thesis for a student.

    A student may only start a new thesis once the previous one is FAILED or
    CANCELLED. The thesis lands in the active academic year, in ``Bimbingan``,
    with a one-year deadline. Active milestone templates of the topic are
    copied onto it.
    """
    student = _get_user(student_id, 'Student')

    if Thesis.objects.filter(student=student, rating__in=Thesis.ACTIVE_RATINGS).exists():
        raise Conflict('Student still has an active thesis. A new one can only be added after FAILED or CANCELLED.')

    active_year = academic_year_service.get_active_academic_year()
    if active_year is None:
        raise ValidationError('There is no active academic year.')

    now = now or timezone.now()
    thesis = Thesis.objects.create(
        student=student,
        title=(title or '').strip() or None,
        topic=_get_topic(topic_id),
        academic_year=active_year,
        thesis_status=ThesisStatus.objects.filter(name=ThesisStatus.BIMBINGAN).first(),
        rating=Thesis.Rating.ONGOING,
        start_date=now,
        deadline_date=now + THESIS_DURATION,
        created_at=now,
    )
    _set_supervisors(thesis, pembimbing1, pembimbing2)

    seeded = []
    if thesis.topic_id:
        templates = milestone_service.list_templates(topic_id=thesis.topic_id, active_only=True)
        seeded = milestone_service.seed_from_templates(
            thesis, templates, start=timezone.localtime(now, campus_timezone()).date(),
        )

    logger.info(
        'Thesis created id=%s student=%s year=%s milestones=%s', thesis.pk, student.pk, active_year.label, len(seeded),
    )
    return get_thesis(thesis.pk)


@transaction.atomic
def update_thesis(thesis_id, *, title=_UNSET, topic_id=_UNSET, thesis_status_id=_UNSET,
                  pembimbing1=_UNSET, pembimbing2=_UNSET) -> Thesis:
    thesis = get_thesis(thesis_id)
    changed = []

    if title is not _UNSET:
        thesis.title = (title or '').strip() or None
        changed.append('title')

    if topic_id is not _UNSET:
        thesis.topic = _get_topic(topic_id)
        changed.append('topic')

    # an empty status keeps the current one
    if thesis_status_id is not _UNSET and thesis_status_id:
        status = ThesisStatus.objects.filter(pk=thesis_status_id).first()
        if status is None:
            raise NotFound('Thesis status not found.')
        thesis.thesis_status = status
        changed.append('thesis_status')

    if changed:
        thesis.save(update_fields=changed + ['updated_at'])

    if pembimbing1 is not _UNSET:
        _set_supervisors(thesis, pembimbing1, None if pembimbing2 is _UNSET else pembimbing2)
    elif pembimbing2 is not _UNSET:
        current = thesis.supervisors.filter(role=ThesisSupervisor.SupervisorRole.PEMBIMBING_1).first()
        if current is None:
            raise ValidationError('Pembimbing 1 is required.')
        _set_supervisors(thesis, current.lecturer_id, pembimbing2)

    return get_thesis(thesis.pk)
