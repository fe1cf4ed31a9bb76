"""Thesis progress rating, recomputed from elapsed time.

Rules, first match wins:

1. more than 365 days since the thesis was created: FAILED
2. more than 120 days since the last activity: AT_RISK
3. more than 60 days since the last activity: SLOW
4. otherwise: ONGOING

The last activity is the latest milestone update, or the creation time when
that is later (or there are no milestones). Theses whose workflow status is
terminal (Selesai, Gagal, Lulus, Drop Out, Dibatalkan) are never touched.

Entering FAILED also moves the workflow status to Gagal and cancels pending
guidances in the same transaction. Student and department-head
notifications are sent afterwards; a failure there is logged and the rating
change stays committed.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import Max
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied

from accounts import roles
from accounts.utils import users_with_role
from notifications.services import notification_service, push_service
from thesis.models import Thesis, ThesisGuidance, ThesisStatus

logger = logging.getLogger(__name__)

SLOW_AFTER = timedelta(days=60)
AT_RISK_AFTER = timedelta(days=120)
FAILED_AFTER = timedelta(days=365)

DEFAULT_PAGE_SIZE = 200

NOTIFICATION_TYPE = 'thesis_failed'


def decide_rating(created_at: datetime, last_milestone_at: Optional[datetime], now: datetime) -> str:
    if now - created_at > FAILED_AFTER:
        return Thesis.Rating.FAILED

    last_activity = created_at
    if last_milestone_at is not None and last_milestone_at > last_activity:
        last_activity = last_milestone_at

    idle = now - last_activity
    if idle > AT_RISK_AFTER:
        return Thesis.Rating.AT_RISK
    if idle > SLOW_AFTER:
        return Thesis.Rating.SLOW
    return Thesis.Rating.ONGOING


def _terminal_status_ids():
    return set(ThesisStatus.objects.filter(name__in=ThesisStatus.TERMINAL).values_list('id', flat=True))


def _fetch_page(after_id: int, page_size: int):
    return list(
        Thesis.objects.filter(pk__gt=after_id)
        .select_related('student')
        .annotate(last_milestone_at=Max('milestones__updated_at'))
        .order_by('id')[:page_size]
    )


def update_all_thesis_ratings(page_size: Optional[int] = None, now: Optional[datetime] = None) -> Dict[str, int]:
    """Recompute the rating of every non-terminal thesis.

    Returns how many theses moved into each rating.
    """
    page_size = int(page_size or getattr(settings, 'THESIS_STATUS_PAGE_SIZE', DEFAULT_PAGE_SIZE))
    now = now or timezone.now()
    updated = {
        Thesis.Rating.ONGOING: 0,
        Thesis.Rating.SLOW: 0,
        Thesis.Rating.AT_RISK: 0,
        Thesis.Rating.FAILED: 0,
    }

    terminal_ids = _terminal_status_ids()
    last_id = 0
    while True:
        try:
            page = _fetch_page(last_id, page_size)
        except DatabaseError:
            logger.exception('Thesis rating update aborted while fetching theses after id=%s', last_id)
            break
        if not page:
            break
        last_id = page[-1].pk

        for thesis in page:
            if thesis.thesis_status_id in terminal_ids:
                continue
            target = decide_rating(thesis.created_at, thesis.last_milestone_at, now)
            if target == thesis.rating:
                continue
            try:
                if target == Thesis.Rating.FAILED:
                    mark_failed(thesis)
                else:
                    Thesis.objects.filter(pk=thesis.pk).update(rating=target, updated_at=now)
            except DatabaseError:
                logger.exception('Failed to update rating of thesis id=%s', thesis.pk)
                continue
            updated[target] += 1

    logger.info(
        'Thesis ratings updated: ONGOING=%s, SLOW=%s, AT_RISK=%s, FAILED=%s',
        updated[Thesis.Rating.ONGOING], updated[Thesis.Rating.SLOW],
        updated[Thesis.Rating.AT_RISK], updated[Thesis.Rating.FAILED],
    )
    return {str(k): v for k, v in updated.items()}


def mark_failed(thesis: Thesis, reason: str = 'deadline') -> Thesis:
    """Move *thesis* into FAILED and run the side effects of that edge."""
    with transaction.atomic():
        gagal = ThesisStatus.objects.filter(name=ThesisStatus.GAGAL).first()
        thesis.rating = Thesis.Rating.FAILED
        thesis.thesis_status = gagal
        thesis.save(update_fields=['rating', 'thesis_status', 'updated_at'])
        cancelled = ThesisGuidance.objects.filter(
            thesis=thesis, status__in=ThesisGuidance.PENDING,
        ).update(status=ThesisGuidance.Status.CANCELLED)

    logger.info('Thesis id=%s marked FAILED (%s); %s guidance(s) cancelled', thesis.pk, reason, cancelled)
    _notify_failed(thesis)
    return thesis


def _notify_failed(thesis: Thesis) -> None:
    student = thesis.student
    student_name = student.get_display_name()
    push_data = {'type': NOTIFICATION_TYPE, 'thesis_id': thesis.pk}

    try:
        title = 'Tugas Akhir Gagal'
        message = (
            'Tugas akhir Anda telah melampaui batas waktu dan dinyatakan gagal. '
            'Segera lakukan pendaftaran ulang tugas akhir ke Departemen.'
        )
        notification_service.create_notification(
            student, title=title, message=message, type=NOTIFICATION_TYPE, reference_id=thesis.pk,
        )
        push_service.send_push([student.pk], title=title, body=message, data=push_data)
    except Exception:
        logger.exception('Failed to notify student of failed thesis id=%s', thesis.pk)

    try:
        head_ids = list(users_with_role(roles.KETUA_DEPARTEMEN).values_list('id', flat=True))
        if head_ids:
            title = 'Tugas Akhir Mahasiswa Gagal'
            message = (
                f'Tugas akhir {student_name} ({student.identity_number or "-"}) '
                'dinyatakan gagal karena melampaui batas waktu.'
            )
            notification_service.create_for_users(
                head_ids, title=title, message=message, type=NOTIFICATION_TYPE, reference_id=thesis.pk,
            )
            push_service.send_push(head_ids, title=title, body=message, data=push_data)
    except Exception:
        logger.exception('Failed to notify department heads of failed thesis id=%s', thesis.pk)


def fail_thesis_by_supervisor(thesis_id, lecturer) -> Thesis:
    thesis = Thesis.objects.select_related('student', 'thesis_status').filter(pk=thesis_id).first()
    if thesis is None:
        raise NotFound('Thesis not found.')
    if not thesis.supervisors.filter(lecturer=lecturer).exists():
        raise PermissionDenied('You are not a supervisor of this thesis.')
    if thesis.rating != Thesis.Rating.AT_RISK:
        raise ValidationError('Only a thesis with AT_RISK rating can be marked as failed.')
    return mark_failed(thesis, reason=f'supervisor {lecturer.pk}')
