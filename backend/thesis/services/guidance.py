"""Guidance sessions between a student and a supervisor.

A student requests a session for an active thesis; one of the supervisors
accepts (optionally moving the date), rejects, or later completes it. Only one
unanswered request may be open per thesis.
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from academics.utils import campus_timezone, local_today
from notifications.services import push_service
from thesis.models import Thesis, ThesisGuidance, ThesisMilestone, ThesisSupervisor
from thesis.services.notify import notify_users

logger = logging.getLogger(__name__)

Status = ThesisGuidance.Status

REMINDER_TYPE = 'guidance_reminder'


def _format_when(value: Optional[datetime]) -> str:
    if value is None:
        return '-'
    return timezone.localtime(value, campus_timezone()).strftime('%d-%m-%Y %H:%M')


def get_active_thesis(student) -> Thesis:
    thesis = (
        Thesis.objects.filter(student=student, rating__in=Thesis.ACTIVE_RATINGS)
        .select_related('student')
        .order_by('-created_at')
        .first()
    )
    if thesis is None:
        raise NotFound('No active thesis found.')
    return thesis


def _pick_supervisor(thesis: Thesis, supervisor_id=None):
    supervisors = list(thesis.supervisors.select_related('lecturer'))
    if supervisor_id:
        for supervisor in supervisors:
            if supervisor.lecturer_id == int(supervisor_id):
                return supervisor.lecturer
        raise ValidationError('Selected lecturer is not a supervisor of this thesis.')

    # Pembimbing 1 first, then Pembimbing 2
    by_role = {s.role: s.lecturer for s in supervisors}
    for role in (ThesisSupervisor.SupervisorRole.PEMBIMBING_1, ThesisSupervisor.SupervisorRole.PEMBIMBING_2):
        if role in by_role:
            return by_role[role]
    raise ValidationError('No supervisor assigned to this thesis.')


def _resolve_milestones(thesis: Thesis, milestone_ids) -> List[ThesisMilestone]:
    milestones = list(thesis.milestones.all())
    if not milestones:
        raise ValidationError('Create a milestone before requesting guidance.')

    ids = list(dict.fromkeys(int(pk) for pk in milestone_ids or []))
    if not ids:
        if not any(m.status in ThesisMilestone.ACTIVE for m in milestones):
            raise ValidationError('No milestone is in progress. Choose the milestone to discuss.')
        return []

    by_id = {m.pk: m for m in milestones}
    selected = []
    for pk in ids:
        milestone = by_id.get(pk)
        if milestone is None:
            raise ValidationError('Milestone does not belong to this thesis.')
        selected.append(milestone)
    return selected


def request_guidance(student, *, requested_date: datetime, notes: str = '', supervisor_id=None,
                     milestone_ids=None, duration: int = 60) -> ThesisGuidance:
    thesis = get_active_thesis(student)
    with transaction.atomic():
        guidance, milestones = _create_request(
            thesis, requested_date=requested_date, notes=notes, supervisor_id=supervisor_id,
            milestone_ids=milestone_ids, duration=duration,
        )

    student_name = student.get_display_name()
    titles = ', '.join(f'"{m.title}"' for m in milestones)
    message = f'{student_name} mengajukan bimbingan. Jadwal: {_format_when(requested_date)}'
    if titles:
        message += f'. Milestone: {titles}'
    notify_users(
        thesis.supervisors.values_list('lecturer_id', flat=True),
        title='Permintaan bimbingan baru',
        message=message,
        type='guidance_requested',
        reference_id=guidance.pk,
        data={'guidance_id': guidance.pk, 'thesis_id': thesis.pk},
    )
    return guidance


def _create_request(thesis, *, requested_date, notes, supervisor_id, milestone_ids, duration):
    pending = thesis.guidances.filter(status=Status.REQUESTED).first()
    if pending is not None:
        raise ValidationError(
            f'You still have a guidance request awaiting a response (schedule: {_format_when(pending.requested_date)}).'
        )

    milestones = _resolve_milestones(thesis, milestone_ids)
    supervisor = _pick_supervisor(thesis, supervisor_id)

    now = timezone.now()
    for milestone in milestones:
        if milestone.status == ThesisMilestone.Status.NOT_STARTED:
            milestone.status = ThesisMilestone.Status.IN_PROGRESS
            milestone.started_at = milestone.started_at or now
            milestone.save(update_fields=['status', 'started_at', 'updated_at'])

    guidance = ThesisGuidance.objects.create(
        thesis=thesis,
        supervisor=supervisor,
        status=Status.REQUESTED,
        requested_date=requested_date,
        duration=duration or 60,
        notes=(notes or '').strip(),
    )
    if milestones:
        guidance.milestones.set(milestones)
    logger.info('Guidance requested id=%s thesis=%s supervisor=%s', guidance.pk, thesis.pk, supervisor.pk)
    return guidance, milestones


def list_student_guidances(student, *, status: Optional[str] = None):
    qs = ThesisGuidance.objects.filter(thesis__student=student).select_related('supervisor', 'thesis')
    if status:
        qs = qs.filter(status=status)
    return qs.prefetch_related('milestones')


def _get_for_student(student, guidance_id) -> ThesisGuidance:
    guidance = ThesisGuidance.objects.filter(pk=guidance_id, thesis__student=student).first()
    if guidance is None:
        raise NotFound('Guidance not found.')
    return guidance


def cancel_guidance(student, guidance_id, *, reason: str = '') -> ThesisGuidance:
    guidance = _get_for_student(student, guidance_id)
    if guidance.status != Status.REQUESTED:
        raise ValidationError('Only a pending guidance request can be cancelled.')
    guidance.status = Status.CANCELLED
    if reason:
        guidance.notes = f'{guidance.notes}\n[cancelled] {reason.strip()}'.strip()
    guidance.save(update_fields=['status', 'notes', 'updated_at'])
    logger.info('Guidance cancelled id=%s by student=%s', guidance.pk, student.pk)
    return guidance


# -- lecturer ----------------------------------------------------------------

def list_lecturer_guidances(lecturer, *, status: Optional[str] = None):
    qs = ThesisGuidance.objects.filter(supervisor=lecturer).select_related('thesis__student')
    if status:
        qs = qs.filter(status=status)
    return qs.prefetch_related('milestones')


def _get_for_lecturer(lecturer, guidance_id) -> ThesisGuidance:
    guidance = (
        ThesisGuidance.objects.select_related('thesis__student')
        .filter(pk=guidance_id, supervisor=lecturer)
        .first()
    )
    if guidance is None:
        raise NotFound('Guidance not found or not assigned to you.')
    return guidance


def _notify_student(guidance: ThesisGuidance, *, title: str, message: str, type: str) -> None:
    notify_users(
        [guidance.thesis.student_id],
        title=title,
        message=message,
        type=type,
        reference_id=guidance.pk,
        data={'guidance_id': guidance.pk, 'thesis_id': guidance.thesis_id},
    )


def accept_guidance(lecturer, guidance_id, *, approved_date: Optional[datetime] = None, feedback: str = '',
                    duration: Optional[int] = None) -> ThesisGuidance:
    guidance = _get_for_lecturer(lecturer, guidance_id)
    if guidance.status != Status.REQUESTED:
        raise ValidationError('Only a requested guidance can be accepted.')

    guidance.status = Status.ACCEPTED
    guidance.approved_date = approved_date or guidance.requested_date
    guidance.supervisor_feedback = (feedback or '').strip()
    if duration:
        guidance.duration = duration
    guidance.save(update_fields=['status', 'approved_date', 'supervisor_feedback', 'duration', 'updated_at'])
    logger.info('Guidance accepted id=%s by lecturer=%s', guidance.pk, lecturer.pk)

    _notify_student(
        guidance,
        title='Bimbingan Disetujui',
        message=f'{lecturer.get_display_name()} menyetujui permintaan bimbingan pada {_format_when(guidance.approved_date)}',
        type='guidance_accepted',
    )
    return guidance


def reject_guidance(lecturer, guidance_id, *, feedback: str = '') -> ThesisGuidance:
    guidance = _get_for_lecturer(lecturer, guidance_id)
    if guidance.status != Status.REQUESTED:
        raise ValidationError('Only a requested guidance can be rejected.')

    guidance.status = Status.REJECTED
    guidance.supervisor_feedback = (feedback or '').strip()
    guidance.save(update_fields=['status', 'supervisor_feedback', 'updated_at'])
    logger.info('Guidance rejected id=%s by lecturer=%s', guidance.pk, lecturer.pk)

    _notify_student(
        guidance,
        title='Bimbingan Ditolak',
        message=(
            f'{lecturer.get_display_name()} menolak permintaan bimbingan. '
            f'Alasan: {guidance.supervisor_feedback or "Tidak disebutkan"}'
        ),
        type='guidance_rejected',
    )
    return guidance


def complete_guidance(lecturer, guidance_id, *, feedback: str = '') -> ThesisGuidance:
    guidance = _get_for_lecturer(lecturer, guidance_id)
    if guidance.status != Status.ACCEPTED:
        raise ValidationError('Only an accepted guidance can be completed.')

    guidance.status = Status.COMPLETED
    if feedback:
        guidance.supervisor_feedback = feedback.strip()
    guidance.save(update_fields=['status', 'supervisor_feedback', 'updated_at'])
    return guidance


# -- reminders ---------------------------------------------------------------

def _day_bounds(day: date):
    tz = campus_timezone()
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, start + timedelta(days=1)


def send_guidance_reminders(today: Optional[date] = None) -> Dict[str, int]:
    """Push a reminder to both sides of every guidance accepted for *today*."""
    start, end = _day_bounds(today or local_today())
    guidances = (
        ThesisGuidance.objects.filter(status=Status.ACCEPTED, approved_date__gte=start, approved_date__lt=end)
        .select_related('thesis__student', 'supervisor')
        .order_by('approved_date', 'id')
    )

    result = {'total': 0, 'sent': 0, 'failed': 0}
    for guidance in guidances:
        result['total'] += 1
        student = guidance.thesis.student
        supervisor = guidance.supervisor
        when = timezone.localtime(guidance.approved_date, campus_timezone()).strftime('%H:%M')
        data = {'type': REMINDER_TYPE, 'guidance_id': guidance.pk}
        try:
            outcomes = [push_service.send_push(
                [student.pk],
                title='Reminder: Bimbingan Hari Ini',
                body=f'Anda memiliki jadwal bimbingan dengan {supervisor.get_display_name() if supervisor else "dosen"} pukul {when}',
                data=data,
            )]
            if supervisor is not None:
                outcomes.append(push_service.send_push(
                    [supervisor.pk],
                    title='Reminder: Bimbingan Hari Ini',
                    body=f'Anda memiliki jadwal bimbingan dengan {student.get_display_name()} pukul {when}',
                    data=data,
                ))
        except Exception:
            logger.exception('Guidance reminder failed id=%s', guidance.pk)
            result['failed'] += 1
            continue

        if all(outcome.ok for outcome in outcomes):
            result['sent'] += 1
        else:
            result['failed'] += 1

    logger.info('Guidance reminders: total=%s sent=%s failed=%s', result['total'], result['sent'], result['failed'])
    return result
