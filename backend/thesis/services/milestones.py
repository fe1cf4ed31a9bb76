"""Milestone templates and per-thesis milestones.

Templates are maintained by the department secretary. Milestones belong to a
thesis: the student plans and reports on them, supervisors validate them or
ask for a revision. A completed milestone is frozen.
"""
import logging
from datetime import date, timedelta
from typing import Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied

from academics.utils import local_today
from thesis.models import MilestoneTemplate, Thesis, ThesisMilestone, Topic
from thesis.services.notify import notify_users

logger = logging.getLogger(__name__)

TARGET_INTERVAL = timedelta(days=14)

_UNSET = object()

Status = ThesisMilestone.Status

# student-driven status changes; supervisor actions go through validate/revision
STATUS_TRANSITIONS = {
    Status.NOT_STARTED: (Status.IN_PROGRESS,),
    Status.IN_PROGRESS: (Status.NOT_STARTED,),
    Status.REVISION_NEEDED: (Status.IN_PROGRESS,),
    Status.PENDING_REVIEW: (),
    Status.COMPLETED: (),
}


# -- templates ---------------------------------------------------------------

def list_templates(*, topic_id=None, active_only: bool = False):
    qs = MilestoneTemplate.objects.select_related('topic')
    if topic_id is not None:
        qs = qs.filter(topic_id=topic_id)
    if active_only:
        qs = qs.filter(is_active=True)
    return qs.order_by('topic_id', 'order', 'id')


def get_template(template_id) -> MilestoneTemplate:
    template = MilestoneTemplate.objects.select_related('topic').filter(pk=template_id).first()
    if template is None:
        raise NotFound('Milestone template not found.')
    return template


def _clean_title(title) -> str:
    title = str(title or '').strip()
    if not title:
        raise ValidationError('Title is required.')
    return title


def _get_topic(topic_id) -> Optional[Topic]:
    if topic_id is None:
        return None
    topic = Topic.objects.filter(pk=topic_id).first()
    if topic is None:
        raise NotFound('Topic not found.')
    return topic


def _next_template_order(topic: Optional[Topic]) -> int:
    current = MilestoneTemplate.objects.filter(topic=topic).aggregate(m=Max('order'))['m']
    return 0 if current is None else current + 1


def create_template(*, title: str, description: str = '', topic_id=None, is_active: bool = True) -> MilestoneTemplate:
    topic = _get_topic(topic_id)
    template = MilestoneTemplate.objects.create(
        topic=topic,
        title=_clean_title(title),
        description=(description or '').strip(),
        order=_next_template_order(topic),
        is_active=is_active,
    )
    logger.info('Milestone template created id=%s topic=%s', template.pk, topic_id)
    return template


def update_template(template_id, *, title=_UNSET, description=_UNSET, topic_id=_UNSET,
                    order=_UNSET, is_active=_UNSET) -> MilestoneTemplate:
    template = get_template(template_id)
    changed = []
    if title is not _UNSET:
        template.title = _clean_title(title)
        changed.append('title')
    if description is not _UNSET:
        template.description = (description or '').strip()
        changed.append('description')
    if topic_id is not _UNSET:
        template.topic = _get_topic(topic_id)
        changed.append('topic')
    if order is not _UNSET:
        template.order = int(order)
        changed.append('order')
    if is_active is not _UNSET:
        template.is_active = bool(is_active)
        changed.append('is_active')
    if changed:
        template.save(update_fields=changed)
    return template


def delete_template(template_id) -> None:
    template = get_template(template_id)
    template.delete()
    logger.info('Milestone template deleted id=%s', template_id)


def bulk_delete_templates(template_ids: Iterable[int]) -> dict:
    ids = list(template_ids or [])
    if not ids:
        raise ValidationError('No milestone templates selected.')
    deleted, _ = MilestoneTemplate.objects.filter(pk__in=ids).delete()
    logger.info('Milestone template bulk delete requested=%s deleted=%s', len(ids), deleted)
    return {'deleted': deleted}


# -- access ------------------------------------------------------------------

def _is_supervisor(thesis: Thesis, user) -> bool:
    return thesis.supervisors.filter(lecturer=user).exists()


def _access(thesis: Thesis, user) -> str:
    """Return 'owner' or 'supervisor', or raise PermissionDenied."""
    if thesis.student_id == user.pk:
        return 'owner'
    if _is_supervisor(thesis, user):
        return 'supervisor'
    raise PermissionDenied('You do not have access to this thesis.')


def _get_thesis(thesis_id) -> Thesis:
    thesis = Thesis.objects.select_related('student', 'topic').filter(pk=thesis_id).first()
    if thesis is None:
        raise NotFound('Thesis not found.')
    return thesis


def _get_milestone(milestone_id) -> ThesisMilestone:
    milestone = ThesisMilestone.objects.select_related('thesis__student').filter(pk=milestone_id).first()
    if milestone is None:
        raise NotFound('Milestone not found.')
    return milestone


def _require_owner(thesis: Thesis, user, action: str) -> None:
    if _access(thesis, user) != 'owner':
        raise PermissionDenied(f'Only the student can {action}.')


def _require_supervisor(thesis: Thesis, user, action: str) -> None:
    if _access(thesis, user) != 'supervisor':
        raise PermissionDenied(f'Only a supervisor can {action}.')


def _supervisor_user_ids(thesis: Thesis) -> List[int]:
    return list(thesis.supervisors.values_list('lecturer_id', flat=True))


def _ensure_not_completed(milestone: ThesisMilestone, action: str) -> None:
    if milestone.status == Status.COMPLETED:
        raise ValidationError(f'A completed milestone cannot be {action}.')


# -- milestones --------------------------------------------------------------

def list_milestones(user, thesis_id, *, status: Optional[str] = None):
    thesis = _get_thesis(thesis_id)
    _access(thesis, user)
    qs = thesis.milestones.all()
    if status:
        qs = qs.filter(status=status)
    return qs


def get_milestone(user, milestone_id) -> ThesisMilestone:
    milestone = _get_milestone(milestone_id)
    _access(milestone.thesis, user)
    return milestone


def _next_order(thesis: Thesis) -> int:
    current = thesis.milestones.aggregate(m=Max('order'))['m']
    return 0 if current is None else current + 1


def create_milestone(user, thesis_id, *, title: str, description: str = '',
                     target_date: Optional[date] = None) -> ThesisMilestone:
    """Add a milestone; the student or one of the supervisors may do this."""
    thesis = _get_thesis(thesis_id)
    role = _access(thesis, user)
    milestone = ThesisMilestone.objects.create(
        thesis=thesis,
        title=_clean_title(title),
        description=(description or '').strip(),
        target_date=target_date,
        order=_next_order(thesis),
    )
    logger.info('Milestone created id=%s thesis=%s by=%s', milestone.pk, thesis.pk, role)

    if role == 'supervisor':
        notify_users(
            [thesis.student_id],
            title='Milestone Baru dari Pembimbing',
            message=f'{user.get_display_name()} menambahkan milestone "{milestone.title}" untuk tugas akhir Anda.',
            type='milestone_created',
            reference_id=milestone.pk,
            data={'thesis_id': thesis.pk, 'milestone_id': milestone.pk},
        )
    return milestone


def seed_from_templates(thesis: Thesis, templates, start: Optional[date] = None) -> List[ThesisMilestone]:
    """Copy *templates* onto *thesis*, one target date every two weeks."""
    start = start or local_today()
    templates = sorted(templates, key=lambda t: (t.order, t.pk))
    return ThesisMilestone.objects.bulk_create([
        ThesisMilestone(
            thesis=thesis,
            title=template.title,
            description=template.description,
            order=index,
            target_date=start + index * TARGET_INTERVAL,
        )
        for index, template in enumerate(templates)
    ])


@transaction.atomic
def create_from_templates(user, thesis_id, *, template_ids: Optional[List[int]] = None, topic_id=None,
                          start_date: Optional[date] = None) -> List[ThesisMilestone]:
    """Create the thesis milestones from templates.

    Without *template_ids* the active templates of the thesis topic are used.
    Passing *topic_id* also moves the thesis to that topic.
    """
    thesis = _get_thesis(thesis_id)
    _require_owner(thesis, user, 'create milestones from templates')

    if thesis.milestones.exists():
        raise ValidationError('Thesis already has milestones. Remove them first or add milestones manually.')

    if topic_id is not None:
        thesis.topic = _get_topic(topic_id)
        thesis.save(update_fields=['topic', 'updated_at'])

    if template_ids:
        templates = list(MilestoneTemplate.objects.filter(pk__in=template_ids))
    elif thesis.topic_id:
        templates = list(list_templates(topic_id=thesis.topic_id, active_only=True))
    else:
        templates = []
    if not templates:
        raise ValidationError('No valid milestone templates found.')

    seed_from_templates(thesis, templates, start_date)
    logger.info('Milestones created from %s template(s) thesis=%s', len(templates), thesis.pk)
    return list(thesis.milestones.all())


def update_milestone(user, milestone_id, *, title=_UNSET, description=_UNSET, target_date=_UNSET,
                     student_notes=_UNSET) -> ThesisMilestone:
    milestone = _get_milestone(milestone_id)
    _require_owner(milestone.thesis, user, 'edit this milestone')
    _ensure_not_completed(milestone, 'changed')

    changed = []
    if title is not _UNSET:
        milestone.title = _clean_title(title)
        changed.append('title')
    if description is not _UNSET:
        milestone.description = (description or '').strip()
        changed.append('description')
    if target_date is not _UNSET:
        milestone.target_date = target_date
        changed.append('target_date')
    if student_notes is not _UNSET:
        milestone.student_notes = (student_notes or '').strip()
        changed.append('student_notes')
    if changed:
        milestone.save(update_fields=changed + ['updated_at'])
    return milestone


def delete_milestone(user, milestone_id) -> None:
    milestone = _get_milestone(milestone_id)
    _require_owner(milestone.thesis, user, 'delete this milestone')
    _ensure_not_completed(milestone, 'deleted')
    milestone.delete()
    logger.info('Milestone deleted id=%s', milestone_id)


def _start(milestone: ThesisMilestone, changed: list) -> None:
    milestone.status = Status.IN_PROGRESS
    changed.append('status')
    if milestone.started_at is None:
        milestone.started_at = timezone.now()
        changed.append('started_at')


def update_status(user, milestone_id, status: str) -> ThesisMilestone:
    milestone = _get_milestone(milestone_id)
    _require_owner(milestone.thesis, user, 'change the milestone status')

    allowed = STATUS_TRANSITIONS.get(Status(milestone.status), ())
    if status not in allowed:
        raise ValidationError(f'Status cannot change from {milestone.status} to {status}.')

    changed = []
    if status == Status.IN_PROGRESS:
        _start(milestone, changed)
    else:
        milestone.status = status
        changed.append('status')
    milestone.save(update_fields=changed + ['updated_at'])
    return milestone


def update_progress(user, milestone_id, progress: int) -> ThesisMilestone:
    milestone = _get_milestone(milestone_id)
    thesis = milestone.thesis
    _require_owner(thesis, user, 'update milestone progress')
    _ensure_not_completed(milestone, 'changed')

    progress = int(progress)
    if progress < 0 or progress > 100:
        raise ValidationError('Progress must be between 0 and 100.')

    previous = milestone.progress
    milestone.progress = progress
    changed = ['progress']
    if progress > 0 and milestone.status == Status.NOT_STARTED:
        _start(milestone, changed)
    milestone.save(update_fields=changed + ['updated_at'])

    if progress == 100 and previous < 100:
        student_name = thesis.student.get_display_name()
        notify_users(
            _supervisor_user_ids(thesis),
            title='Milestone Selesai 100%',
            message=f'{student_name} telah menyelesaikan milestone "{milestone.title}"',
            type='milestone_progress',
            reference_id=milestone.pk,
            data={'thesis_id': thesis.pk, 'milestone_id': milestone.pk},
        )
    return milestone


def submit_for_review(user, milestone_id, *, notes: str = '') -> ThesisMilestone:
    milestone = _get_milestone(milestone_id)
    _require_owner(milestone.thesis, user, 'submit this milestone')
    if milestone.status not in (Status.IN_PROGRESS, Status.REVISION_NEEDED):
        raise ValidationError('Only a milestone in progress or under revision can be submitted for review.')

    milestone.status = Status.PENDING_REVIEW
    changed = ['status']
    if notes:
        milestone.student_notes = notes.strip()
        changed.append('student_notes')
    milestone.save(update_fields=changed + ['updated_at'])

    notify_users(
        _supervisor_user_ids(milestone.thesis),
        title='Milestone Menunggu Review',
        message=f'{milestone.thesis.student.get_display_name()} mengajukan review milestone "{milestone.title}"',
        type='milestone_review',
        reference_id=milestone.pk,
        data={'thesis_id': milestone.thesis_id, 'milestone_id': milestone.pk},
    )
    return milestone


def validate_milestone(user, milestone_id, *, notes: str = '') -> ThesisMilestone:
    milestone = _get_milestone(milestone_id)
    _require_supervisor(milestone.thesis, user, 'validate a milestone')
    if milestone.status == Status.COMPLETED:
        raise ValidationError('Milestone is already completed.')

    now = timezone.now()
    milestone.status = Status.COMPLETED
    milestone.progress = 100
    milestone.completed_at = now
    milestone.validated_by = user
    milestone.validated_at = now
    milestone.supervisor_notes = (notes or '').strip()
    milestone.save(update_fields=[
        'status', 'progress', 'completed_at', 'validated_by', 'validated_at', 'supervisor_notes', 'updated_at',
    ])
    logger.info('Milestone validated id=%s by=%s', milestone.pk, user.pk)

    notify_users(
        [milestone.thesis.student_id],
        title='Milestone Divalidasi',
        message=f'Milestone "{milestone.title}" telah divalidasi oleh {user.get_display_name()}',
        type='milestone_validated',
        reference_id=milestone.pk,
        data={'thesis_id': milestone.thesis_id, 'milestone_id': milestone.pk},
    )
    return milestone


def request_revision(user, milestone_id, *, notes: str) -> ThesisMilestone:
    milestone = _get_milestone(milestone_id)
    _require_supervisor(milestone.thesis, user, 'request a revision')
    notes = (notes or '').strip()
    if not notes:
        raise ValidationError('Revision notes are required.')
    _ensure_not_completed(milestone, 'revised')

    milestone.status = Status.REVISION_NEEDED
    milestone.supervisor_notes = notes
    milestone.save(update_fields=['status', 'supervisor_notes', 'updated_at'])

    notify_users(
        [milestone.thesis.student_id],
        title='Milestone Perlu Revisi',
        message=f'Milestone "{milestone.title}" perlu direvisi: {notes}',
        type='milestone_revision',
        reference_id=milestone.pk,
        data={'thesis_id': milestone.thesis_id, 'milestone_id': milestone.pk},
    )
    return milestone


@transaction.atomic
def reorder_milestones(user, thesis_id, milestone_ids: List[int]) -> List[ThesisMilestone]:
    """Renumber the listed milestones 0..n-1 in the given order."""
    thesis = _get_thesis(thesis_id)
    _require_owner(thesis, user, 'reorder milestones')

    ids = [int(pk) for pk in milestone_ids or []]
    milestones = {m.pk: m for m in thesis.milestones.filter(pk__in=ids)}
    if not ids or len(set(ids)) != len(ids) or len(milestones) != len(ids):
        raise ValidationError('Every milestone must belong to this thesis.')

    for index, pk in enumerate(ids):
        milestone = milestones[pk]
        if milestone.order != index:
            milestone.order = index
            milestone.save(update_fields=['order', 'updated_at'])
    return list(thesis.milestones.all())


def progress_summary(user, thesis_id) -> dict:
    thesis = _get_thesis(thesis_id)
    _access(thesis, user)
    milestones = list(thesis.milestones.all())
    total = len(milestones)
    completed = sum(1 for m in milestones if m.status == Status.COMPLETED)
    by_status = {choice: 0 for choice in Status.values}
    for m in milestones:
        by_status[m.status] += 1
    return {
        'thesis_id': thesis.pk,
        'total': total,
        'completed': completed,
        'percent': round(completed * 100 / total) if total else 0,
        'average_progress': round(sum(m.progress for m in milestones) / total) if total else 0,
        'by_status': by_status,
    }
