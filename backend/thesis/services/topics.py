import logging
from typing import Iterable, List

from django.core.exceptions import ValidationError
from django.db.models import Count, QuerySet
from rest_framework.exceptions import NotFound

from thesis.models import Topic
from sita.exceptions import Conflict

logger = logging.getLogger(__name__)


def list_topics() -> QuerySet:
    return Topic.objects.annotate(
        thesis_count=Count('theses', distinct=True),
        milestone_template_count=Count('milestone_templates', distinct=True),
    ).order_by('name')


def get_topic(topic_id) -> Topic:
    topic = list_topics().filter(pk=topic_id).first()
    if topic is None:
        raise NotFound('Topic not found.')
    return topic


def _clean_name(name) -> str:
    name = str(name or '').strip()
    if not name:
        raise ValidationError('Topic name is required.')
    return name


def _ensure_unique_name(name: str, exclude_id=None) -> None:
    qs = Topic.objects.filter(name__iexact=name)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise Conflict(f'Topic "{name}" already exists.')


def create_topic(*, name: str) -> Topic:
    name = _clean_name(name)
    _ensure_unique_name(name)
    return Topic.objects.create(name=name)


def update_topic(topic_id, *, name: str) -> Topic:
    topic = get_topic(topic_id)
    name = _clean_name(name)
    _ensure_unique_name(name, exclude_id=topic.pk)
    topic.name = name
    topic.save(update_fields=['name', 'updated_at'])
    return topic


def _in_use(topic: Topic) -> bool:
    return topic.theses.exists() or topic.milestone_templates.exists()


def delete_topic(topic_id) -> None:
    topic = get_topic(topic_id)
    if _in_use(topic):
        raise Conflict('Topic cannot be deleted because it is used by theses or milestone templates.')
    topic.delete()
    logger.info('Topic deleted name=%s', topic.name)


def bulk_delete_topics(topic_ids: Iterable[int]) -> dict:
    """Delete every unused topic in *topic_ids*; used or missing ones are reported as failed."""
    ids: List[int] = list(topic_ids or [])
    if not ids:
        raise ValidationError('No topics selected.')

    deleted = 0
    failed_names = []
    topics = {t.pk: t for t in Topic.objects.filter(pk__in=ids)}
    for pk in ids:
        topic = topics.get(pk)
        if topic is None:
            failed_names.append(f'#{pk}')
            continue
        if _in_use(topic):
            failed_names.append(topic.name)
            continue
        topic.delete()
        deleted += 1

    failed = len(failed_names)
    if failed and deleted:
        message = f'{deleted} topic(s) deleted, {failed} could not be deleted because they are in use.'
    elif failed:
        message = 'No topics were deleted because they are in use.'
    else:
        message = f'{deleted} topic(s) deleted.'

    logger.info('Topic bulk delete deleted=%s failed=%s', deleted, failed)
    return {'deleted': deleted, 'failed': failed, 'failed_names': failed_names, 'message': message}
