import logging
from typing import Iterable, List

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from notifications.models import Notification

logger = logging.getLogger(__name__)


def _log(event: str, user_ids: List[int], title: str = '', **extra):
    payload = {
        'event': event,
        'target_user_ids': user_ids,
        'title': title,
    }
    payload.update(extra)
    logger.info('%s', payload)


def list_notifications(user, *, limit: int = 20, offset: int = 0, only_unread: bool = False) -> dict:
    qs: QuerySet = Notification.objects.filter(user=user)
    if only_unread:
        qs = qs.filter(is_read=False)
    limit = max(int(limit or 20), 1)
    offset = max(int(offset or 0), 0)
    return {
        'items': list(qs.order_by('-created_at', '-id')[offset:offset + limit]),
        'unread_count': unread_count(user),
    }


def unread_count(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).count()


def mark_as_read(user, notification_id) -> Notification:
    updated = Notification.objects.filter(pk=notification_id, user=user).update(is_read=True)
    if not updated:
        raise NotFound('Notification not found.')
    return Notification.objects.get(pk=notification_id)


def mark_all_as_read(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)


def create_notification(user, *, title: str, message: str = '', type: str = '', reference_id='') -> Notification:
    notification = Notification.objects.create(
        user=user,
        title=title,
        message=message,
        type=type,
        reference_id=str(reference_id or ''),
    )
    _log('notification_created', [user.pk], title, type=type)
    return notification


def create_for_users(user_ids: Iterable[int], *, title: str, message: str = '', type: str = '',
                     reference_id='') -> List[Notification]:
    user_ids = list(dict.fromkeys(user_ids))
    if not user_ids:
        return []
    created = Notification.objects.bulk_create([
        Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            reference_id=str(reference_id or ''),
        )
        for user_id in user_ids
    ])
    _log('notification_created', user_ids, title, type=type)
    return created


def delete_notification(user, notification_id) -> None:
    deleted, _ = Notification.objects.filter(pk=notification_id, user=user).delete()
    if not deleted:
        raise NotFound('Notification not found.')


def delete_all(user) -> int:
    deleted, _ = Notification.objects.filter(user=user).delete()
    return deleted
