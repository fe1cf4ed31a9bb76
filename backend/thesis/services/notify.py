import logging
from typing import Iterable, Optional

from notifications.services import notification_service, push_service

logger = logging.getLogger(__name__)


def notify_users(user_ids: Iterable[int], *, title: str, message: str, type: str,
                 reference_id='', data: Optional[dict] = None) -> None:
    """Store an in-app notification and push it. Failures are logged, never raised."""
    user_ids = [pk for pk in user_ids if pk]
    if not user_ids:
        return
    try:
        notification_service.create_for_users(
            user_ids, title=title, message=message, type=type, reference_id=reference_id,
        )
        push_service.send_push(user_ids, title=title, body=message, data={'type': type, **(data or {})})
    except Exception:
        logger.exception('Failed to notify users=%s type=%s', user_ids, type)
