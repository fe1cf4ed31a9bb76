import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass
class PushOutcome:
    ok: bool
    message: str = ''
    user_ids: List[int] = field(default_factory=list)


def send_push(user_ids: Iterable[int], *, title: str, body: str, data: Optional[dict] = None) -> PushOutcome:
    """Forward a push notification to the configured push gateway.

    Configure:
      PUSH_NOTIFICATIONS_ENABLED=true
      PUSH_GATEWAY_URL="https://push.example/api/send"
      PUSH_GATEWAY_API_KEY="..."

    When disabled or unconfigured the push is only logged. Never raises.
    """
    user_ids = [int(pk) for pk in user_ids]
    if not user_ids:
        return PushOutcome(ok=False, message='No recipients')

    enabled = bool(getattr(settings, 'PUSH_NOTIFICATIONS_ENABLED', False))
    endpoint = str(getattr(settings, 'PUSH_GATEWAY_URL', '') or '').strip()
    if not enabled or not endpoint:
        logger.info('PUSH(console) users=%s title=%s body=%s', user_ids, title, body)
        return PushOutcome(ok=True, message='Logged only, push gateway disabled', user_ids=user_ids)

    payload = {
        'user_ids': user_ids,
        'title': title,
        'body': body,
        'data': {k: str(v) for k, v in (data or {}).items()},
    }
    headers = {}
    api_key = str(getattr(settings, 'PUSH_GATEWAY_API_KEY', '') or '').strip()
    if api_key:
        headers['Authorization'] = f'Bearer {api_key}'

    timeout = float(getattr(settings, 'PUSH_TIMEOUT_SECONDS', 8.0) or 8.0)
    try:
        response = requests.post(endpoint, json=payload, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        logger.exception('Push send failed users=%s', user_ids)
        return PushOutcome(ok=False, message=str(e), user_ids=user_ids)

    if 200 <= response.status_code < 300:
        return PushOutcome(ok=True, message='Sent', user_ids=user_ids)

    logger.warning('Push gateway HTTP %s: %s', response.status_code, response.text[:200])
    return PushOutcome(ok=False, message=f'Gateway HTTP {response.status_code}', user_ids=user_ids)
