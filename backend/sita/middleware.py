import logging
import time
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

from accounts.utils import get_user_role_names

logger = logging.getLogger('sita.requests')

API_PREFIX = '/api/'


def api_app(path: str) -> str:
    """``/api/thesis/12/milestones/`` -> ``thesis``."""
    if not path.startswith(API_PREFIX):
        return ''
    return path[len(API_PREFIX):].split('/', 1)[0]


def _caller(request: HttpRequest):
    # DRF copies the authenticated (JWT) user back onto the Django request
    user = getattr(request, 'user', None)
    if user is None or not getattr(user, 'is_authenticated', False):
        return 'anonymous', '-'
    role_names = ','.join(sorted(get_user_role_names(user))) or '-'
    return user.username, role_names


class SlowApiRequestMiddleware:
    """Warn about API calls slower than ``API_SLOW_REQUEST_MS``.

    Each line carries the API app and the caller's roles so slow endpoints
    can be grouped per module and per audience (students, lecturers, staff).
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        app = api_app(request.path)
        if not app or not getattr(settings, 'API_SLOW_REQUEST_LOG_ENABLED', True):
            return self.get_response(request)

        threshold_ms = int(getattr(settings, 'API_SLOW_REQUEST_MS', 1200))
        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        if elapsed_ms >= threshold_ms:
            username, role_names = _caller(request)
            logger.warning(
                'Slow API request app=%s %s %s status=%s duration_ms=%.0f user=%s roles=%s',
                app,
                request.method,
                request.path,
                getattr(response, 'status_code', '-'),
                elapsed_ms,
                username,
                role_names,
            )
        return response
