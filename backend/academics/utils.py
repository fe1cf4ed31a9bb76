from datetime import date, datetime
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone


def campus_timezone() -> ZoneInfo:
    return ZoneInfo(getattr(settings, 'SITA_TIME_ZONE', 'Asia/Jakarta'))


def local_now() -> datetime:
    """Current time in the campus time zone (WIB by default)."""
    return timezone.now().astimezone(campus_timezone())


def local_today() -> date:
    return local_now().date()


def is_within_date_range(academic_year, today: date = None) -> bool:
    """True when *today* falls inside the year's range, end date inclusive."""
    if not academic_year.start_date or not academic_year.end_date:
        return False
    today = today or local_today()
    return academic_year.start_date <= today <= academic_year.end_date
