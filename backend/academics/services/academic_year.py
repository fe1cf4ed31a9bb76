"""Academic year lifecycle.

The "active" academic year is decided by dates, not by hand: the year whose
start/end range contains today (campus time, end date inclusive) is the
active one. ``sync_active_academic_year`` mirrors that onto the stored
``is_active`` flag so plain queries can rely on it.
"""
import logging
import math
from datetime import date
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import Q
from rest_framework.exceptions import NotFound

from academics.models import AcademicYear
from academics.utils import is_within_date_range, local_today
from sita.exceptions import Conflict

logger = logging.getLogger(__name__)

_UNSET = object()


def get_academic_year(academic_year_id) -> AcademicYear:
    academic_year = AcademicYear.objects.filter(pk=academic_year_id).first()
    if academic_year is None:
        raise NotFound('Academic year not found.')
    return academic_year


def _check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and start_date > end_date:
        raise ValidationError('start_date must be before end_date.')


def create_academic_year(
    *,
    semester: str = AcademicYear.Semester.GANJIL,
    year: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> AcademicYear:
    _check_range(start_date, end_date)

    if year is not None and AcademicYear.objects.filter(semester=semester, year=year).exists():
        raise Conflict('Academic year already exists for this semester and year.')

    created = AcademicYear.objects.create(
        semester=semester,
        year=year,
        start_date=start_date,
        end_date=end_date,
    )
    logger.info('Academic year created id=%s label=%s', created.pk, created.label)
    return created


@transaction.atomic
def update_academic_year(academic_year: AcademicYear, *, semester=_UNSET, year=_UNSET,
                         start_date=_UNSET, end_date=_UNSET, today: Optional[date] = None) -> AcademicYear:
    """Edit an academic year. Only the year that is active right now may change."""
    if start_date is not _UNSET and end_date is not _UNSET:
        _check_range(start_date, end_date)

    if not is_within_date_range(academic_year, today):
        raise ValidationError('Only the currently active academic year can be edited.')

    new_semester = academic_year.semester if semester is _UNSET else semester
    new_year = academic_year.year if year is _UNSET else year
    new_start = academic_year.start_date if start_date is _UNSET else start_date
    new_end = academic_year.end_date if end_date is _UNSET else end_date

    _check_range(new_start, new_end)

    if new_year is not None:
        duplicate = (
            AcademicYear.objects.filter(semester=new_semester, year=new_year)
            .exclude(pk=academic_year.pk)
            .exists()
        )
        if duplicate:
            raise Conflict('Another academic year with the same semester and year already exists.')

    academic_year.semester = new_semester
    academic_year.year = new_year
    academic_year.start_date = new_start
    academic_year.end_date = new_end
    academic_year.save(update_fields=['semester', 'year', 'start_date', 'end_date', 'updated_at'])
    return academic_year


def list_academic_years(*, page: int = 1, page_size: int = 10, search: str = '', today: Optional[date] = None) -> dict:
    page = max(int(page or 1), 1)
    page_size = max(int(page_size or 10), 1)
    search = (search or '').strip()

    qs = AcademicYear.objects.all().order_by('-year', '-semester', '-created_at')
    if search:
        condition = Q(semester__icontains=search)
        if search.isdigit():
            condition |= Q(year=int(search))
        qs = qs.filter(condition)

    total = qs.count()
    offset = (page - 1) * page_size
    today = today or local_today()
    items = list(qs[offset:offset + page_size])
    for item in items:
        # computed from dates; the stored flag may lag behind until the next sync
        item.is_active = is_within_date_range(item, today)

    return {
        'items': items,
        'total': total,
        'page': page,
        'page_size': page_size,
        'total_pages': math.ceil(total / page_size) if total else 0,
    }


def get_active_academic_year(today: Optional[date] = None) -> Optional[AcademicYear]:
    today = today or local_today()
    return (
        AcademicYear.objects.filter(start_date__lte=today, end_date__gte=today)
        .order_by('-year', '-start_date')
        .first()
    )


def sync_active_academic_year(today: Optional[date] = None) -> Optional[AcademicYear]:
    """Make the date-matching academic year the only active one.

    Returns the active year, or None when no year covers today. Failures are
    logged and swallowed so a scheduler loop keeps running.
    """
    today = today or local_today()
    try:
        should_be_active = None
        for academic_year in AcademicYear.objects.all().order_by('-year', '-start_date'):
            if is_within_date_range(academic_year, today):
                should_be_active = academic_year
                break

        active_ids = list(AcademicYear.objects.filter(is_active=True).values_list('id', flat=True))

        if should_be_active is None:
            if active_ids:
                logger.info('No academic year is active by date; deactivating %s record(s)', len(active_ids))
                AcademicYear.objects.filter(id__in=active_ids).update(is_active=False)
            return None

        if active_ids != [should_be_active.id]:
            logger.info('Switching active academic year to %s', should_be_active.label)
            with transaction.atomic():
                AcademicYear.objects.exclude(pk=should_be_active.pk).update(is_active=False)
                AcademicYear.objects.filter(pk=should_be_active.pk).update(is_active=True)
            should_be_active.is_active = True
        return should_be_active
    except DatabaseError:
        logger.exception('Academic year sync failed')
        return None
