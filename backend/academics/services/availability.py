from datetime import date, time
from typing import Optional

from django.core.exceptions import ValidationError
from django.db.models import Case, IntegerField, QuerySet, Value, When
from rest_framework.exceptions import NotFound, PermissionDenied

from academics.models import LecturerAvailability
from academics.utils import local_today

DAY_ORDER = [choice for choice, _ in LecturerAvailability.Day.choices]

_UNSET = object()


def _day_ordering():
    return Case(
        *[When(day=day, then=Value(idx)) for idx, day in enumerate(DAY_ORDER)],
        output_field=IntegerField(),
    )


def list_for_lecturer(lecturer) -> QuerySet:
    return (
        LecturerAvailability.objects.filter(lecturer=lecturer)
        .annotate(day_index=_day_ordering())
        .order_by('day_index', 'start_time')
    )


def _find_overlap(lecturer, day: str, start_time: time, end_time: time, exclude_id=None) -> Optional[LecturerAvailability]:
    # two slots overlap when each starts before the other ends
    qs = LecturerAvailability.objects.filter(
        lecturer=lecturer,
        day=day,
        start_time__lt=end_time,
        end_time__gt=start_time,
    )
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.first()


def _check_times(start_time: time, end_time: time) -> None:
    if start_time >= end_time:
        raise ValidationError('Start time must be before end time.')


def _check_validity(valid_from: date, valid_until: date) -> None:
    if valid_from >= valid_until:
        raise ValidationError('valid_from must be before valid_until.')


def _get_owned(availability_id, lecturer, action: str) -> LecturerAvailability:
    availability = LecturerAvailability.objects.filter(pk=availability_id).first()
    if availability is None:
        raise NotFound('Availability schedule not found.')
    if availability.lecturer_id != lecturer.pk:
        raise PermissionDenied(f'You are not allowed to {action} this schedule.')
    return availability


def create_availability(lecturer, *, day: str, start_time: time, end_time: time,
                        valid_from: date, valid_until: date, today: Optional[date] = None) -> LecturerAvailability:
    _check_times(start_time, end_time)
    _check_validity(valid_from, valid_until)

    if valid_from < (today or local_today()):
        raise ValidationError('valid_from must not be in the past.')

    if _find_overlap(lecturer, day, start_time, end_time):
        raise ValidationError('Schedule overlaps an existing availability on the same day.')

    return LecturerAvailability.objects.create(
        lecturer=lecturer,
        day=day,
        start_time=start_time,
        end_time=end_time,
        valid_from=valid_from,
        valid_until=valid_until,
    )


def update_availability(availability_id, lecturer, *, day=_UNSET, start_time=_UNSET, end_time=_UNSET,
                        valid_from=_UNSET, valid_until=_UNSET) -> LecturerAvailability:
    availability = _get_owned(availability_id, lecturer, 'change')
    changed = []

    if day is not _UNSET:
        availability.day = day
        changed.append('day')

    if start_time is not _UNSET or end_time is not _UNSET:
        new_start = availability.start_time if start_time is _UNSET else start_time
        new_end = availability.end_time if end_time is _UNSET else end_time
        _check_times(new_start, new_end)
        availability.start_time = new_start
        availability.end_time = new_end
        changed += ['start_time', 'end_time']

    if day is not _UNSET or 'start_time' in changed:
        overlap = _find_overlap(lecturer, availability.day, availability.start_time,
                                availability.end_time, exclude_id=availability.pk)
        if overlap:
            raise ValidationError('Schedule overlaps an existing availability on the same day.')

    if valid_from is not _UNSET or valid_until is not _UNSET:
        new_from = availability.valid_from if valid_from is _UNSET else valid_from
        new_until = availability.valid_until if valid_until is _UNSET else valid_until
        _check_validity(new_from, new_until)
        availability.valid_from = new_from
        availability.valid_until = new_until
        changed += ['valid_from', 'valid_until']

    if changed:
        availability.save(update_fields=changed + ['updated_at'])
    return availability


def toggle_availability(availability_id, lecturer) -> LecturerAvailability:
    availability = _get_owned(availability_id, lecturer, 'change')
    availability.is_active = not availability.is_active
    availability.save(update_fields=['is_active', 'updated_at'])
    return availability


def delete_availability(availability_id, lecturer) -> None:
    availability = _get_owned(availability_id, lecturer, 'delete')
    availability.delete()
