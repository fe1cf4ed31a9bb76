from django.conf import settings
from django.db import models


class AcademicYear(models.Model):
    """One semester of an academic year (e.g. Ganjil 2025).

    ``is_active`` is kept in sync with the date range by the
    ``sync_academic_year`` command; API responses compute it from the dates.
    """

    class Semester(models.TextChoices):
        GANJIL = 'ganjil', 'Ganjil'
        GENAP = 'genap', 'Genap'

    semester = models.CharField(max_length=8, choices=Semester.choices, default=Semester.GANJIL)
    year = models.PositiveIntegerField(null=True, blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Academic Year'
        verbose_name_plural = 'Academic Years'
        ordering = ('-year', '-semester', '-created_at')

    def __str__(self):
        return self.label

    @property
    def label(self) -> str:
        semester = self.get_semester_display()
        return f"{semester} {self.year}" if self.year else semester


class LecturerAvailability(models.Model):
    """Weekly time slot in which a lecturer accepts guidance sessions."""

    class Day(models.TextChoices):
        MONDAY = 'monday', 'Monday'
        TUESDAY = 'tuesday', 'Tuesday'
        WEDNESDAY = 'wednesday', 'Wednesday'
        THURSDAY = 'thursday', 'Thursday'
        FRIDAY = 'friday', 'Friday'

    lecturer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='availabilities',
    )
    day = models.CharField(max_length=10, choices=Day.choices)
    start_time = models.TimeField()
    end_time = models.TimeField()
    valid_from = models.DateField()
    valid_until = models.DateField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Lecturer Availability'
        verbose_name_plural = 'Lecturer Availabilities'
        indexes = [models.Index(fields=['lecturer', 'day'], name='academics_avail_lect_day_idx')]

    def __str__(self):
        return f"{self.lecturer} {self.day} {self.start_time:%H:%M}-{self.end_time:%H:%M}"
