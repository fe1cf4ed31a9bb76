from django.contrib import admin

from .models import AcademicYear, LecturerAvailability


@admin.register(AcademicYear)
class AcademicYearAdmin(admin.ModelAdmin):
    list_display = ('semester', 'year', 'start_date', 'end_date', 'is_active')
    list_filter = ('semester', 'is_active')
    search_fields = ('year',)


@admin.register(LecturerAvailability)
class LecturerAvailabilityAdmin(admin.ModelAdmin):
    list_display = ('lecturer', 'day', 'start_time', 'end_time', 'valid_from', 'valid_until', 'is_active')
    list_filter = ('day', 'is_active')
    search_fields = ('lecturer__username', 'lecturer__full_name')
