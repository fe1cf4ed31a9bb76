from django.urls import path

from .views import (
    AcademicYearDetailView,
    AcademicYearListCreateView,
    ActiveAcademicYearView,
    MyAvailabilityDetailView,
    MyAvailabilityListCreateView,
    MyAvailabilityToggleView,
    StudentImportView,
)

urlpatterns = [
    path('academic-years/', AcademicYearListCreateView.as_view(), name='academic_years'),
    path('academic-years/active/', ActiveAcademicYearView.as_view(), name='academic_year_active'),
    path('academic-years/<int:id>/', AcademicYearDetailView.as_view(), name='academic_year_detail'),
    path('students/import/', StudentImportView.as_view(), name='student_import'),
    path('lecturer-availability/', MyAvailabilityListCreateView.as_view(), name='lecturer_availability'),
    path('lecturer-availability/<int:id>/', MyAvailabilityDetailView.as_view(), name='lecturer_availability_detail'),
    path('lecturer-availability/<int:id>/toggle/', MyAvailabilityToggleView.as_view(), name='lecturer_availability_toggle'),
]
