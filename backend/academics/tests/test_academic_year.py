from datetime import date

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts import roles
from accounts.utils import assign_roles
from academics.models import AcademicYear
from academics.services import academic_year as academic_year_service
from academics.utils import is_within_date_range
from sita.exceptions import Conflict


class AcademicYearServiceTests(TestCase):
    def setUp(self):
        self.today = date(2025, 10, 1)
        self.current = academic_year_service.create_academic_year(
            semester='ganjil', year=2025, start_date=date(2025, 8, 1), end_date=date(2026, 1, 31),
        )
        self.past = academic_year_service.create_academic_year(
            semester='genap', year=2024, start_date=date(2025, 2, 1), end_date=date(2025, 7, 31),
        )

    def test_semester_defaults_to_ganjil(self):
        created = academic_year_service.create_academic_year(year=2030)
        self.assertEqual(created.semester, AcademicYear.Semester.GANJIL)

    def test_create_rejects_inverted_range(self):
        with self.assertRaises(ValidationError):
            academic_year_service.create_academic_year(
                semester='genap', year=2026, start_date=date(2026, 7, 1), end_date=date(2026, 2, 1),
            )

    def test_create_rejects_duplicate_semester_year(self):
        with self.assertRaises(Conflict):
            academic_year_service.create_academic_year(semester='ganjil', year=2025)

    def test_end_date_is_inclusive(self):
        self.assertTrue(is_within_date_range(self.past, date(2025, 7, 31)))
        self.assertFalse(is_within_date_range(self.past, date(2025, 8, 1)))

    def test_only_currently_active_year_can_be_updated(self):
        with self.assertRaises(ValidationError):
            academic_year_service.update_academic_year(self.past, year=2023, today=self.today)

        updated = academic_year_service.update_academic_year(
            self.current, end_date=date(2026, 2, 15), today=self.today,
        )
        self.assertEqual(updated.end_date, date(2026, 2, 15))

    def test_update_checks_merged_range_and_duplicates(self):
        with self.assertRaises(ValidationError):
            academic_year_service.update_academic_year(self.current, end_date=date(2025, 7, 1), today=self.today)
        with self.assertRaises(Conflict):
            academic_year_service.update_academic_year(
                self.current, semester='genap', year=2024, today=self.today,
            )

    def test_list_computes_active_flag_and_paginates(self):
        result = academic_year_service.list_academic_years(page=1, page_size=1, today=self.today)
        self.assertEqual(result['total'], 2)
        self.assertEqual(result['total_pages'], 2)
        self.assertEqual(len(result['items']), 1)
        # latest year first
        self.assertEqual(result['items'][0].pk, self.current.pk)
        self.assertTrue(result['items'][0].is_active)

        searched = academic_year_service.list_academic_years(search='2024', today=self.today)
        self.assertEqual([y.pk for y in searched['items']], [self.past.pk])

    def test_sync_makes_date_matching_year_the_only_active(self):
        AcademicYear.objects.filter(pk=self.past.pk).update(is_active=True)

        active = academic_year_service.sync_active_academic_year(today=self.today)

        self.assertEqual(active.pk, self.current.pk)
        self.assertEqual(list(AcademicYear.objects.filter(is_active=True)), [self.current])

    def test_sync_deactivates_all_when_nothing_matches(self):
        AcademicYear.objects.update(is_active=True)
        self.assertIsNone(academic_year_service.sync_active_academic_year(today=date(2030, 1, 1)))
        self.assertFalse(AcademicYear.objects.filter(is_active=True).exists())

    def test_get_active_uses_dates(self):
        self.assertEqual(academic_year_service.get_active_academic_year(self.today), self.current)
        self.assertIsNone(academic_year_service.get_active_academic_year(date(2030, 1, 1)))


@override_settings(SITA_TIME_ZONE='Asia/Jakarta')
class AcademicYearApiTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_user(username='admin1')
        assign_roles(self.admin, [roles.ADMIN])
        self.student = User.objects.create_user(username='mhs1')
        assign_roles(self.student, [roles.MAHASISWA])
        self.client = APIClient()

    def test_admin_can_create_and_list(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post('/api/academics/academic-years/', {'semester': 'genap', 'year': 2026}, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['label'], 'Genap 2026')

        resp = self.client.get('/api/academics/academic-years/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['total'], 1)

    def test_duplicate_returns_409(self):
        self.client.force_authenticate(self.admin)
        self.client.post('/api/academics/academic-years/', {'semester': 'genap', 'year': 2026}, format='json')
        resp = self.client.post('/api/academics/academic-years/', {'semester': 'genap', 'year': 2026}, format='json')
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data['status_code'], 409)

    def test_student_is_forbidden(self):
        self.client.force_authenticate(self.student)
        resp = self.client.get('/api/academics/academic-years/')
        self.assertEqual(resp.status_code, 403)
