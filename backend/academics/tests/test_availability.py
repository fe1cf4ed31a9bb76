from datetime import date, time, timedelta

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.test import APIClient

from accounts import roles
from accounts.utils import assign_roles
from academics.models import LecturerAvailability
from academics.services import availability as availability_service


class AvailabilityServiceTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.lecturer = User.objects.create_user(username='dosen_a')
        self.other = User.objects.create_user(username='dosen_b')
        self.today = date(2025, 9, 1)
        self.slot = availability_service.create_availability(
            self.lecturer,
            day='monday',
            start_time=time(9, 0),
            end_time=time(11, 0),
            valid_from=self.today,
            valid_until=self.today + timedelta(days=120),
            today=self.today,
        )

    def _create(self, lecturer=None, **overrides):
        data = dict(
            day='monday',
            start_time=time(11, 0),
            end_time=time(12, 0),
            valid_from=self.today,
            valid_until=self.today + timedelta(days=30),
            today=self.today,
        )
        data.update(overrides)
        return availability_service.create_availability(lecturer or self.lecturer, **data)

    def test_touching_slots_do_not_overlap(self):
        created = self._create(start_time=time(11, 0), end_time=time(12, 0))
        self.assertEqual(created.day, 'monday')

    def test_overlapping_slot_is_rejected(self):
        with self.assertRaises(ValidationError):
            self._create(start_time=time(10, 30), end_time=time(12, 0))

    def test_overlap_is_per_lecturer_and_day(self):
        self._create(lecturer=self.other, start_time=time(9, 30), end_time=time(10, 30))
        self._create(day='tuesday', start_time=time(9, 30), end_time=time(10, 30))
        self.assertEqual(LecturerAvailability.objects.count(), 3)

    def test_time_and_validity_rules(self):
        with self.assertRaises(ValidationError):
            self._create(start_time=time(13, 0), end_time=time(13, 0))
        with self.assertRaises(ValidationError):
            self._create(valid_from=self.today, valid_until=self.today)
        with self.assertRaises(ValidationError):
            self._create(valid_from=self.today - timedelta(days=1))

    def test_update_excludes_itself_from_overlap(self):
        updated = availability_service.update_availability(
            self.slot.pk, self.lecturer, start_time=time(9, 30),
        )
        self.assertEqual(updated.start_time, time(9, 30))
        self.assertEqual(updated.end_time, time(11, 0))

    def test_update_into_existing_slot_is_rejected(self):
        other_slot = self._create(day='wednesday', start_time=time(9, 0), end_time=time(10, 0))
        with self.assertRaises(ValidationError):
            availability_service.update_availability(other_slot.pk, self.lecturer, day='monday')

    def test_foreign_and_missing_records(self):
        with self.assertRaises(PermissionDenied):
            availability_service.toggle_availability(self.slot.pk, self.other)
        with self.assertRaises(PermissionDenied):
            availability_service.delete_availability(self.slot.pk, self.other)
        with self.assertRaises(NotFound):
            availability_service.delete_availability(999999, self.lecturer)

    def test_toggle_and_listing_order(self):
        self._create(day='friday', start_time=time(8, 0), end_time=time(9, 0))
        self._create(day='monday', start_time=time(7, 0), end_time=time(8, 0))

        toggled = availability_service.toggle_availability(self.slot.pk, self.lecturer)
        self.assertFalse(toggled.is_active)

        listed = [(a.day, a.start_time) for a in availability_service.list_for_lecturer(self.lecturer)]
        self.assertEqual(listed, [('monday', time(7, 0)), ('monday', time(9, 0)), ('friday', time(8, 0))])


class AvailabilityApiTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.lecturer = User.objects.create_user(username='dosen_api')
        assign_roles(self.lecturer, [roles.PEMBIMBING_1])
        self.student = User.objects.create_user(username='mhs_api')
        assign_roles(self.student, [roles.MAHASISWA])
        self.client = APIClient()

    def test_rejects_bad_time_format(self):
        self.client.force_authenticate(self.lecturer)
        resp = self.client.post('/api/academics/lecturer-availability/', {
            'day': 'monday',
            'start_time': '9 AM',
            'end_time': '10:00',
            'valid_from': '2999-01-01',
            'valid_until': '2999-02-01',
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('start_time', resp.data['errors'])

    def test_create_and_list_as_lecturer(self):
        self.client.force_authenticate(self.lecturer)
        resp = self.client.post('/api/academics/lecturer-availability/', {
            'day': 'tuesday',
            'start_time': '13:00',
            'end_time': '15:00',
            'valid_from': '2999-01-01',
            'valid_until': '2999-06-30',
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['start_time'], '13:00')

        resp = self.client.get('/api/academics/lecturer-availability/')
        self.assertEqual(len(resp.data), 1)

    def test_student_is_forbidden(self):
        self.client.force_authenticate(self.student)
        resp = self.client.get('/api/academics/lecturer-availability/')
        self.assertEqual(resp.status_code, 403)
