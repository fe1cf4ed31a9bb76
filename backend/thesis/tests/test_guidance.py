import io
from datetime import date, datetime, timedelta
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework.exceptions import NotFound
from rest_framework.test import APIClient

from accounts import roles
from accounts.utils import assign_roles
from academics.utils import campus_timezone
from notifications.models import Notification
from notifications.services.push_service import PushOutcome
from thesis.models import Thesis, ThesisGuidance, ThesisMilestone, ThesisSupervisor
from thesis.services import guidance as guidance_service

Status = ThesisGuidance.Status


class GuidanceFixtureMixin:
    def setUp(self):
        super().setUp()
        User = get_user_model()
        self.student = User.objects.create_user(username='mhs_bimb', full_name='Sari')
        assign_roles(self.student, [roles.MAHASISWA])
        self.p1 = User.objects.create_user(username='dosen_bimb1', full_name='Dr. Budi')
        self.p2 = User.objects.create_user(username='dosen_bimb2', full_name='Dr. Citra')
        assign_roles(self.p1, [roles.PEMBIMBING_1])
        assign_roles(self.p2, [roles.PEMBIMBING_2])
        self.thesis = Thesis.objects.create(student=self.student, title='Analisis Sentimen')
        ThesisSupervisor.objects.create(thesis=self.thesis, lecturer=self.p2, role=ThesisSupervisor.SupervisorRole.PEMBIMBING_2)
        ThesisSupervisor.objects.create(thesis=self.thesis, lecturer=self.p1, role=ThesisSupervisor.SupervisorRole.PEMBIMBING_1)
        self.milestone = ThesisMilestone.objects.create(thesis=self.thesis, title='Bab 1')
        self.when = timezone.now() + timedelta(days=2)

        push = mock.patch('notifications.services.push_service.send_push')
        self.send_push = push.start()
        self.addCleanup(push.stop)

    def _request(self, **kwargs):
        kwargs.setdefault('requested_date', self.when)
        kwargs.setdefault('milestone_ids', [self.milestone.pk])
        return guidance_service.request_guidance(self.student, **kwargs)


class StudentGuidanceTests(GuidanceFixtureMixin, TestCase):
    def test_request_defaults_to_first_supervisor_and_starts_milestone(self):
        guidance = self._request(notes=' Diskusi bab 1 ')

        self.assertEqual(guidance.supervisor, self.p1)
        self.assertEqual(guidance.status, Status.REQUESTED)
        self.assertEqual(guidance.notes, 'Diskusi bab 1')
        self.assertEqual(list(guidance.milestones.all()), [self.milestone])

        self.milestone.refresh_from_db()
        self.assertEqual(self.milestone.status, ThesisMilestone.Status.IN_PROGRESS)
        self.assertIsNotNone(self.milestone.started_at)

        notified = set(Notification.objects.filter(type='guidance_requested').values_list('user_id', flat=True))
        self.assertEqual(notified, {self.p1.pk, self.p2.pk})

    def test_one_open_request_per_thesis(self):
        self._request()
        with self.assertRaises(ValidationError):
            self._request()

    def test_supervisor_must_belong_to_thesis(self):
        outsider = get_user_model().objects.create_user(username='dosen_luar')
        with self.assertRaises(ValidationError):
            self._request(supervisor_id=outsider.pk)
        self.assertEqual(self._request(supervisor_id=self.p2.pk).supervisor, self.p2)

    def test_milestones_are_required(self):
        with self.assertRaises(ValidationError):
            self._request(milestone_ids=[])

        other = Thesis.objects.create(student=get_user_model().objects.create_user(username='mhs_x'))
        foreign = ThesisMilestone.objects.create(thesis=other, title='X')
        with self.assertRaises(ValidationError):
            self._request(milestone_ids=[foreign.pk])

        ThesisMilestone.objects.filter(pk=self.milestone.pk).update(status=ThesisMilestone.Status.REVISION_NEEDED)
        self.assertEqual(self._request(milestone_ids=[]).milestones.count(), 0)

    def test_inactive_thesis_cannot_request(self):
        Thesis.objects.filter(pk=self.thesis.pk).update(rating=Thesis.Rating.FAILED)
        with self.assertRaises(NotFound):
            self._request()

    def test_cancel_only_while_requested(self):
        guidance = self._request()
        cancelled = guidance_service.cancel_guidance(self.student, guidance.pk, reason='Sakit')
        self.assertEqual(cancelled.status, Status.CANCELLED)
        self.assertIn('Sakit', cancelled.notes)

        with self.assertRaises(ValidationError):
            guidance_service.cancel_guidance(self.student, guidance.pk)

        stranger = get_user_model().objects.create_user(username='mhs_asing')
        with self.assertRaises(NotFound):
            guidance_service.cancel_guidance(stranger, guidance.pk)

        # a cancelled request no longer blocks a new one
        self.assertEqual(self._request().status, Status.REQUESTED)


class LecturerGuidanceTests(GuidanceFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.guidance = self._request()
        Notification.objects.all().delete()

    def test_accept_keeps_requested_date_by_default(self):
        accepted = guidance_service.accept_guidance(self.p1, self.guidance.pk, feedback='Siapkan slide')

        self.assertEqual(accepted.status, Status.ACCEPTED)
        self.assertEqual(accepted.approved_date, self.guidance.requested_date)
        self.assertEqual(accepted.supervisor_feedback, 'Siapkan slide')
        note = Notification.objects.get()
        self.assertEqual((note.user, note.title), (self.student, 'Bimbingan Disetujui'))

        with self.assertRaises(ValidationError):
            guidance_service.reject_guidance(self.p1, self.guidance.pk)

    def test_accept_can_move_date(self):
        moved = self.when + timedelta(hours=3)
        accepted = guidance_service.accept_guidance(self.p1, self.guidance.pk, approved_date=moved, duration=90)
        self.assertEqual(accepted.approved_date, moved)
        self.assertEqual(accepted.duration, 90)

    def test_only_assigned_supervisor_decides(self):
        with self.assertRaises(NotFound):
            guidance_service.accept_guidance(self.p2, self.guidance.pk)

    def test_reject(self):
        rejected = guidance_service.reject_guidance(self.p1, self.guidance.pk, feedback='Jadwal penuh')
        self.assertEqual(rejected.status, Status.REJECTED)
        self.assertIn('Jadwal penuh', Notification.objects.get(user=self.student).message)

    def test_complete_requires_accepted(self):
        with self.assertRaises(ValidationError):
            guidance_service.complete_guidance(self.p1, self.guidance.pk)
        guidance_service.accept_guidance(self.p1, self.guidance.pk)
        completed = guidance_service.complete_guidance(self.p1, self.guidance.pk, feedback='Lanjut bab 2')
        self.assertEqual(completed.status, Status.COMPLETED)
        self.assertEqual(completed.supervisor_feedback, 'Lanjut bab 2')


class GuidanceReminderTests(GuidanceFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        tz = campus_timezone()
        self.day = date(2025, 6, 10)
        self.today_at_nine = datetime(2025, 6, 10, 9, 0, tzinfo=tz)
        ThesisGuidance.objects.create(
            thesis=self.thesis, supervisor=self.p1, status=Status.ACCEPTED, approved_date=self.today_at_nine,
        )
        # late evening the day before, and an unanswered request for today
        ThesisGuidance.objects.create(
            thesis=self.thesis, supervisor=self.p1, status=Status.ACCEPTED,
            approved_date=datetime(2025, 6, 9, 23, 30, tzinfo=tz),
        )
        ThesisGuidance.objects.create(
            thesis=self.thesis, supervisor=self.p2, status=Status.REQUESTED, requested_date=self.today_at_nine,
            approved_date=self.today_at_nine,
        )

    def test_reminds_student_and_supervisor(self):
        self.send_push.return_value = PushOutcome(ok=True)
        result = guidance_service.send_guidance_reminders(today=self.day)

        self.assertEqual(result, {'total': 1, 'sent': 1, 'failed': 0})
        recipients = sorted(c.args[0][0] for c in self.send_push.call_args_list)
        self.assertEqual(recipients, sorted([self.student.pk, self.p1.pk]))
        self.assertEqual(self.send_push.call_args.kwargs['data']['type'], 'guidance_reminder')
        self.assertIn('09:00', self.send_push.call_args.kwargs['body'])

    def test_failures_are_counted(self):
        self.send_push.return_value = PushOutcome(ok=False, message='Gateway HTTP 503')
        self.assertEqual(guidance_service.send_guidance_reminders(today=self.day)['failed'], 1)

        self.send_push.side_effect = RuntimeError('boom')
        self.assertEqual(
            guidance_service.send_guidance_reminders(today=self.day), {'total': 1, 'sent': 0, 'failed': 1},
        )

    def test_management_command(self):
        self.send_push.return_value = PushOutcome(ok=True)
        out = io.StringIO()
        call_command('send_guidance_reminders', '--date', '2025-06-10', stdout=out)
        self.assertIn('total=1 sent=1 failed=0', out.getvalue())


class GuidanceApiTests(GuidanceFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client = APIClient()

    def test_request_accept_flow(self):
        self.client.force_authenticate(self.student)
        resp = self.client.post('/api/thesis/guidance/', {
            'requested_date': self.when.isoformat(),
            'milestone_ids': [self.milestone.pk],
            'notes': 'Bab 1',
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        guidance_id = resp.data['id']
        self.assertEqual(resp.data['supervisor']['id'], self.p1.pk)
        self.assertEqual(resp.data['milestone_ids'], [self.milestone.pk])

        resp = self.client.post('/api/thesis/guidance/', {'requested_date': self.when.isoformat()}, format='json')
        self.assertEqual(resp.status_code, 400)

        self.client.force_authenticate(self.p1)
        resp = self.client.get('/api/thesis/lecturer/guidance/?status=requested')
        self.assertEqual([g['id'] for g in resp.data], [guidance_id])

        resp = self.client.post(f'/api/thesis/lecturer/guidance/{guidance_id}/accept/', {}, format='json')
        self.assertEqual(resp.data['status'], 'accepted')

        resp = self.client.post(f'/api/thesis/lecturer/guidance/{guidance_id}/complete/', {'feedback': 'OK'}, format='json')
        self.assertEqual(resp.data['status'], 'completed')

    def test_student_cancel_and_role_checks(self):
        guidance = self._request()
        self.client.force_authenticate(self.student)
        resp = self.client.post(f'/api/thesis/guidance/{guidance.pk}/cancel/', {}, format='json')
        self.assertEqual(resp.data['status'], 'cancelled')
        self.assertEqual(self.client.get('/api/thesis/lecturer/guidance/').status_code, 403)

        self.client.force_authenticate(self.p1)
        self.assertEqual(self.client.get('/api/thesis/guidance/').status_code, 403)
