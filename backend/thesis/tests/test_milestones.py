from datetime import date, timedelta
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.test import APIClient

from accounts import roles
from accounts.utils import assign_roles
from notifications.models import Notification
from thesis.models import MilestoneTemplate, Thesis, ThesisMilestone, ThesisSupervisor, Topic
from thesis.services import milestones as milestone_service

Status = ThesisMilestone.Status


def _make_thesis(student, *supervisors, topic=None):
    thesis = Thesis.objects.create(student=student, title='Klasifikasi Citra', topic=topic)
    for lecturer, role in zip(supervisors, ThesisSupervisor.SupervisorRole.values):
        ThesisSupervisor.objects.create(thesis=thesis, lecturer=lecturer, role=role)
    return thesis


class TemplateServiceTests(TestCase):
    def setUp(self):
        self.topic = Topic.objects.create(name='Computer Vision')

    def test_order_is_appended_per_topic(self):
        first = milestone_service.create_template(title=' Proposal ', topic_id=self.topic.pk)
        second = milestone_service.create_template(title='Bab 1', topic_id=self.topic.pk)
        general = milestone_service.create_template(title='Umum')

        self.assertEqual(first.title, 'Proposal')
        self.assertEqual((first.order, second.order), (0, 1))
        self.assertEqual(general.order, 0)
        self.assertEqual(
            [t.title for t in milestone_service.list_templates(topic_id=self.topic.pk)], ['Proposal', 'Bab 1'],
        )

    def test_partial_update_and_validation(self):
        template = milestone_service.create_template(title='Proposal', description='Draft awal')
        updated = milestone_service.update_template(template.pk, is_active=False)
        self.assertFalse(updated.is_active)
        self.assertEqual(updated.description, 'Draft awal')

        with self.assertRaises(ValidationError):
            milestone_service.update_template(template.pk, title='  ')
        with self.assertRaises(NotFound):
            milestone_service.create_template(title='x', topic_id=999999)

    def test_bulk_delete(self):
        ids = [milestone_service.create_template(title=f'T{i}').pk for i in range(3)]
        self.assertEqual(milestone_service.bulk_delete_templates(ids[:2] + [999999]), {'deleted': 2})
        self.assertEqual(MilestoneTemplate.objects.count(), 1)
        with self.assertRaises(ValidationError):
            milestone_service.bulk_delete_templates([])


class MilestoneServiceTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.student = User.objects.create_user(username='mhs_ms', full_name='Dewi')
        self.p1 = User.objects.create_user(username='dosen_ms1', full_name='Dr. Andi')
        self.p2 = User.objects.create_user(username='dosen_ms2')
        self.stranger = User.objects.create_user(username='mhs_lain_ms')
        self.thesis = _make_thesis(self.student, self.p1, self.p2)

        push = mock.patch('notifications.services.push_service.send_push')
        self.send_push = push.start()
        self.addCleanup(push.stop)

    def _milestone(self, title='Bab 1', **fields):
        return ThesisMilestone.objects.create(thesis=self.thesis, title=title, **fields)

    def test_access_is_limited_to_owner_and_supervisors(self):
        self.assertEqual(list(milestone_service.list_milestones(self.p2, self.thesis.pk)), [])
        with self.assertRaises(PermissionDenied):
            milestone_service.list_milestones(self.stranger, self.thesis.pk)
        with self.assertRaises(NotFound):
            milestone_service.get_milestone(self.student, 999999)

    def test_student_create_appends_without_notification(self):
        first = milestone_service.create_milestone(self.student, self.thesis.pk, title='Proposal')
        second = milestone_service.create_milestone(self.student, self.thesis.pk, title='Bab 1')

        self.assertEqual((first.order, second.order), (0, 1))
        self.assertEqual(second.status, Status.NOT_STARTED)
        self.assertEqual(second.progress, 0)
        self.assertFalse(Notification.objects.exists())

    def test_supervisor_create_notifies_student(self):
        milestone = milestone_service.create_milestone(self.p1, self.thesis.pk, title='Revisi Bab 3')

        note = Notification.objects.get(user=self.student)
        self.assertEqual(note.title, 'Milestone Baru dari Pembimbing')
        self.assertEqual(note.reference_id, str(milestone.pk))
        self.assertEqual(self.send_push.call_args[0][0], [self.student.pk])

    def test_create_from_templates(self):
        topic = Topic.objects.create(name='NLP')
        MilestoneTemplate.objects.create(topic=topic, title='Bab 2', order=2)
        MilestoneTemplate.objects.create(topic=topic, title='Bab 1', order=1)

        created = milestone_service.create_from_templates(
            self.student, self.thesis.pk, topic_id=topic.pk, start_date=date(2025, 1, 6),
        )

        self.assertEqual([(m.title, m.order, m.target_date) for m in created], [
            ('Bab 1', 0, date(2025, 1, 6)),
            ('Bab 2', 1, date(2025, 1, 20)),
        ])
        self.thesis.refresh_from_db()
        self.assertEqual(self.thesis.topic, topic)

        with self.assertRaises(ValidationError):
            milestone_service.create_from_templates(self.student, self.thesis.pk, topic_id=topic.pk)

    def test_create_from_templates_needs_templates_and_owner(self):
        with self.assertRaises(ValidationError):
            milestone_service.create_from_templates(self.student, self.thesis.pk)
        with self.assertRaises(PermissionDenied):
            milestone_service.create_from_templates(self.p1, self.thesis.pk, template_ids=[1])

    def test_completed_milestone_is_frozen(self):
        milestone = self._milestone(status=Status.COMPLETED)
        with self.assertRaises(ValidationError):
            milestone_service.update_milestone(self.student, milestone.pk, title='Baru')
        with self.assertRaises(ValidationError):
            milestone_service.delete_milestone(self.student, milestone.pk)
        with self.assertRaises(ValidationError):
            milestone_service.update_progress(self.student, milestone.pk, 50)

    def test_only_owner_edits(self):
        milestone = self._milestone()
        with self.assertRaises(PermissionDenied):
            milestone_service.update_milestone(self.p1, milestone.pk, title='Baru')

        updated = milestone_service.update_milestone(self.student, milestone.pk, target_date=date(2025, 5, 1))
        self.assertEqual(updated.target_date, date(2025, 5, 1))
        self.assertEqual(updated.title, 'Bab 1')

    def test_status_transitions(self):
        milestone = self._milestone()
        started = milestone_service.update_status(self.student, milestone.pk, Status.IN_PROGRESS)
        self.assertIsNotNone(started.started_at)

        back = milestone_service.update_status(self.student, milestone.pk, Status.NOT_STARTED)
        self.assertEqual(back.status, Status.NOT_STARTED)

        with self.assertRaises(ValidationError):
            milestone_service.update_status(self.student, milestone.pk, Status.COMPLETED)

        revision = self._milestone('Bab 2', status=Status.REVISION_NEEDED)
        self.assertEqual(
            milestone_service.update_status(self.student, revision.pk, Status.IN_PROGRESS).status, Status.IN_PROGRESS,
        )

    def test_progress_starts_milestone_and_full_progress_notifies_supervisors(self):
        milestone = self._milestone()
        updated = milestone_service.update_progress(self.student, milestone.pk, 40)
        self.assertEqual(updated.status, Status.IN_PROGRESS)
        self.assertFalse(Notification.objects.exists())

        with self.assertRaises(ValidationError):
            milestone_service.update_progress(self.student, milestone.pk, 101)

        milestone_service.update_progress(self.student, milestone.pk, 100)
        notified = set(Notification.objects.filter(title='Milestone Selesai 100%').values_list('user_id', flat=True))
        self.assertEqual(notified, {self.p1.pk, self.p2.pk})

        # staying at 100 does not notify again
        milestone_service.update_progress(self.student, milestone.pk, 100)
        self.assertEqual(Notification.objects.count(), 2)

    def test_validate_and_revision(self):
        milestone = self._milestone(status=Status.IN_PROGRESS)
        with self.assertRaises(PermissionDenied):
            milestone_service.validate_milestone(self.student, milestone.pk)
        with self.assertRaises(ValidationError):
            milestone_service.request_revision(self.p1, milestone.pk, notes=' ')

        revised = milestone_service.request_revision(self.p1, milestone.pk, notes='Perbaiki metodologi')
        self.assertEqual(revised.status, Status.REVISION_NEEDED)
        self.assertEqual(revised.supervisor_notes, 'Perbaiki metodologi')

        validated = milestone_service.validate_milestone(self.p2, milestone.pk, notes='OK')
        self.assertEqual(validated.status, Status.COMPLETED)
        self.assertEqual(validated.progress, 100)
        self.assertEqual(validated.validated_by, self.p2)
        self.assertIsNotNone(validated.completed_at)

        with self.assertRaises(ValidationError):
            milestone_service.validate_milestone(self.p1, milestone.pk)
        with self.assertRaises(ValidationError):
            milestone_service.request_revision(self.p1, milestone.pk, notes='lagi')

    def test_submit_for_review(self):
        milestone = self._milestone()
        with self.assertRaises(ValidationError):
            milestone_service.submit_for_review(self.student, milestone.pk)

        ThesisMilestone.objects.filter(pk=milestone.pk).update(status=Status.IN_PROGRESS)
        submitted = milestone_service.submit_for_review(self.student, milestone.pk, notes='Mohon dicek')
        self.assertEqual(submitted.status, Status.PENDING_REVIEW)
        self.assertEqual(Notification.objects.filter(title='Milestone Menunggu Review').count(), 2)

    def test_reorder(self):
        a, b, c = (self._milestone(t, order=i) for i, t in enumerate(('A', 'B', 'C')))
        ordered = milestone_service.reorder_milestones(self.student, self.thesis.pk, [c.pk, a.pk, b.pk])
        self.assertEqual([m.title for m in ordered], ['C', 'A', 'B'])

        other = ThesisMilestone.objects.create(thesis=_make_thesis(self.stranger), title='X')
        with self.assertRaises(ValidationError):
            milestone_service.reorder_milestones(self.student, self.thesis.pk, [a.pk, other.pk])
        with self.assertRaises(ValidationError):
            milestone_service.reorder_milestones(self.student, self.thesis.pk, [a.pk, a.pk])

    def test_progress_summary(self):
        self._milestone('A', status=Status.COMPLETED, progress=100)
        self._milestone('B', status=Status.IN_PROGRESS, progress=50)
        self._milestone('C')
        self._milestone('D', status=Status.COMPLETED, progress=100)

        summary = milestone_service.progress_summary(self.p1, self.thesis.pk)
        self.assertEqual(summary['total'], 4)
        self.assertEqual(summary['completed'], 2)
        self.assertEqual(summary['percent'], 50)
        self.assertEqual(summary['average_progress'], 62)
        self.assertEqual(summary['by_status']['in_progress'], 1)


class MilestoneApiTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.secretary = User.objects.create_user(username='sekdep_ms')
        assign_roles(self.secretary, [roles.SEKRETARIS_DEPARTEMEN])
        self.student = User.objects.create_user(username='mhs_ms_api')
        assign_roles(self.student, [roles.MAHASISWA])
        self.lecturer = User.objects.create_user(username='dosen_ms_api')
        assign_roles(self.lecturer, [roles.PEMBIMBING_1])
        self.thesis = _make_thesis(self.student, self.lecturer)
        self.client = APIClient()

        push = mock.patch('notifications.services.push_service.send_push')
        push.start()
        self.addCleanup(push.stop)

    def test_template_crud_is_for_secretary(self):
        self.client.force_authenticate(self.student)
        self.assertEqual(self.client.get('/api/thesis/milestone-templates/').status_code, 403)

        self.client.force_authenticate(self.secretary)
        resp = self.client.post('/api/thesis/milestone-templates/', {'title': 'Proposal'}, format='json')
        self.assertEqual(resp.status_code, 201)
        template_id = resp.data['id']
        self.assertIsNone(resp.data['topic_name'])

        resp = self.client.patch(f'/api/thesis/milestone-templates/{template_id}/', {'is_active': False}, format='json')
        self.assertFalse(resp.data['is_active'])
        self.assertEqual(resp.data['title'], 'Proposal')

        resp = self.client.post('/api/thesis/milestone-templates/bulk-delete/', {'ids': []}, format='json')
        self.assertEqual(resp.status_code, 400)

        resp = self.client.delete(f'/api/thesis/milestone-templates/{template_id}/')
        self.assertEqual(resp.status_code, 204)

    def test_student_and_supervisor_flow(self):
        self.client.force_authenticate(self.student)
        resp = self.client.post(f'/api/thesis/{self.thesis.pk}/milestones/', {'title': 'Bab 1'}, format='json')
        self.assertEqual(resp.status_code, 201)
        milestone_id = resp.data['id']

        resp = self.client.patch(f'/api/thesis/milestones/{milestone_id}/progress/', {'progress': 30}, format='json')
        self.assertEqual(resp.data['status'], 'in_progress')

        resp = self.client.post(f'/api/thesis/milestones/{milestone_id}/validate/', {}, format='json')
        self.assertEqual(resp.status_code, 403)

        self.client.force_authenticate(self.lecturer)
        resp = self.client.post(f'/api/thesis/milestones/{milestone_id}/revision/', {'notes': ''}, format='json')
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(f'/api/thesis/milestones/{milestone_id}/validate/', {'notes': 'Bagus'}, format='json')
        self.assertEqual(resp.data['status'], 'completed')

        resp = self.client.get(f'/api/thesis/{self.thesis.pk}/progress/')
        self.assertEqual(resp.data['percent'], 100)

    def test_outsider_is_forbidden(self):
        outsider = get_user_model().objects.create_user(username='dosen_lain_ms')
        self.client.force_authenticate(outsider)
        self.assertEqual(self.client.get(f'/api/thesis/{self.thesis.pk}/milestones/').status_code, 403)
        self.assertEqual(self.client.get('/api/thesis/999999/milestones/').status_code, 404)
