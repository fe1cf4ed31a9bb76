from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.test import APIClient

from accounts import roles
from accounts.utils import assign_roles
from academics.services import academic_year as academic_year_service
from academics.utils import local_today
from sita.exceptions import Conflict
from thesis.models import MilestoneTemplate, Thesis, ThesisStatus, Topic
from thesis.services import master_data
from thesis.services import topics as topic_service


class TopicServiceTests(TestCase):
    def test_names_are_unique_ignoring_case(self):
        topic_service.create_topic(name='Machine Learning')
        with self.assertRaises(Conflict):
            topic_service.create_topic(name='  machine learning ')
        with self.assertRaises(ValidationError):
            topic_service.create_topic(name='   ')

    def test_bulk_delete_reports_topics_in_use(self):
        free = topic_service.create_topic(name='IoT')
        used = topic_service.create_topic(name='Data Mining')
        templated = topic_service.create_topic(name='Jaringan')
        student = get_user_model().objects.create_user(username='mhs_topic')
        Thesis.objects.create(student=student, topic=used)
        MilestoneTemplate.objects.create(topic=templated, title='Proposal')

        result = topic_service.bulk_delete_topics([free.pk, used.pk, templated.pk])

        self.assertEqual(result['deleted'], 1)
        self.assertEqual(result['failed'], 2)
        self.assertEqual(sorted(result['failed_names']), ['Data Mining', 'Jaringan'])
        self.assertFalse(Topic.objects.filter(pk=free.pk).exists())

        with self.assertRaises(ValidationError):
            topic_service.bulk_delete_topics([])

    def test_counts_are_annotated(self):
        topic = topic_service.create_topic(name='Keamanan')
        MilestoneTemplate.objects.create(topic=topic, title='Bab 1')
        MilestoneTemplate.objects.create(topic=topic, title='Bab 2')
        fetched = topic_service.get_topic(topic.pk)
        self.assertEqual(fetched.thesis_count, 0)
        self.assertEqual(fetched.milestone_template_count, 2)


class CreateThesisTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.student = User.objects.create_user(username='mhs_ta', identity_number='2111529999')
        self.p1 = User.objects.create_user(username='dosen_p1')
        self.p2 = User.objects.create_user(username='dosen_p2')
        today = local_today()
        self.year = academic_year_service.create_academic_year(
            semester='ganjil', year=today.year,
            start_date=today - timedelta(days=30), end_date=today + timedelta(days=30),
        )

    def test_new_thesis_defaults(self):
        thesis = master_data.create_thesis(
            student_id=self.student.pk, pembimbing1=self.p1.pk, pembimbing2=self.p2.pk, title='  Sistem Rekomendasi ',
        )
        self.assertEqual(thesis.title, 'Sistem Rekomendasi')
        self.assertEqual(thesis.academic_year, self.year)
        self.assertEqual(thesis.thesis_status.name, ThesisStatus.BIMBINGAN)
        self.assertEqual(thesis.rating, Thesis.Rating.ONGOING)
        self.assertEqual(thesis.deadline_date - thesis.start_date, timedelta(days=365))
        self.assertEqual(
            sorted(s.role for s in thesis.supervisors.all()), ['Pembimbing 1', 'Pembimbing 2'],
        )

    def test_only_one_active_thesis_per_student(self):
        first = master_data.create_thesis(student_id=self.student.pk, pembimbing1=self.p1.pk)
        with self.assertRaises(Conflict):
            master_data.create_thesis(student_id=self.student.pk, pembimbing1=self.p1.pk)

        Thesis.objects.filter(pk=first.pk).update(rating=Thesis.Rating.FAILED)
        second = master_data.create_thesis(student_id=self.student.pk, pembimbing1=self.p1.pk)
        self.assertNotEqual(first.pk, second.pk)

    def test_requires_active_academic_year(self):
        self.year.delete()
        with self.assertRaises(ValidationError):
            master_data.create_thesis(student_id=self.student.pk, pembimbing1=self.p1.pk)

    def test_supervisors_must_differ(self):
        with self.assertRaises(ValidationError):
            master_data.create_thesis(student_id=self.student.pk, pembimbing1=self.p1.pk, pembimbing2=self.p1.pk)
        self.assertFalse(Thesis.objects.exists())

    def test_active_topic_templates_are_seeded(self):
        topic = Topic.objects.create(name='Data Mining')
        MilestoneTemplate.objects.create(topic=topic, title='Bab 2', order=1)
        MilestoneTemplate.objects.create(topic=topic, title='Bab 1', order=0)
        MilestoneTemplate.objects.create(topic=topic, title='Lama', order=2, is_active=False)
        MilestoneTemplate.objects.create(title='Umum', order=0)

        thesis = master_data.create_thesis(student_id=self.student.pk, pembimbing1=self.p1.pk, topic_id=topic.pk)

        milestones = list(thesis.milestones.all())
        self.assertEqual([m.title for m in milestones], ['Bab 1', 'Bab 2'])
        self.assertEqual(milestones[1].target_date - milestones[0].target_date, timedelta(days=14))
        self.assertEqual(milestones[0].target_date, local_today())

        without_topic = master_data.create_thesis(
            student_id=get_user_model().objects.create_user(username='mhs_tanpa_topik').pk, pembimbing1=self.p1.pk,
        )
        self.assertFalse(without_topic.milestones.exists())

    def test_update_keeps_status_when_empty_and_swaps_supervisor(self):
        thesis = master_data.create_thesis(student_id=self.student.pk, pembimbing1=self.p1.pk)
        updated = master_data.update_thesis(thesis.pk, thesis_status_id=None, pembimbing2=self.p2.pk)
        self.assertEqual(updated.thesis_status.name, ThesisStatus.BIMBINGAN)
        self.assertEqual(updated.supervisors.count(), 2)

    def test_list_search_by_student_nim(self):
        master_data.create_thesis(student_id=self.student.pk, pembimbing1=self.p1.pk, title='Deteksi Hoaks')
        result = master_data.list_theses(search='29999')
        self.assertEqual(result['total'], 1)
        self.assertEqual(master_data.list_theses(search='tidak ada')['total'], 0)


class ThesisApiTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_user(username='admin_ta')
        assign_roles(self.admin, [roles.ADMIN])
        self.client = APIClient()
        self.client.force_authenticate(self.admin)

    def test_topic_endpoints(self):
        resp = self.client.post('/api/thesis/topics/', {'name': 'Computer Vision'}, format='json')
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post('/api/thesis/topics/', {'name': 'computer vision'}, format='json')
        self.assertEqual(resp.status_code, 409)

        topic_id = Topic.objects.get().pk
        resp = self.client.post('/api/thesis/topics/bulk-delete/', {'ids': [topic_id]}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['deleted'], 1)

    def test_statuses_are_seeded(self):
        resp = self.client.get('/api/thesis/statuses/')
        self.assertIn(ThesisStatus.GAGAL, [s['name'] for s in resp.data])
