from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.exceptions import NotFound
from rest_framework.test import APIClient

from accounts import roles
from accounts.utils import assign_roles
from OBE.models import AssessmentCriteria, AssessmentRubric, AssessmentScore, Cpmk
from OBE.services import rubrics as rubric_service
from OBE.services.rubrics import DEFENCE, SEMINAR
from sita.exceptions import Conflict
from thesis.models import Thesis


class RangeOverlapTests(TestCase):
    def test_closed_ranges(self):
        self.assertTrue(rubric_service.ranges_overlap(0, 10, 10, 20))
        self.assertTrue(rubric_service.ranges_overlap(5, 15, 0, 30))
        self.assertFalse(rubric_service.ranges_overlap(0, 9, 10, 20))
        self.assertFalse(rubric_service.ranges_overlap(21, 30, 10, 20))


class SeminarBudgetTests(TestCase):
    def setUp(self):
        self.cpmk = Cpmk.objects.create(code='CPMK-01', description='Analisis', type=Cpmk.CpmkType.THESIS)
        self.cpmk2 = Cpmk.objects.create(code='CPMK-02', description='Presentasi', type=Cpmk.CpmkType.THESIS)

    def test_total_is_capped_at_100(self):
        rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=60)
        rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk2.pk, max_score=40)

        with self.assertRaises(Conflict) as ctx:
            rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=1)
        self.assertIn('Remaining score available: 0 of 100', str(ctx.exception.detail))
        self.assertEqual(rubric_service.active_total(SEMINAR), 100)

    def test_display_order_appends_per_cpmk(self):
        first = rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=10)
        second = rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=10)
        other = rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk2.pk, max_score=10)
        self.assertEqual((first.display_order, second.display_order, other.display_order), (1, 2, 1))
        self.assertEqual(first.role, AssessmentCriteria.AssessorRole.DEFAULT)

    def test_cpmk_must_be_active_thesis(self):
        research = Cpmk.objects.create(code='CPMK-RM', description='x', type=Cpmk.CpmkType.RESEARCH_METHOD)
        with self.assertRaises(ValidationError):
            rubric_service.create_criteria(SEMINAR, cpmk_id=research.pk, max_score=10)

        self.cpmk.is_active = False
        self.cpmk.save()
        with self.assertRaises(ValidationError):
            rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=10)

        with self.assertRaises(NotFound):
            rubric_service.create_criteria(SEMINAR, cpmk_id=999999, max_score=10)

    def test_max_score_must_be_positive_int(self):
        for bad in (0, -5, True, '10'):
            with self.assertRaises(ValidationError):
                rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=bad)

    def test_seminar_rejects_examiner_role(self):
        with self.assertRaises(ValidationError):
            rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=10, role='examiner')

    def test_update_excludes_itself_and_skips_inactive(self):
        criteria = rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=50)
        rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk2.pk, max_score=50)

        updated = rubric_service.update_criteria(SEMINAR, criteria.pk, max_score=50)
        self.assertEqual(updated.max_score, 50)
        with self.assertRaises(Conflict):
            rubric_service.update_criteria(SEMINAR, criteria.pk, max_score=51)

        rubric_service.toggle_criteria(SEMINAR, criteria.pk, False)
        updated = rubric_service.update_criteria(SEMINAR, criteria.pk, max_score=90)
        self.assertEqual(updated.max_score, 90)

        # re-activating would push the total to 140
        with self.assertRaises(Conflict):
            rubric_service.toggle_criteria(SEMINAR, criteria.pk, True)

    def test_empty_update_is_rejected(self):
        criteria = rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=10)
        with self.assertRaises(ValidationError):
            rubric_service.update_criteria(SEMINAR, criteria.pk)

    def test_max_score_not_below_highest_rubric(self):
        criteria = rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=20)
        rubric_service.create_rubric(SEMINAR, criteria.pk, description='Baik', min_score=11, max_score=20)
        with self.assertRaises(ValidationError):
            rubric_service.update_criteria(SEMINAR, criteria.pk, max_score=15)

    def test_defence_criteria_not_reachable_from_seminar_scope(self):
        criteria = rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=10, role='examiner')
        with self.assertRaises(ValidationError):
            rubric_service.update_criteria(SEMINAR, criteria.pk, name='x')


class DefenceSharedBudgetTests(TestCase):
    def setUp(self):
        self.cpmk = Cpmk.objects.create(code='CPMK-10', description='Sidang', type=Cpmk.CpmkType.THESIS)

    def test_examiner_and_supervisor_share_one_budget(self):
        rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=70, role='examiner')
        with self.assertRaises(Conflict) as ctx:
            rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=31, role='supervisor')
        self.assertIn('30 of 100', str(ctx.exception.detail))
        rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=30, role='supervisor')

    def test_role_is_required_for_defence(self):
        with self.assertRaises(ValidationError):
            rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=10)
        with self.assertRaises(ValidationError):
            rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=10, role='default')

    def test_weight_summary(self):
        rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=40, role='examiner')
        inactive = rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=5, role='examiner')
        rubric_service.toggle_criteria(DEFENCE, inactive.pk, False)
        rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=35, role='supervisor')

        summary = rubric_service.get_weight_summary(DEFENCE, 'examiner')
        self.assertEqual(summary['total_score'], 40)
        self.assertTrue(summary['is_complete'])
        self.assertEqual(summary['scope_total'], 75)
        self.assertEqual(summary['remaining'], 25)
        self.assertEqual(summary['details'][0]['criteria_count'], 2)
        self.assertEqual(summary['details'][0]['criteria_score_sum'], 40)

        empty = Cpmk.objects.create(code='CPMK-11', description='Kosong', type=Cpmk.CpmkType.THESIS)
        self.assertNotIn(empty.pk, [d['cpmk_id'] for d in summary['details']])

    def test_remove_cpmk_config(self):
        examiner = rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=20, role='examiner')
        rubric_service.create_rubric(DEFENCE, examiner.pk, description='Kurang', min_score=0, max_score=10)
        rubric_service.create_rubric(DEFENCE, examiner.pk, description='Baik', min_score=11, max_score=20)
        supervisor = rubric_service.create_criteria(DEFENCE, cpmk_id=self.cpmk.pk, max_score=20, role='supervisor')

        result = rubric_service.remove_cpmk_config(DEFENCE, self.cpmk.pk, 'examiner')

        self.assertEqual(result, {'deleted_criteria': 1, 'deleted_rubrics': 2})
        self.assertTrue(AssessmentCriteria.objects.filter(pk=supervisor.pk).exists())


class RubricRangeTests(TestCase):
    def setUp(self):
        cpmk = Cpmk.objects.create(code='CPMK-20', description='Tulisan', type=Cpmk.CpmkType.THESIS)
        self.criteria = rubric_service.create_criteria(SEMINAR, cpmk_id=cpmk.pk, max_score=30)
        self.low = rubric_service.create_rubric(SEMINAR, self.criteria.pk, description='Kurang', min_score=0, max_score=10)

    def test_range_rules(self):
        with self.assertRaises(ValidationError):
            rubric_service.create_rubric(SEMINAR, self.criteria.pk, description='x', min_score=20, max_score=15)
        with self.assertRaises(ValidationError):
            rubric_service.create_rubric(SEMINAR, self.criteria.pk, description='x', min_score=20, max_score=31)

    def test_shared_boundary_overlaps(self):
        with self.assertRaises(ValidationError):
            rubric_service.create_rubric(SEMINAR, self.criteria.pk, description='x', min_score=10, max_score=20)
        mid = rubric_service.create_rubric(SEMINAR, self.criteria.pk, description='Cukup', min_score=11, max_score=20)
        self.assertEqual(mid.display_order, 2)

    def test_update_merges_and_excludes_itself(self):
        updated = rubric_service.update_rubric(SEMINAR, self.low.pk, max_score=5)
        self.assertEqual((updated.min_score, updated.max_score), (0, 5))

        high = rubric_service.create_rubric(SEMINAR, self.criteria.pk, description='Baik', min_score=21, max_score=30)
        with self.assertRaises(ValidationError):
            rubric_service.update_rubric(SEMINAR, high.pk, min_score=5)

    def test_reorder(self):
        high = rubric_service.create_rubric(SEMINAR, self.criteria.pk, description='Baik', min_score=21, max_score=30)
        ordered = rubric_service.reorder_rubrics(SEMINAR, self.criteria.pk, [high.pk, self.low.pk])
        self.assertEqual([r.pk for r in ordered], [high.pk, self.low.pk])
        self.assertEqual([r.display_order for r in ordered], [1, 2])

        with self.assertRaises(ValidationError):
            rubric_service.reorder_rubrics(SEMINAR, self.criteria.pk, [high.pk, 999999])
        with self.assertRaises(ValidationError):
            rubric_service.reorder_rubrics(SEMINAR, self.criteria.pk, [])


class ScoredDataGuardTests(TestCase):
    def setUp(self):
        student = get_user_model().objects.create_user(username='mhs_score')
        self.thesis = Thesis.objects.create(student=student, title='Sistem Informasi TA')
        self.cpmk = Cpmk.objects.create(code='CPMK-30', description='Nilai', type=Cpmk.CpmkType.THESIS)
        self.criteria = rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=20)
        self.rubric = rubric_service.create_rubric(SEMINAR, self.criteria.pk, description='Baik', min_score=0, max_score=20)
        AssessmentScore.objects.create(criteria=self.criteria, rubric=self.rubric, thesis=self.thesis, score=18)

    def test_scored_criteria_and_rubric_cannot_be_deleted(self):
        with self.assertRaises(Conflict):
            rubric_service.delete_criteria(SEMINAR, self.criteria.pk)
        with self.assertRaises(Conflict):
            rubric_service.delete_rubric(SEMINAR, self.rubric.pk)
        with self.assertRaises(Conflict):
            rubric_service.remove_cpmk_config(SEMINAR, self.cpmk.pk)

    def test_unscored_criteria_delete_cascades_rubrics(self):
        other = rubric_service.create_criteria(SEMINAR, cpmk_id=self.cpmk.pk, max_score=10)
        rubric_service.create_rubric(SEMINAR, other.pk, description='x', min_score=0, max_score=10)
        rubric_service.delete_criteria(SEMINAR, other.pk)
        self.assertFalse(AssessmentRubric.objects.filter(criteria_id=other.pk).exists())


class RubricApiTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.secretary = User.objects.create_user(username='sekdep_rubric')
        assign_roles(self.secretary, [roles.SEKRETARIS_DEPARTEMEN])
        self.head = User.objects.create_user(username='kadep_rubric')
        assign_roles(self.head, [roles.KETUA_DEPARTEMEN])
        self.cpmk = Cpmk.objects.create(code='CPMK-40', description='API', type=Cpmk.CpmkType.THESIS)
        self.client = APIClient()

    def test_defence_flow(self):
        self.client.force_authenticate(self.secretary)
        resp = self.client.post('/api/obe/rubric-defence/criteria/?role=examiner', {
            'cpmk_id': self.cpmk.pk, 'name': 'Penguasaan materi', 'max_score': 60,
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['role'], 'examiner')
        criteria_id = resp.data['id']

        resp = self.client.post('/api/obe/rubric-defence/criteria/', {
            'cpmk_id': self.cpmk.pk, 'max_score': 50, 'role': 'supervisor',
        }, format='json')
        self.assertEqual(resp.status_code, 409)

        resp = self.client.post(f'/api/obe/rubric-defence/criteria/{criteria_id}/rubrics/', {
            'description': 'Sangat baik', 'min_score': 41, 'max_score': 60,
        }, format='json')
        self.assertEqual(resp.status_code, 201)

        resp = self.client.get('/api/obe/rubric-defence/?role=examiner')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data[0]['criteria'][0]['rubrics'][0]['min_score'], 41)

        resp = self.client.get('/api/obe/rubric-defence/weight-summary/?role=supervisor')
        self.assertEqual(resp.data['total_score'], 0)
        self.assertFalse(resp.data['is_complete'])
        self.assertEqual(resp.data['remaining'], 40)

    def test_head_cannot_edit_rubrics(self):
        self.client.force_authenticate(self.head)
        self.assertEqual(self.client.get('/api/obe/rubric-seminar/').status_code, 403)
