from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole, IsDepartmentSecretary, IsLecturer, IsStudent
from thesis.serializers import (
    BulkDeleteSerializer,
    GuidanceCancelSerializer,
    GuidanceDecisionSerializer,
    GuidanceRequestSerializer,
    GuidanceSerializer,
    MilestoneFromTemplatesSerializer,
    MilestoneNotesSerializer,
    MilestoneProgressSerializer,
    MilestoneReorderSerializer,
    MilestoneSerializer,
    MilestoneStatusSerializer,
    MilestoneTemplateSerializer,
    MilestoneTemplateWriteSerializer,
    MilestoneWriteSerializer,
    ThesisCreateSerializer,
    ThesisSerializer,
    ThesisStatusSerializer,
    ThesisUpdateSerializer,
    TopicSerializer,
    TopicWriteSerializer,
)
from thesis.services import guidance as guidance_service
from thesis.services import master_data, thesis_status
from thesis.services import milestones as milestone_service
from thesis.services import topics as topic_service


class TopicListCreateView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request):
        return Response(TopicSerializer(topic_service.list_topics(), many=True).data)

    def post(self, request):
        serializer = TopicWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        topic = topic_service.create_topic(**serializer.validated_data)
        return Response(TopicSerializer(topic).data, status=status.HTTP_201_CREATED)


class TopicDetailView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request, id: int):
        return Response(TopicSerializer(topic_service.get_topic(id)).data)

    def patch(self, request, id: int):
        serializer = TopicWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        topic = topic_service.update_topic(id, **serializer.validated_data)
        return Response(TopicSerializer(topic).data)

    def delete(self, request, id: int):
        topic_service.delete_topic(id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TopicBulkDeleteView(APIView):
    permission_classes = (IsAdminRole,)

    def post(self, request):
        serializer = BulkDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(topic_service.bulk_delete_topics(serializer.validated_data['ids']))


class ThesisStatusListView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request):
        return Response(ThesisStatusSerializer(master_data.list_statuses(), many=True).data)


class ThesisListCreateView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request):
        result = master_data.list_theses(
            page=request.query_params.get('page') or 1,
            page_size=request.query_params.get('page_size') or 10,
            search=request.query_params.get('search') or '',
        )
        result['items'] = ThesisSerializer(result['items'], many=True).data
        return Response(result)

    def post(self, request):
        serializer = ThesisCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        thesis = master_data.create_thesis(**serializer.validated_data)
        return Response(ThesisSerializer(thesis).data, status=status.HTTP_201_CREATED)


class ThesisDetailView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request, id: int):
        return Response(ThesisSerializer(master_data.get_thesis(id)).data)

    def patch(self, request, id: int):
        serializer = ThesisUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        thesis = master_data.update_thesis(id, **serializer.validated_data)
        return Response(ThesisSerializer(thesis).data)


class ThesisFailView(APIView):
    """Supervisor marks an AT_RISK thesis as failed."""
    permission_classes = (IsLecturer,)

    def post(self, request, id: int):
        thesis_status.fail_thesis_by_supervisor(id, request.user)
        return Response(ThesisSerializer(master_data.get_thesis(id)).data)


class MilestoneTemplateListCreateView(APIView):
    permission_classes = (IsDepartmentSecretary,)

    def get(self, request):
        topic_id = request.query_params.get('topic_id')
        templates = milestone_service.list_templates(topic_id=int(topic_id) if topic_id else None)
        return Response(MilestoneTemplateSerializer(templates, many=True).data)

    def post(self, request):
        serializer = MilestoneTemplateWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('order', None)
        template = milestone_service.create_template(**data)
        return Response(MilestoneTemplateSerializer(template).data, status=status.HTTP_201_CREATED)


class MilestoneTemplateDetailView(APIView):
    permission_classes = (IsDepartmentSecretary,)

    def get(self, request, id: int):
        return Response(MilestoneTemplateSerializer(milestone_service.get_template(id)).data)

    def patch(self, request, id: int):
        serializer = MilestoneTemplateWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        template = milestone_service.update_template(id, **serializer.validated_data)
        return Response(MilestoneTemplateSerializer(template).data)

    def delete(self, request, id: int):
        milestone_service.delete_template(id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MilestoneTemplateBulkDeleteView(APIView):
    permission_classes = (IsDepartmentSecretary,)

    def post(self, request):
        serializer = BulkDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(milestone_service.bulk_delete_templates(serializer.validated_data['ids']))


class ThesisMilestoneListCreateView(APIView):
    """Milestones of one thesis, for its student and supervisors."""
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int):
        milestones = milestone_service.list_milestones(request.user, id, status=request.query_params.get('status'))
        return Response(MilestoneSerializer(milestones, many=True).data)

    def post(self, request, id: int):
        serializer = MilestoneWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('student_notes', None)
        milestone = milestone_service.create_milestone(request.user, id, **data)
        return Response(MilestoneSerializer(milestone).data, status=status.HTTP_201_CREATED)


class MilestoneFromTemplatesView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, id: int):
        serializer = MilestoneFromTemplatesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        milestones = milestone_service.create_from_templates(request.user, id, **serializer.validated_data)
        return Response(
            {'count': len(milestones), 'milestones': MilestoneSerializer(milestones, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class MilestoneReorderView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, id: int):
        serializer = MilestoneReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        milestones = milestone_service.reorder_milestones(request.user, id, serializer.validated_data['milestone_ids'])
        return Response(MilestoneSerializer(milestones, many=True).data)


class ThesisProgressView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int):
        return Response(milestone_service.progress_summary(request.user, id))


class MilestoneDetailView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int):
        return Response(MilestoneSerializer(milestone_service.get_milestone(request.user, id)).data)

    def patch(self, request, id: int):
        serializer = MilestoneWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        milestone = milestone_service.update_milestone(request.user, id, **serializer.validated_data)
        return Response(MilestoneSerializer(milestone).data)

    def delete(self, request, id: int):
        milestone_service.delete_milestone(request.user, id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MilestoneStatusView(APIView):
    permission_classes = (IsAuthenticated,)

    def patch(self, request, id: int):
        serializer = MilestoneStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        milestone = milestone_service.update_status(request.user, id, serializer.validated_data['status'])
        return Response(MilestoneSerializer(milestone).data)


class MilestoneProgressView(APIView):
    permission_classes = (IsAuthenticated,)

    def patch(self, request, id: int):
        serializer = MilestoneProgressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        milestone = milestone_service.update_progress(request.user, id, serializer.validated_data['progress'])
        return Response(MilestoneSerializer(milestone).data)


class MilestoneActionView(APIView):
    """Submit, validate or request revision; the action comes from the URL."""
    permission_classes = (IsAuthenticated,)
    step = None

    def post(self, request, id: int):
        serializer = MilestoneNotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        notes = serializer.validated_data['notes']
        if self.step == 'submit':
            milestone = milestone_service.submit_for_review(request.user, id, notes=notes)
        elif self.step == 'validate':
            milestone = milestone_service.validate_milestone(request.user, id, notes=notes)
        else:
            milestone = milestone_service.request_revision(request.user, id, notes=notes)
        return Response(MilestoneSerializer(milestone).data)


class StudentGuidanceView(APIView):
    permission_classes = (IsStudent,)

    def get(self, request):
        guidances = guidance_service.list_student_guidances(request.user, status=request.query_params.get('status'))
        return Response(GuidanceSerializer(guidances, many=True).data)

    def post(self, request):
        serializer = GuidanceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        guidance = guidance_service.request_guidance(request.user, **serializer.validated_data)
        return Response(GuidanceSerializer(guidance).data, status=status.HTTP_201_CREATED)


class StudentGuidanceCancelView(APIView):
    permission_classes = (IsStudent,)

    def post(self, request, id: int):
        serializer = GuidanceCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        guidance = guidance_service.cancel_guidance(request.user, id, **serializer.validated_data)
        return Response(GuidanceSerializer(guidance).data)


class LecturerGuidanceListView(APIView):
    permission_classes = (IsLecturer,)

    def get(self, request):
        guidances = guidance_service.list_lecturer_guidances(request.user, status=request.query_params.get('status'))
        return Response(GuidanceSerializer(guidances, many=True).data)


class LecturerGuidanceDecisionView(APIView):
    """Accept, reject or complete a guidance assigned to the lecturer."""
    permission_classes = (IsLecturer,)
    step = None

    def post(self, request, id: int):
        serializer = GuidanceDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if self.step == 'accept':
            guidance = guidance_service.accept_guidance(
                request.user, id,
                approved_date=data.get('approved_date'),
                feedback=data['feedback'],
                duration=data.get('duration'),
            )
        elif self.step == 'reject':
            guidance = guidance_service.reject_guidance(request.user, id, feedback=data['feedback'])
        else:
            guidance = guidance_service.complete_guidance(request.user, id, feedback=data['feedback'])
        return Response(GuidanceSerializer(guidance).data)
