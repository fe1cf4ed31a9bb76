from rest_framework import serializers

from .models import MilestoneTemplate, Thesis, ThesisGuidance, ThesisMilestone, ThesisStatus, ThesisSupervisor, Topic


class TopicSerializer(serializers.ModelSerializer):
    thesis_count = serializers.IntegerField(read_only=True, default=0)
    milestone_template_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Topic
        fields = ('id', 'name', 'thesis_count', 'milestone_template_count', 'created_at', 'updated_at')


class TopicWriteSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255)


class BulkDeleteSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)


class ThesisStatusSerializer(serializers.ModelSerializer):
    class Meta:
        model = ThesisStatus
        fields = ('id', 'name')


class ThesisSupervisorSerializer(serializers.ModelSerializer):
    lecturer_id = serializers.IntegerField(source='lecturer.id', read_only=True)
    name = serializers.CharField(source='lecturer.get_display_name', read_only=True)

    class Meta:
        model = ThesisSupervisor
        fields = ('lecturer_id', 'name', 'role')


class ThesisSerializer(serializers.ModelSerializer):
    student = serializers.SerializerMethodField()
    topic = serializers.SerializerMethodField()
    academic_year = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()
    supervisors = ThesisSupervisorSerializer(many=True, read_only=True)

    class Meta:
        model = Thesis
        fields = (
            'id', 'title', 'rating', 'status', 'thesis_status', 'student', 'topic', 'academic_year',
            'supervisors', 'start_date', 'deadline_date', 'created_at', 'updated_at',
        )

    def get_student(self, obj):
        return {
            'id': obj.student_id,
            'nim': obj.student.identity_number,
            'name': obj.student.get_display_name(),
        }

    def get_topic(self, obj):
        if obj.topic is None:
            return None
        return {'id': obj.topic_id, 'name': obj.topic.name}

    def get_academic_year(self, obj):
        if obj.academic_year is None:
            return None
        return {
            'id': obj.academic_year_id,
            'semester': obj.academic_year.semester,
            'year': obj.academic_year.year,
        }

    def get_status(self, obj):
        return obj.thesis_status.name if obj.thesis_status else None


class ThesisCreateSerializer(serializers.Serializer):
    student_id = serializers.IntegerField(min_value=1)
    title = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    topic_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    pembimbing1 = serializers.IntegerField(min_value=1)
    pembimbing2 = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class ThesisUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    topic_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    thesis_status_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    pembimbing1 = serializers.IntegerField(min_value=1, required=False)
    pembimbing2 = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class MilestoneTemplateSerializer(serializers.ModelSerializer):
    topic_name = serializers.CharField(source='topic.name', read_only=True, default=None)

    class Meta:
        model = MilestoneTemplate
        fields = ('id', 'title', 'description', 'topic', 'topic_name', 'order', 'is_active')


class MilestoneTemplateWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    topic_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    order = serializers.IntegerField(min_value=0, required=False)
    is_active = serializers.BooleanField(required=False)


class MilestoneSerializer(serializers.ModelSerializer):
    validated_by = serializers.IntegerField(source='validated_by_id', read_only=True)

    class Meta:
        model = ThesisMilestone
        fields = (
            'id', 'thesis', 'title', 'description', 'status', 'order', 'target_date', 'progress',
            'started_at', 'completed_at', 'validated_by', 'validated_at', 'student_notes', 'supervisor_notes',
            'created_at', 'updated_at',
        )


class MilestoneWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    target_date = serializers.DateField(required=False, allow_null=True)
    student_notes = serializers.CharField(required=False, allow_blank=True)


class MilestoneStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ThesisMilestone.Status.choices)


class MilestoneProgressSerializer(serializers.Serializer):
    progress = serializers.IntegerField(min_value=0, max_value=100)


class MilestoneNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class MilestoneFromTemplatesSerializer(serializers.Serializer):
    template_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    topic_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    start_date = serializers.DateField(required=False, allow_null=True)


class MilestoneReorderSerializer(serializers.Serializer):
    milestone_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)


class GuidanceSerializer(serializers.ModelSerializer):
    student = serializers.SerializerMethodField()
    supervisor = serializers.SerializerMethodField()
    milestone_ids = serializers.PrimaryKeyRelatedField(source='milestones', many=True, read_only=True)

    class Meta:
        model = ThesisGuidance
        fields = (
            'id', 'thesis', 'student', 'supervisor', 'status', 'requested_date', 'approved_date', 'duration',
            'notes', 'supervisor_feedback', 'milestone_ids', 'created_at', 'updated_at',
        )

    def get_student(self, obj):
        student = obj.thesis.student
        return {'id': student.pk, 'nim': student.identity_number, 'name': student.get_display_name()}

    def get_supervisor(self, obj):
        if obj.supervisor is None:
            return None
        return {'id': obj.supervisor_id, 'name': obj.supervisor.get_display_name()}


class GuidanceRequestSerializer(serializers.Serializer):
    requested_date = serializers.DateTimeField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    supervisor_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    milestone_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    duration = serializers.IntegerField(min_value=15, max_value=480, required=False, default=60)


class GuidanceCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class GuidanceDecisionSerializer(serializers.Serializer):
    approved_date = serializers.DateTimeField(required=False, allow_null=True)
    feedback = serializers.CharField(required=False, allow_blank=True, default='')
    duration = serializers.IntegerField(min_value=15, max_value=480, required=False, allow_null=True)
