from rest_framework import serializers

from .models import AssessmentCriteria, AssessmentRubric, Cpl, Cpmk


class CplSerializer(serializers.ModelSerializer):
    class Meta:
        model = Cpl
        fields = ('id', 'code', 'description', 'minimal_score', 'is_active', 'created_at', 'updated_at')


class CplWriteSerializer(serializers.Serializer):
    code = serializers.CharField(min_length=1, max_length=255, trim_whitespace=True)
    description = serializers.CharField(min_length=1, max_length=255, trim_whitespace=True)
    minimal_score = serializers.IntegerField(min_value=0, max_value=100)


class CpmkSerializer(serializers.ModelSerializer):
    class Meta:
        model = Cpmk
        fields = ('id', 'code', 'description', 'type', 'is_active', 'created_at', 'updated_at')


class CpmkWriteSerializer(serializers.Serializer):
    code = serializers.CharField(min_length=1, max_length=255, trim_whitespace=True)
    description = serializers.CharField(min_length=1, max_length=255, trim_whitespace=True)
    type = serializers.ChoiceField(choices=Cpmk.CpmkType.choices)


class RubricSerializer(serializers.ModelSerializer):
    class Meta:
        model = AssessmentRubric
        fields = ('id', 'criteria', 'description', 'min_score', 'max_score', 'display_order', 'created_at', 'updated_at')


class CriteriaSerializer(serializers.ModelSerializer):
    cpmk_code = serializers.CharField(source='cpmk.code', read_only=True)
    rubrics = serializers.SerializerMethodField()

    class Meta:
        model = AssessmentCriteria
        fields = (
            'id', 'cpmk', 'cpmk_code', 'name', 'applies_to', 'role', 'max_score',
            'display_order', 'is_active', 'rubrics', 'created_at', 'updated_at',
        )

    def get_rubrics(self, obj):
        return RubricSerializer(obj.rubrics.all(), many=True).data


class CpmkWithRubricsSerializer(serializers.ModelSerializer):
    criteria = serializers.SerializerMethodField()

    class Meta:
        model = Cpmk
        fields = ('id', 'code', 'description', 'type', 'criteria')

    def get_criteria(self, obj):
        return CriteriaSerializer(getattr(obj, 'scoped_criteria', []), many=True).data


class CriteriaCreateSerializer(serializers.Serializer):
    cpmk_id = serializers.IntegerField(min_value=1)
    name = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    max_score = serializers.IntegerField(min_value=1, max_value=100)
    role = serializers.ChoiceField(choices=AssessmentCriteria.AssessorRole.choices, required=False)


class CriteriaUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    max_score = serializers.IntegerField(min_value=1, max_value=100, required=False)


class ToggleSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class RubricCreateSerializer(serializers.Serializer):
    description = serializers.CharField(min_length=1, max_length=1000)
    min_score = serializers.IntegerField(min_value=0)
    max_score = serializers.IntegerField(min_value=1)


class RubricUpdateSerializer(serializers.Serializer):
    description = serializers.CharField(min_length=1, max_length=1000, required=False)
    min_score = serializers.IntegerField(min_value=0, required=False)
    max_score = serializers.IntegerField(min_value=1, required=False)


class ReorderSerializer(serializers.Serializer):
    ordered_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
