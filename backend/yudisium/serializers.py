from rest_framework import serializers

from .models import YudisiumRequirement


class YudisiumRequirementSerializer(serializers.ModelSerializer):
    class Meta:
        model = YudisiumRequirement
        fields = ('id', 'name', 'description', 'notes', 'order', 'is_active', 'created_at', 'updated_at')


class YudisiumRequirementDetailSerializer(YudisiumRequirementSerializer):
    usage_count = serializers.IntegerField(read_only=True, default=0)

    class Meta(YudisiumRequirementSerializer.Meta):
        fields = YudisiumRequirementSerializer.Meta.fields + ('usage_count',)


class YudisiumRequirementWriteSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True, trim_whitespace=False)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True, trim_whitespace=False)
    order = serializers.IntegerField(min_value=0, required=False)
    is_active = serializers.BooleanField(required=False)
