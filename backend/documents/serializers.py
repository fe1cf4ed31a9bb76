from rest_framework import serializers

from .models import Document, DocumentTemplate


class DocumentTemplateSerializer(serializers.ModelSerializer):
    file_url = serializers.SerializerMethodField()

    class Meta:
        model = DocumentTemplate
        fields = ('id', 'name', 'type', 'content', 'file_url', 'created_at', 'updated_at')

    def get_file_url(self, obj):
        return obj.file.url if obj.file else None


class DocumentTemplateWriteSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=DocumentTemplate.TemplateType.choices, required=False)
    content = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class DocumentSerializer(serializers.ModelSerializer):
    document_type = serializers.CharField(source='document_type.name', read_only=True, default=None)
    file_url = serializers.SerializerMethodField()

    class Meta:
        model = Document
        fields = ('id', 'file_name', 'document_type', 'file_url', 'user', 'created_at')

    def get_file_url(self, obj):
        return obj.file.url if obj.file else None


class MemberSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    nim = serializers.CharField(max_length=64)


class ApplicationLetterSerializer(serializers.Serializer):
    document_number = serializers.CharField(max_length=128)
    date_issued = serializers.DateField(input_formats=['%Y-%m-%d'])
    company_name = serializers.CharField(max_length=255)
    company_address = serializers.CharField(max_length=1000)
    start_date = serializers.DateField(input_formats=['%Y-%m-%d'])
    end_date = serializers.DateField(input_formats=['%Y-%m-%d'])
    members = MemberSerializer(many=True, allow_empty=False)
    as_pdf = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError({'end_date': 'end_date must not be before start_date.'})
        return attrs
