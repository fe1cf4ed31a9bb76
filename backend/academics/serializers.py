from rest_framework import serializers

from .models import AcademicYear, LecturerAvailability
from .utils import is_within_date_range


class AcademicYearSerializer(serializers.ModelSerializer):
    label = serializers.CharField(read_only=True)
    is_active = serializers.SerializerMethodField()

    class Meta:
        model = AcademicYear
        fields = ('id', 'semester', 'year', 'label', 'start_date', 'end_date', 'is_active', 'created_at', 'updated_at')

    def get_is_active(self, obj):
        return is_within_date_range(obj)


class AcademicYearWriteSerializer(serializers.Serializer):
    semester = serializers.ChoiceField(choices=AcademicYear.Semester.choices, required=False)
    year = serializers.IntegerField(required=False, allow_null=True, min_value=1900, max_value=3000)
    start_date = serializers.DateField(required=False, allow_null=True, input_formats=['%Y-%m-%d'])
    end_date = serializers.DateField(required=False, allow_null=True, input_formats=['%Y-%m-%d'])


class LecturerAvailabilitySerializer(serializers.ModelSerializer):
    start_time = serializers.TimeField(format='%H:%M')
    end_time = serializers.TimeField(format='%H:%M')

    class Meta:
        model = LecturerAvailability
        fields = ('id', 'day', 'start_time', 'end_time', 'valid_from', 'valid_until', 'is_active', 'created_at', 'updated_at')


class LecturerAvailabilityWriteSerializer(serializers.Serializer):
    day = serializers.ChoiceField(choices=LecturerAvailability.Day.choices)
    start_time = serializers.TimeField(input_formats=['%H:%M'], error_messages={'invalid': 'Time must use HH:mm format.'})
    end_time = serializers.TimeField(input_formats=['%H:%M'], error_messages={'invalid': 'Time must use HH:mm format.'})
    valid_from = serializers.DateField(input_formats=['%Y-%m-%d'], error_messages={'invalid': 'Date must use YYYY-MM-DD format.'})
    valid_until = serializers.DateField(input_formats=['%Y-%m-%d'], error_messages={'invalid': 'Date must use YYYY-MM-DD format.'})
