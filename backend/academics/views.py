import logging

from django.conf import settings
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole, IsLecturer
from academics.serializers import (
    AcademicYearSerializer,
    AcademicYearWriteSerializer,
    LecturerAvailabilitySerializer,
    LecturerAvailabilityWriteSerializer,
)
from academics.services import academic_year as academic_year_service
from academics.services import availability as availability_service
from academics.services import student_import

logger = logging.getLogger(__name__)


class AcademicYearListCreateView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request):
        result = academic_year_service.list_academic_years(
            page=request.query_params.get('page') or 1,
            page_size=request.query_params.get('page_size') or 10,
            search=request.query_params.get('search') or '',
        )
        result['items'] = AcademicYearSerializer(result['items'], many=True).data
        return Response(result)

    def post(self, request):
        serializer = AcademicYearWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        created = academic_year_service.create_academic_year(**serializer.validated_data)
        return Response(AcademicYearSerializer(created).data, status=status.HTTP_201_CREATED)


class AcademicYearDetailView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request, id: int):
        academic_year = academic_year_service.get_academic_year(id)
        return Response(AcademicYearSerializer(academic_year).data)

    def patch(self, request, id: int):
        academic_year = academic_year_service.get_academic_year(id)
        serializer = AcademicYearWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        updated = academic_year_service.update_academic_year(academic_year, **serializer.validated_data)
        return Response(AcademicYearSerializer(updated).data)


class ActiveAcademicYearView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        active = academic_year_service.get_active_academic_year()
        if active is None:
            return Response({'detail': 'No active academic year.'}, status=status.HTTP_404_NOT_FOUND)
        return Response(AcademicYearSerializer(active).data)


class StudentImportView(APIView):
    """Import students from a CSV/XLSX upload (multipart field `file`)."""
    parser_classes = (MultiPartParser, FormParser)
    permission_classes = (IsAdminRole,)

    def post(self, request):
        uploaded = request.FILES.get('file')
        if not uploaded:
            return Response({'detail': 'No file uploaded'}, status=status.HTTP_400_BAD_REQUEST)

        max_mb = int(getattr(settings, 'UPLOAD_MAX_IMPORT_MB', 5))
        if uploaded.size > max_mb * 1024 * 1024:
            return Response({'detail': f'File must not exceed {max_mb} MB.'}, status=status.HTTP_400_BAD_REQUEST)

        rows = student_import.read_rows(uploaded)
        result = student_import.import_students(rows)
        return Response(result)


class MyAvailabilityListCreateView(APIView):
    permission_classes = (IsLecturer,)

    def get(self, request):
        qs = availability_service.list_for_lecturer(request.user)
        return Response(LecturerAvailabilitySerializer(qs, many=True).data)

    def post(self, request):
        serializer = LecturerAvailabilityWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        created = availability_service.create_availability(request.user, **serializer.validated_data)
        return Response(LecturerAvailabilitySerializer(created).data, status=status.HTTP_201_CREATED)


class MyAvailabilityDetailView(APIView):
    permission_classes = (IsLecturer,)

    def patch(self, request, id: int):
        serializer = LecturerAvailabilityWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        updated = availability_service.update_availability(id, request.user, **serializer.validated_data)
        return Response(LecturerAvailabilitySerializer(updated).data)

    def delete(self, request, id: int):
        availability_service.delete_availability(id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MyAvailabilityToggleView(APIView):
    permission_classes = (IsLecturer,)

    def patch(self, request, id: int):
        updated = availability_service.toggle_availability(id, request.user)
        return Response(LecturerAvailabilitySerializer(updated).data)
