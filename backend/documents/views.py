import logging

from django.http import HttpResponse
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminOrSecretary
from documents.serializers import (
    ApplicationLetterSerializer,
    DocumentSerializer,
    DocumentTemplateSerializer,
    DocumentTemplateWriteSerializer,
)
from documents.services import gotenberg, letters, template_service, uploads

logger = logging.getLogger(__name__)

DOCX_MIME = gotenberg.DOCX_MIME


def _file_response(content: bytes, filename: str, content_type: str, inline: bool = False) -> HttpResponse:
    response = HttpResponse(content, content_type=content_type)
    disposition = 'inline' if inline else 'attachment'
    response['Content-Disposition'] = f'{disposition}; filename="{filename}"'
    return response


class TemplateListView(APIView):
    permission_classes = (IsAdminOrSecretary,)

    def get(self, request):
        return Response(DocumentTemplateSerializer(template_service.list_templates(), many=True).data)


class TemplateDetailView(APIView):
    permission_classes = (IsAdminOrSecretary,)
    parser_classes = (JSONParser, MultiPartParser, FormParser)

    def get(self, request, name: str):
        return Response(DocumentTemplateSerializer(template_service.get_template(name)).data)

    def put(self, request, name: str):
        serializer = DocumentTemplateWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        upload = request.FILES.get('file')
        if upload is not None:
            uploads.validate_docx(upload)

        template = template_service.save_template(name, file=upload, **serializer.validated_data)
        return Response(DocumentTemplateSerializer(template).data)

    def delete(self, request, name: str):
        template_service.delete_template(name)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TemplatePreviewView(APIView):
    permission_classes = (IsAdminOrSecretary,)

    def get(self, request, name: str):
        pdf = template_service.generate_preview(name)
        return _file_response(pdf, f'{name}.pdf', 'application/pdf', inline=True)


class ApplicationLetterView(APIView):
    permission_classes = (IsAdminOrSecretary,)

    def post(self, request):
        serializer = ApplicationLetterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        as_pdf = data.pop('as_pdf', False)

        filename, content = letters.generate_application_letter(data, as_pdf=as_pdf, user=request.user)
        content_type = 'application/pdf' if as_pdf else DOCX_MIME
        return _file_response(content, filename, content_type)


class ConverterHealthView(APIView):
    permission_classes = (IsAdminOrSecretary,)

    def get(self, request):
        return Response({'gotenberg': gotenberg.check_connection()})


class DocumentUploadView(APIView):
    permission_classes = (IsAuthenticated,)
    parser_classes = (MultiPartParser, FormParser)

    def post(self, request):
        upload = request.FILES.get('file')
        if upload is None:
            return Response({'detail': 'No file uploaded'}, status=status.HTTP_400_BAD_REQUEST)
        document = uploads.upload_document(request.user, upload, request.data.get('document_type') or '')
        return Response(DocumentSerializer(document).data, status=status.HTTP_201_CREATED)


class DocumentDetailView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int):
        return Response(DocumentSerializer(uploads.get_document(id)).data)
