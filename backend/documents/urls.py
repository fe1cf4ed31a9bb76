from django.urls import path

from .views import (
    ApplicationLetterView,
    ConverterHealthView,
    DocumentDetailView,
    DocumentUploadView,
    TemplateDetailView,
    TemplateListView,
    TemplatePreviewView,
)

urlpatterns = [
    path('templates/', TemplateListView.as_view(), name='document_templates'),
    path('templates/<slug:name>/', TemplateDetailView.as_view(), name='document_template_detail'),
    path('templates/<slug:name>/preview/', TemplatePreviewView.as_view(), name='document_template_preview'),
    path('letters/application/', ApplicationLetterView.as_view(), name='application_letter'),
    path('converter/health/', ConverterHealthView.as_view(), name='converter_health'),
    path('upload/', DocumentUploadView.as_view(), name='document_upload'),
    path('<int:id>/', DocumentDetailView.as_view(), name='document_detail'),
]
