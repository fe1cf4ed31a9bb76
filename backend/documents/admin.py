from django.contrib import admin

from .models import Document, DocumentTemplate, DocumentType


@admin.register(DocumentTemplate)
class DocumentTemplateAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'updated_at')
    list_filter = ('type',)
    search_fields = ('name',)


@admin.register(DocumentType)
class DocumentTypeAdmin(admin.ModelAdmin):
    list_display = ('name',)


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ('file_name', 'document_type', 'user', 'created_at')
    list_filter = ('document_type',)
    search_fields = ('file_name', 'user__username')
