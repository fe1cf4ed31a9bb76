from django.conf import settings
from django.db import models


class DocumentTemplate(models.Model):
    """Named template used to generate letters and forms.

    HTML templates keep their markup in ``content``; DOCX templates keep the
    uploaded file in ``file``.
    """

    class TemplateType(models.TextChoices):
        HTML = 'HTML', 'HTML'
        DOCX = 'DOCX', 'DOCX'

    name = models.CharField(max_length=128, unique=True)
    type = models.CharField(max_length=8, choices=TemplateType.choices, default=TemplateType.HTML)
    content = models.TextField(blank=True)
    file = models.FileField(upload_to='templates/', null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('name',)

    def __str__(self):
        return f"{self.name} ({self.type})"


class DocumentType(models.Model):
    name = models.CharField(max_length=128, unique=True)

    class Meta:
        ordering = ('name',)

    def __str__(self):
        return self.name


class Document(models.Model):
    """An uploaded file owned by a user (thesis drafts, letters, ...)."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='documents',
    )
    document_type = models.ForeignKey(
        DocumentType,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='documents',
    )
    file_name = models.CharField(max_length=255)
    file = models.FileField(upload_to='documents/%Y/%m/')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-created_at',)

    def __str__(self):
        return self.file_name
