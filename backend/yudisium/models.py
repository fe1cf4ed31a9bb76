from django.conf import settings
from django.db import models


class YudisiumRequirement(models.Model):
    """A document or condition students must fulfil before graduation (yudisium)."""
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('order', 'name')

    def __str__(self):
        return self.name


class YudisiumParticipantRequirement(models.Model):

    class Status(models.TextChoices):
        SUBMITTED = 'submitted', 'Submitted'
        APPROVED = 'approved', 'Approved'
        DECLINED = 'declined', 'Declined'

    requirement = models.ForeignKey(
        YudisiumRequirement,
        on_delete=models.PROTECT,
        related_name='participant_requirements',
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='yudisium_requirements',
    )
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.SUBMITTED)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = (('requirement', 'student'),)

    def __str__(self):
        return f"{self.student} {self.requirement}: {self.status}"


class YudisiumCplRecommendation(models.Model):
    """Follow-up recommendation for a student who missed a CPL minimum."""
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='cpl_recommendations',
    )
    cpl = models.ForeignKey('OBE.Cpl', on_delete=models.PROTECT, related_name='yudisium_recommendations')
    recommendation = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-created_at',)

    def __str__(self):
        return f"{self.student} {self.cpl}"
