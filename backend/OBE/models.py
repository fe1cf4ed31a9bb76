from django.conf import settings
from django.core.validators import MaxValueValidator
from django.db import models


class Cpl(models.Model):
    """Program learning outcome (Capaian Pembelajaran Lulusan)."""
    code = models.CharField(max_length=255, unique=True)
    description = models.CharField(max_length=255)
    minimal_score = models.PositiveSmallIntegerField(validators=[MaxValueValidator(100)])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'CPL'
        verbose_name_plural = 'CPL'
        ordering = ('code',)

    def __str__(self):
        return self.code


class Cpmk(models.Model):
    """Course learning outcome (Capaian Pembelajaran Mata Kuliah)."""

    class CpmkType(models.TextChoices):
        RESEARCH_METHOD = 'research_method', 'Research Method'
        THESIS = 'thesis', 'Thesis'

    code = models.CharField(max_length=255, unique=True)
    description = models.CharField(max_length=255)
    type = models.CharField(max_length=32, choices=CpmkType.choices)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'CPMK'
        verbose_name_plural = 'CPMK'
        ordering = ('code',)

    def __str__(self):
        return self.code


class StudentCplScore(models.Model):
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='cpl_scores',
    )
    cpl = models.ForeignKey(Cpl, on_delete=models.PROTECT, related_name='student_scores')
    score = models.PositiveSmallIntegerField(validators=[MaxValueValidator(100)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = (('student', 'cpl'),)

    def __str__(self):
        return f"{self.student} {self.cpl}: {self.score}"


class AssessmentCriteria(models.Model):
    """A scoring dimension of a seminar or defence rubric, tagged with a CPMK."""

    class AppliesTo(models.TextChoices):
        SEMINAR = 'seminar', 'Seminar'
        DEFENCE = 'defence', 'Defence'

    class AssessorRole(models.TextChoices):
        DEFAULT = 'default', 'Default'
        EXAMINER = 'examiner', 'Examiner'
        SUPERVISOR = 'supervisor', 'Supervisor'

    cpmk = models.ForeignKey(Cpmk, on_delete=models.PROTECT, related_name='assessment_criteria')
    name = models.CharField(max_length=255, null=True, blank=True)
    applies_to = models.CharField(max_length=16, choices=AppliesTo.choices)
    role = models.CharField(max_length=16, choices=AssessorRole.choices, default=AssessorRole.DEFAULT)
    max_score = models.PositiveSmallIntegerField()
    display_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Assessment Criteria'
        verbose_name_plural = 'Assessment Criteria'
        ordering = ('display_order', 'id')
        indexes = [models.Index(fields=['applies_to', 'role', 'is_active'], name='obe_criteria_scope_idx')]

    def __str__(self):
        return f"{self.cpmk.code} {self.applies_to}/{self.role}: {self.name or '-'} ({self.max_score})"


class AssessmentRubric(models.Model):
    """One achievement band [min_score, max_score] under a criteria."""
    criteria = models.ForeignKey(AssessmentCriteria, on_delete=models.CASCADE, related_name='rubrics')
    description = models.TextField(max_length=1000)
    min_score = models.PositiveSmallIntegerField()
    max_score = models.PositiveSmallIntegerField()
    display_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('display_order', 'id')

    def __str__(self):
        return f"[{self.min_score}-{self.max_score}] {self.description[:40]}"


class AssessmentScore(models.Model):
    """Scored assessment detail given by an assessor for one criteria of a thesis."""
    criteria = models.ForeignKey(AssessmentCriteria, on_delete=models.PROTECT, related_name='scores')
    rubric = models.ForeignKey(
        AssessmentRubric,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='scores',
    )
    thesis = models.ForeignKey('thesis.Thesis', on_delete=models.CASCADE, related_name='assessment_scores')
    assessor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='given_assessment_scores',
    )
    score = models.PositiveSmallIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-created_at',)

    def __str__(self):
        return f"{self.thesis_id}/{self.criteria_id}: {self.score}"
