from django.conf import settings
from django.db import models
from django.utils import timezone


class ThesisStatus(models.Model):
    """Workflow status of a thesis (Bimbingan, Acc Seminar, Selesai, ...).

    Separate from ``Thesis.rating``, which tracks progress health.
    """
    DIAJUKAN = 'Diajukan'
    BIMBINGAN = 'Bimbingan'
    ACC_SEMINAR = 'Acc Seminar'
    SELESAI = 'Selesai'
    LULUS = 'Lulus'
    DROP_OUT = 'Drop Out'
    DIBATALKAN = 'Dibatalkan'
    GAGAL = 'Gagal'

    TERMINAL = (SELESAI, GAGAL, LULUS, DROP_OUT, DIBATALKAN)

    name = models.CharField(max_length=64, unique=True)

    class Meta:
        verbose_name = 'Thesis Status'
        verbose_name_plural = 'Thesis Statuses'
        ordering = ('id',)

    def __str__(self):
        return self.name


class Topic(models.Model):
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('name',)

    def __str__(self):
        return self.name


class Thesis(models.Model):

    class Rating(models.TextChoices):
        ONGOING = 'ONGOING', 'Ongoing'
        SLOW = 'SLOW', 'Slow'
        AT_RISK = 'AT_RISK', 'At Risk'
        FAILED = 'FAILED', 'Failed'
        CANCELLED = 'CANCELLED', 'Cancelled'

    ACTIVE_RATINGS = (Rating.ONGOING, Rating.SLOW, Rating.AT_RISK)

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='theses',
    )
    title = models.CharField(max_length=500, null=True, blank=True)
    topic = models.ForeignKey(Topic, on_delete=models.PROTECT, null=True, blank=True, related_name='theses')
    academic_year = models.ForeignKey(
        'academics.AcademicYear',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='theses',
    )
    thesis_status = models.ForeignKey(
        ThesisStatus,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='theses',
    )
    rating = models.CharField(max_length=16, choices=Rating.choices, default=Rating.ONGOING)
    start_date = models.DateTimeField(null=True, blank=True)
    deadline_date = models.DateTimeField(null=True, blank=True)
    # settable so a thesis can be registered with its real start
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Thesis'
        verbose_name_plural = 'Theses'
        ordering = ('-created_at',)
        indexes = [models.Index(fields=['student', 'rating'], name='thesis_student_rating_idx')]

    def __str__(self):
        return self.title or f"Thesis #{self.pk}"


class ThesisSupervisor(models.Model):

    class SupervisorRole(models.TextChoices):
        PEMBIMBING_1 = 'Pembimbing 1', 'Pembimbing 1'
        PEMBIMBING_2 = 'Pembimbing 2', 'Pembimbing 2'

    thesis = models.ForeignKey(Thesis, on_delete=models.CASCADE, related_name='supervisors')
    lecturer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='supervised_theses',
    )
    role = models.CharField(max_length=16, choices=SupervisorRole.choices)

    class Meta:
        unique_together = (('thesis', 'lecturer'),)
        ordering = ('role',)

    def __str__(self):
        return f"{self.lecturer} ({self.role})"


class ThesisMilestone(models.Model):

    class Status(models.TextChoices):
        NOT_STARTED = 'not_started', 'Not Started'
        IN_PROGRESS = 'in_progress', 'In Progress'
        PENDING_REVIEW = 'pending_review', 'Pending Review'
        REVISION_NEEDED = 'revision_needed', 'Revision Needed'
        COMPLETED = 'completed', 'Completed'

    ACTIVE = (Status.IN_PROGRESS, Status.PENDING_REVIEW, Status.REVISION_NEEDED)

    thesis = models.ForeignKey(Thesis, on_delete=models.CASCADE, related_name='milestones')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.NOT_STARTED)
    order = models.PositiveIntegerField(default=0)
    target_date = models.DateField(null=True, blank=True)
    progress = models.PositiveSmallIntegerField(default=0)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='validated_milestones',
    )
    validated_at = models.DateTimeField(null=True, blank=True)
    student_notes = models.TextField(blank=True)
    supervisor_notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('order', 'id')

    def __str__(self):
        return self.title


class MilestoneTemplate(models.Model):
    """Default milestone for theses of a topic.

    Active templates of a topic are copied onto a thesis when it is created
    with that topic, or later on request of the student.
    """
    topic = models.ForeignKey(Topic, on_delete=models.PROTECT, null=True, blank=True, related_name='milestone_templates')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ('order', 'id')

    def __str__(self):
        return self.title


class ThesisGuidance(models.Model):

    class Status(models.TextChoices):
        REQUESTED = 'requested', 'Requested'
        ACCEPTED = 'accepted', 'Accepted'
        REJECTED = 'rejected', 'Rejected'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    PENDING = (Status.REQUESTED, Status.ACCEPTED)

    thesis = models.ForeignKey(Thesis, on_delete=models.CASCADE, related_name='guidances')
    supervisor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='given_guidances',
    )
    milestones = models.ManyToManyField(ThesisMilestone, blank=True, related_name='guidances')
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.REQUESTED)
    requested_date = models.DateTimeField(null=True, blank=True)
    approved_date = models.DateTimeField(null=True, blank=True)
    duration = models.PositiveIntegerField(default=60)
    notes = models.TextField(blank=True)
    supervisor_feedback = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-created_at',)

    def __str__(self):
        return f"Guidance #{self.pk} ({self.status})"
