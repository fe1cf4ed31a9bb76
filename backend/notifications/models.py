from django.conf import settings
from django.db import models


class Notification(models.Model):
    """In-app notification shown in a user's inbox."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True)
    type = models.CharField(max_length=64, blank=True)
    reference_id = models.CharField(max_length=64, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-created_at', '-id')
        indexes = [models.Index(fields=['user', 'is_read'], name='notif_user_read_idx')]

    def __str__(self):
        return f"{self.user_id}: {self.title}"
