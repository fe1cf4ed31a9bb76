from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Base user model.
    Students, lecturers and administrators are all users.
    Their capabilities are decided by the roles assigned through UserRole.
    """
    full_name = models.CharField(max_length=255, blank=True, default='')
    identity_number = models.CharField(
        'NIM/NIP',
        max_length=32,
        blank=True,
        default='',
        db_index=True,
        help_text='Student number (NIM) or lecturer number (NIP).',
    )
    phone_number = models.CharField(max_length=32, blank=True, default='')
    avatar = models.FileField(upload_to='avatars/%Y/%m/', null=True, blank=True)

    roles = models.ManyToManyField(
        'Role',
        through='UserRole',
        related_name='users',
        blank=True,
    )

    def __str__(self):
        return self.username

    def get_display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.username


class Role(models.Model):
    """
    Logical role (Mahasiswa, Pembimbing 1, Ketua Departemen, Admin, ...)
    """
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ('name',)

    def __str__(self):
        return self.name


class UserRole(models.Model):
    """
    Assigns a role to a user.
    A user can hold several roles (Pembimbing 1 + Ketua Departemen).
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='user_roles'
    )
    role = models.ForeignKey(
        Role,
        on_delete=models.CASCADE,
        related_name='user_roles'
    )

    class Meta:
        unique_together = ('user', 'role')

    def __str__(self):
        return f"{self.user.username} -> {self.role.name}"
