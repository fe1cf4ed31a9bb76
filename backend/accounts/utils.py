from typing import Iterable, Set

from django.contrib.auth import get_user_model
from django.db.models import QuerySet

from . import roles
from .models import Role, UserRole


def get_user_role_names(user) -> Set[str]:
    """Return the normalized role names assigned to *user*."""
    if user is None or getattr(user, 'pk', None) is None:
        return set()
    qs = UserRole.objects.filter(user=user).values_list('role__name', flat=True)
    return {roles.normalize(name) for name in qs if name}


def user_has_role(user, *role_names: str) -> bool:
    wanted = {roles.normalize(name) for name in role_names}
    return bool(get_user_role_names(user) & wanted)


def users_with_role(*role_names: str) -> QuerySet:
    User = get_user_model()
    names = [roles.normalize(n) for n in role_names]
    role_ids = [r.id for r in Role.objects.all() if roles.normalize(r.name) in names]
    return User.objects.filter(user_roles__role_id__in=role_ids, is_active=True).distinct()


def get_or_create_role(name: str) -> Role:
    role = Role.objects.filter(name__iexact=name.strip()).first()
    if role is None:
        role = Role.objects.create(name=name.strip())
    return role


def assign_roles(user, role_names: Iterable[str]) -> None:
    for name in role_names:
        UserRole.objects.get_or_create(user=user, role=get_or_create_role(name))
