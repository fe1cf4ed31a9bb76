from rest_framework import permissions

from . import roles
from .utils import user_has_role


class HasAnyRole(permissions.BasePermission):
    """Allow users holding at least one of the roles listed by the view.

    Views declare ``allowed_roles``; subclasses may provide a default set.
    Superusers always pass.
    """

    allowed_roles: tuple = ()

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return False
        if getattr(user, 'is_superuser', False):
            return True

        allowed = getattr(view, 'allowed_roles', None) or self.allowed_roles
        if not allowed:
            return True
        return user_has_role(user, *allowed)


class IsDepartmentOfficial(HasAnyRole):
    allowed_roles = (roles.SEKRETARIS_DEPARTEMEN, roles.KETUA_DEPARTEMEN)


class IsDepartmentSecretary(HasAnyRole):
    allowed_roles = (roles.SEKRETARIS_DEPARTEMEN,)


class IsLecturer(HasAnyRole):
    allowed_roles = roles.LECTURER_ROLES


class IsAdminRole(HasAnyRole):
    allowed_roles = (roles.ADMIN,)


class IsAdminOrSecretary(HasAnyRole):
    allowed_roles = (roles.ADMIN, roles.SEKRETARIS_DEPARTEMEN)


class IsStudent(HasAnyRole):
    allowed_roles = (roles.MAHASISWA,)
