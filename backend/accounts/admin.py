from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import Role, User, UserRole


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 0


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    # inherit Django's user add/change forms which correctly handle password hashing
    list_display = ('username', 'full_name', 'identity_number', 'email', 'is_staff', 'get_roles')
    search_fields = ('username', 'full_name', 'identity_number', 'email')
    inlines = (UserRoleInline,)

    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Profile', {'fields': ('full_name', 'identity_number', 'phone_number', 'avatar')}),
    )

    def get_roles(self, obj):
        return ', '.join(r.name for r in obj.roles.all())
    get_roles.short_description = 'Roles'


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ('name', 'description')
    search_fields = ('name',)
