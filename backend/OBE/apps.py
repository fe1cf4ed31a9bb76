from django.apps import AppConfig


class ObeConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'OBE'
    verbose_name = 'Outcome-Based Education'
