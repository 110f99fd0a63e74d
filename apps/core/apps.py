from django.apps import AppConfig


class CoreConfig(AppConfig):
    """
    Configuration for Core application

    This app contains:
        - Schema registry (one TableSchema per editable table)
        - Data store backends and the data access gateway
        - Dashboard and diagnostics views
        - Sidebar navigation context processor

    The registry is checked by Django's system check framework,
    so `manage.py check` fails on an inconsistent schema.
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'

    def ready(self):
        from django.core.checks import register

        from .checks import check_schema_registry

        register(check_schema_registry)
