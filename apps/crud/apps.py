from django.apps import AppConfig


class CrudConfig(AppConfig):
    """
    Configuration for the CRUD application

    Generic list/create/view/edit/delete pages for every table
    registered in apps.core.schemas.
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.crud'
    verbose_name = 'CRUD'
