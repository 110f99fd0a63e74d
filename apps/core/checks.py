from django.core.checks import Error

from .schemas import validate_registry


def check_schema_registry(app_configs, **kwargs):
    """System check: the schema registry must be internally consistent"""
    return [
        Error(problem, hint='Fix the table schema in apps/core/schemas.py', id='core.E001')
        for problem in validate_registry()
    ]
