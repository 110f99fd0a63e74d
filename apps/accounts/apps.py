from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AccountsConfig(AppConfig):
    """
    Panel users and the session gate.

    ready() connects the login audit handlers in signals.py.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.accounts'
    verbose_name = _('Panelgebruikers')

    def ready(self):
        import apps.accounts.signals  # noqa: F401
