import logging

from django.contrib.auth.signals import user_logged_in, user_logged_out, user_login_failed
from django.dispatch import receiver

logger = logging.getLogger(__name__)


# SIGNAL 1: SUCCESSFUL LOGIN
@receiver(user_logged_in)
def log_user_login(sender, request, user, **kwargs):
    logger.info(f"User logged in: {user.email}")


# SIGNAL 2: LOGOUT
@receiver(user_logged_out)
def log_user_logout(sender, request, user, **kwargs):
    if user is not None:
        logger.info(f"User logged out: {user.email}")


# SIGNAL 3: FAILED LOGIN (credentials are never logged, only the email)
@receiver(user_login_failed)
def log_login_failure(sender, credentials, request=None, **kwargs):
    logger.warning(f"Failed login attempt for: {credentials.get('username', '?')}")
