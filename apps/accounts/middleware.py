import logging

from django.conf import settings
from django.contrib.auth.views import redirect_to_login
from django.shortcuts import redirect, resolve_url

from .session import AdminSession

logger = logging.getLogger(__name__)


class SessionGateMiddleware:
    """
    Route guard for the panel.

    - No session and a protected path -> login page (with ?next=)
    - Session and the login page -> dashboard

    Must run after AuthenticationMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        session = AdminSession.from_request(request)
        request.admin_session = session

        path = request.path
        login_path = resolve_url(settings.LOGIN_URL)

        if not session.is_authenticated and self.is_protected(path):
            logger.debug(f"Unauthenticated request to {path}, redirecting to login")
            return redirect_to_login(request.get_full_path(), login_path)

        if session.is_authenticated and path == login_path:
            return redirect(settings.LOGIN_REDIRECT_URL)

        return self.get_response(request)

    @staticmethod
    def is_protected(path):
        return any(path.startswith(prefix) for prefix in settings.PROTECTED_PATH_PREFIXES)
