from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class AdminSession:
    """
    Who is using the panel during one request.

    Built per request by SessionGateMiddleware and passed explicitly
    (request.admin_session, template context); there is no module-level
    session state.
    """
    user: Optional[Any] = None

    @property
    def is_authenticated(self):
        return self.user is not None and self.user.is_authenticated

    @property
    def email(self):
        return self.user.email if self.is_authenticated else None

    @property
    def display_name(self):
        return self.user.get_full_name() if self.is_authenticated else None

    @classmethod
    def from_request(cls, request):
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return cls()
        return cls(user=user)
