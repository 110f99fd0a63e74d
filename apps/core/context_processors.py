from dataclasses import dataclass

from django.urls import reverse

from .schemas import all_schemas


@dataclass(frozen=True)
class NavItem:
    key: str
    label: str
    url: str
    active: bool = False


def navigation(request):
    """
    Sidebar items and the current admin session for every template.

    The active item is the one whose URL is the longest prefix of the
    request path.
    """
    items = [NavItem('dashboard', 'Dashboard', reverse('core:dashboard'))]
    for schema in all_schemas():
        items.append(NavItem(schema.key, schema.display_name, reverse('crud:list', args=[schema.key])))
    items.append(NavItem('diagnostics', 'Diagnose', reverse('core:diagnostics')))

    path = request.path
    matches = [item for item in items if path.startswith(item.url)]
    active = max(matches, key=lambda item: len(item.url)).key if matches else None

    return {
        'nav_items': [
            NavItem(item.key, item.label, item.url, item.key == active) for item in items
        ],
        'admin_session': getattr(request, 'admin_session', None),
    }
