import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth.decorators import login_required
from django.shortcuts import render
from django.views.decorators.cache import never_cache

from .datastore import DataStoreError, get_data_store
from .exceptions import PersistenceError
from .gateway import get_gateway
from .schemas import all_schemas
from .utils import run_concurrently

logger = logging.getLogger(__name__)


@login_required
def dashboard_view(request):
    """
    Main dashboard view
    Greets the admin and links to every registered table
    """
    context = {
        'schemas': all_schemas(),
    }

    return render(request, 'core/dashboard.html', context)


@dataclass
class TableStatus:
    table: str
    display_name: str
    ok: bool
    row_count: int = 0
    error: Optional[str] = None


def probe_table(gateway, schema):
    try:
        rows = gateway.fetch_all(schema.table_name)
    except PersistenceError as e:
        return TableStatus(schema.table_name, schema.display_name, ok=False, error=e.message)
    return TableStatus(schema.table_name, schema.display_name, ok=True, row_count=len(rows))


@login_required
@never_cache
def diagnostics_view(request):
    """
    Database diagnostics

    1. Test the connection to the data store
    2. Fetch every registered table and report row count or error
    """
    connection_error = None
    statuses = []

    try:
        get_data_store().ping()
    except DataStoreError as e:
        connection_error = str(e)
        logger.error(f"Diagnostics: connection failed: {e}")

    if connection_error is None:
        gateway = get_gateway()
        schemas = all_schemas()
        results = run_concurrently(
            {schema.key: (lambda schema=schema: probe_table(gateway, schema)) for schema in schemas},
            fallback=lambda key, e: None,
        )
        for schema in schemas:
            status = results.get(schema.key)
            if status is None:
                status = TableStatus(schema.table_name, schema.display_name, ok=False, error='Probe mislukt')
            statuses.append(status)

    context = {
        'connection_error': connection_error,
        'statuses': statuses,
    }

    return render(request, 'core/diagnostics.html', context)
