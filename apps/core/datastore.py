"""
Data store boundary.

The admin panel talks to a remote relational store through a tiny query
interface. Two backends implement it:

- PostgrestStore: Supabase/PostgREST over HTTP (requests)
- MemoryStore: in-process tables for development and tests

The backend is selected by the DATA_STORE_BACKEND setting.
"""

import copy
import json
import logging
import threading
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

import requests
from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


class DataStoreError(Exception):
    """
    Raised by a store backend when a read or write fails.

    Never leaves the gateway: it is translated to a CrudError there.
    """
    pass


@dataclass
class Query:
    table: str
    columns: str = '*'
    filters: Dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None
    search_fields: Tuple[str, ...] = ()
    order_by: Optional[str] = None
    descending: bool = True
    limit: Optional[int] = None


def normalize_value(value):
    """String form of a filter value, as PostgREST compares it"""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'null'
    return str(value)


class BaseStore:

    def select(self, query: Query) -> List[Dict]:
        raise NotImplementedError

    def insert(self, table: str, values: Dict) -> Dict:
        raise NotImplementedError

    def update(self, table: str, row_id, values: Dict) -> Dict:
        raise NotImplementedError

    def delete(self, table: str, row_id) -> None:
        raise NotImplementedError

    def describe(self, table: str) -> List[Dict]:
        """Column metadata: dicts with name, data_type, is_nullable, default"""
        raise NotImplementedError

    def ping(self) -> None:
        """Raise DataStoreError when the store cannot be reached"""
        raise NotImplementedError


# ==================== POSTGREST ====================

class PostgrestStore(BaseStore):
    """
    Client for a Supabase/PostgREST endpoint.

    Every call is a single HTTP request; there is no retry and no caching.
    """

    def __init__(self, url: str, key: str, timeout: int = 30):
        if not url:
            raise DataStoreError('SUPABASE_URL is niet geconfigureerd')
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.key = key
        self.timeout = timeout
        self.session = requests.Session()

    @classmethod
    def from_settings(cls):
        return cls(
            url=settings.SUPABASE_URL,
            key=settings.SUPABASE_KEY,
            timeout=settings.DATA_STORE_TIMEOUT,
        )

    def _get_headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            'apikey': self.key,
            'Authorization': f'Bearer {self.key}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        if prefer:
            headers['Prefer'] = prefer
        return headers

    def _make_request(self, method: str, path: str, params=None, data=None, prefer=None):
        url = f"{self.base_url}{path}"

        try:
            logger.debug(f"{method} {url} params={params}")
            response = self.session.request(
                method,
                url,
                params=params,
                json=data,
                headers=self._get_headers(prefer),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            error_message = "Request timeout - data store did not respond"
            logger.error(error_message)
            raise DataStoreError(error_message)
        except requests.exceptions.ConnectionError:
            error_message = "Connection error - could not reach data store"
            logger.error(error_message)
            raise DataStoreError(error_message)
        except requests.exceptions.RequestException as e:
            error_message = f"Request error: {str(e)}"
            logger.error(error_message)
            raise DataStoreError(error_message)

        if response.status_code >= 400:
            error_message = f"Data store returned {response.status_code}"
            try:
                error_data = response.json()
                error_message = error_data.get('message', error_message)
            except ValueError:
                error_message = response.text or error_message

            logger.error(f"Data store error on {method} {path}: {error_message}")
            raise DataStoreError(error_message)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise DataStoreError(f"Invalid JSON response from {path}")

    def _query_params(self, query: Query) -> Dict[str, str]:
        params = {'select': query.columns}

        for column, value in query.filters.items():
            params[column] = f'eq.{normalize_value(value)}'

        if query.search and query.search_fields:
            # Reserved characters would break the or=(...) grammar
            term = query.search.translate(str.maketrans('', '', ',()"'))
            clauses = ','.join(f'{name}.ilike.*{term}*' for name in query.search_fields)
            params['or'] = f'({clauses})'

        if query.order_by:
            direction = 'desc' if query.descending else 'asc'
            params['order'] = f'{query.order_by}.{direction}'

        if query.limit is not None:
            params['limit'] = str(query.limit)

        return params

    def select(self, query):
        return self._make_request('GET', f'/{query.table}', params=self._query_params(query)) or []

    def insert(self, table, values):
        rows = self._make_request(
            'POST', f'/{table}',
            data=[values],
            prefer='return=representation',
        )
        if not rows:
            raise DataStoreError(f'Insert into {table} returned no row')
        return rows[0]

    def update(self, table, row_id, values):
        rows = self._make_request(
            'PATCH', f'/{table}',
            params={'id': f'eq.{row_id}'},
            data=values,
            prefer='return=representation',
        )
        if not rows:
            raise DataStoreError(f'Geen rij gevonden met id {row_id}')
        return rows[0]

    def delete(self, table, row_id):
        self._make_request('DELETE', f'/{table}', params={'id': f'eq.{row_id}'})

    def describe(self, table):
        document = self._make_request('GET', '/') or {}
        definition = document.get('definitions', {}).get(table)
        if definition is None:
            raise DataStoreError(f'Tabel {table} niet gevonden')

        required = set(definition.get('required', []))
        columns = []
        for name, prop in definition.get('properties', {}).items():
            columns.append({
                'name': name,
                'data_type': prop.get('format') or prop.get('type', 'text'),
                'is_nullable': name not in required,
                'default': prop.get('default'),
            })
        return columns

    def ping(self):
        self._make_request('GET', '/')


# ==================== IN-MEMORY ====================

class MemoryStore(BaseStore):
    """
    In-process store with the same query semantics as PostgrestStore.

    Tables must be declared up front; touching an unknown table raises
    DataStoreError, like the remote store does.
    """

    def __init__(self, tables: Dict[str, List[Dict]], stamp_column=None):
        self._lock = threading.Lock()
        self._tables = {name: [dict(row) for row in rows] for name, rows in tables.items()}
        self._next_ids = {name: self._max_id(rows) + 1 for name, rows in self._tables.items()}
        # Callable table -> created-at column, filled on insert
        self._stamp_column = stamp_column

    @classmethod
    def from_settings(cls):
        from .schemas import all_schemas, order_column_for

        tables = {schema.table_name: [] for schema in all_schemas()}
        fixture = settings.DATA_STORE_FIXTURE
        if fixture:
            with open(fixture, encoding='utf-8') as fp:
                tables.update(json.load(fp))
            logger.info(f"Memory store seeded from {fixture}")
        return cls(tables, stamp_column=order_column_for)

    @staticmethod
    def _max_id(rows):
        ids = [row['id'] for row in rows if isinstance(row.get('id'), int)]
        return max(ids, default=0)

    def _rows(self, table):
        try:
            return self._tables[table]
        except KeyError:
            raise DataStoreError(f'relation "{table}" does not exist') from None

    def _matches(self, row, query):
        for column, value in query.filters.items():
            if normalize_value(row.get(column)) != normalize_value(value):
                return False

        if query.search and query.search_fields:
            term = query.search.lower()
            return any(
                term in str(row[name]).lower()
                for name in query.search_fields
                if row.get(name) is not None
            )
        return True

    def _check_columns(self, query, rows):
        # Like PostgREST, naming a column the table lacks is an error
        if not rows:
            return
        known = set().union(*(row.keys() for row in rows))
        named = list(query.filters)
        if query.order_by:
            named.append(query.order_by)
        if query.columns != '*':
            named.extend(name.strip() for name in query.columns.split(','))
        for column in named:
            if column not in known:
                raise DataStoreError(f'column {query.table}.{column} does not exist')

    def select(self, query):
        with self._lock:
            rows = self._rows(query.table)
            self._check_columns(query, rows)

            result = [row for row in rows if self._matches(row, query)]

            if query.order_by:
                column = query.order_by
                result.sort(
                    key=lambda row: (row.get(column) is None, row.get(column)),
                    reverse=query.descending,
                )

            if query.limit is not None:
                result = result[:query.limit]

            if query.columns != '*':
                names = [name.strip() for name in query.columns.split(',')]
                result = [{name: row.get(name) for name in names} for row in result]

            return copy.deepcopy(result)

    def insert(self, table, values):
        with self._lock:
            rows = self._rows(table)
            row = copy.deepcopy(values)
            if row.get('id') is None:
                row['id'] = self._next_ids[table]
            if isinstance(row['id'], int):
                self._next_ids[table] = max(self._next_ids[table], row['id'] + 1)

            if self._stamp_column is not None:
                column = self._stamp_column(table)
                row.setdefault(column, timezone.now().isoformat())

            rows.append(row)
            return copy.deepcopy(row)

    def update(self, table, row_id, values):
        with self._lock:
            for row in self._rows(table):
                if normalize_value(row.get('id')) == normalize_value(row_id):
                    row.update(copy.deepcopy(values))
                    if 'bijgewerkt_op' in row:
                        row['bijgewerkt_op'] = timezone.now().isoformat()
                    return copy.deepcopy(row)
            raise DataStoreError(f'Geen rij gevonden met id {row_id}')

    def delete(self, table, row_id):
        with self._lock:
            rows = self._rows(table)
            rows[:] = [row for row in rows if normalize_value(row.get('id')) != normalize_value(row_id)]

    def describe(self, table):
        with self._lock:
            rows = self._rows(table)
            columns = {}
            for row in rows:
                for name, value in row.items():
                    if name not in columns or columns[name] == 'text' and value is not None:
                        columns[name] = self._data_type(value)
            return [
                {'name': name, 'data_type': data_type, 'is_nullable': True, 'default': None}
                for name, data_type in columns.items()
            ]

    @staticmethod
    def _data_type(value):
        if isinstance(value, bool):
            return 'boolean'
        if isinstance(value, int):
            return 'integer'
        if isinstance(value, float):
            return 'numeric'
        if isinstance(value, (dict, list)):
            return 'jsonb'
        return 'text'

    def ping(self):
        return None


def default_backend():
    if settings.SUPABASE_URL:
        return 'apps.core.datastore.PostgrestStore'
    return 'apps.core.datastore.MemoryStore'


@lru_cache(maxsize=None)
def get_data_store() -> BaseStore:
    """
    Return the configured store (one instance per process).

    Tests call get_data_store.cache_clear() after overriding settings.
    """
    backend = settings.DATA_STORE_BACKEND or default_backend()
    store_class = import_string(backend)
    logger.info(f"Using data store backend {backend}")
    return store_class.from_settings()
