"""
Data access gateway.

Stateless wrapper over the configured data store. It owns the
table-aware ordering policy and translates store failures into the
CRUD error taxonomy; it never retries and never caches.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .datastore import DataStoreError, Query, get_data_store
from .exceptions import PersistenceError, RelationResolutionError
from .schemas import Option, order_column_for

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = 'Onbekend'


class DataGateway:

    def __init__(self, store):
        self.store = store

    def fetch_all(
        self,
        table: str,
        filters: Optional[Dict] = None,
        search: Optional[str] = None,
        search_fields: Iterable[str] = (),
        order_by: Optional[str] = None,
        descending: bool = True,
    ) -> List[Dict]:
        """
        Return every row of a table matching the filters and search term.

        Rows are sorted by order_by, or by the table's created-at column
        newest first when no sort is given.
        """
        query = Query(
            table=table,
            filters={name: value for name, value in (filters or {}).items() if value not in (None, '')},
            search=(search or '').strip() or None,
            search_fields=tuple(search_fields),
            order_by=order_by or order_column_for(table),
            descending=descending,
        )

        try:
            rows = self.store.select(query)
        except DataStoreError as e:
            logger.error(f"Fetch from {table} failed: {e}")
            raise PersistenceError(table, 'fetch', str(e)) from e

        logger.debug(f"Fetched {len(rows)} rows from {table}")
        return rows

    def fetch_one(self, table: str, row_id) -> Optional[Dict]:
        query = Query(table=table, filters={'id': row_id}, limit=1)
        try:
            rows = self.store.select(query)
        except DataStoreError as e:
            logger.error(f"Fetch of {table} #{row_id} failed: {e}")
            raise PersistenceError(table, 'fetch', str(e)) from e
        return rows[0] if rows else None

    def fetch_related(self, table: str, value_field: str = 'id', label_field: str = 'naam') -> List[Option]:
        """
        Options for a relation dropdown, sorted by label.

        Failure is not an error for the caller: it is logged and an
        empty list comes back.
        """
        query = Query(
            table=table,
            columns=f'{value_field},{label_field}',
            order_by=label_field,
            descending=False,
        )

        try:
            rows = self.store.select(query)
        except DataStoreError as e:
            logger.warning(str(RelationResolutionError(table, e)))
            return []

        return [
            Option(row.get(value_field), row.get(label_field) or UNKNOWN_LABEL)
            for row in rows
        ]

    def insert(self, table: str, values: Dict) -> Dict:
        try:
            row = self.store.insert(table, values)
        except DataStoreError as e:
            logger.error(f"Insert into {table} failed: {e}")
            raise PersistenceError(table, 'insert', str(e)) from e

        logger.info(f"Inserted row {row.get('id')} into {table}")
        return row

    def update(self, table: str, row_id, values: Dict) -> Dict:
        try:
            row = self.store.update(table, row_id, values)
        except DataStoreError as e:
            logger.error(f"Update of {table} #{row_id} failed: {e}")
            raise PersistenceError(table, 'update', str(e)) from e

        logger.info(f"Updated row {row_id} in {table}")
        return row

    def delete(self, table: str, row_id) -> None:
        try:
            self.store.delete(table, row_id)
        except DataStoreError as e:
            logger.error(f"Delete of {table} #{row_id} failed: {e}")
            raise PersistenceError(table, 'delete', str(e)) from e

        logger.info(f"Deleted row {row_id} from {table}")


def get_gateway() -> DataGateway:
    return DataGateway(get_data_store())
