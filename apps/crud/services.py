"""
Page controller for one CRUD table page.

Glues the schema, the gateway, the form renderer and the list renderer
together. Views stay thin: they translate requests into calls on a
TablePage and CrudErrors into messages.
"""

import logging
from functools import partial

from apps.core.exceptions import RecordValidationError
from apps.core.utils import run_concurrently

from .forms import FormMode, SchemaForm
from .tables import build_table

logger = logging.getLogger(__name__)


class TablePage:

    def __init__(self, schema, gateway):
        self.schema = schema
        self.gateway = gateway

    @property
    def table_name(self):
        return self.schema.table_name

    def rows(self, filters=None, search=None, sort=None):
        """
        Rows for the list view.

        sort is (column, descending); unknown columns fall back to the
        table's default ordering.
        """
        order_by, descending = None, True
        if sort:
            column, descending = sort
            if column in self.schema.field_names:
                order_by = column
            else:
                descending = True

        return self.gateway.fetch_all(
            self.table_name,
            filters=filters,
            search=search,
            search_fields=self.schema.search_fields,
            order_by=order_by,
            descending=descending,
        )

    def related_options(self):
        """
        Options for every relation field, fetched concurrently.

        Returns dict field name -> list of Option. A failing lookup only
        empties its own field.
        """
        tasks = {
            descriptor.name: partial(
                self.gateway.fetch_related,
                descriptor.relation.table,
                descriptor.relation.value_field,
                descriptor.relation.label_field,
            )
            for descriptor in self.schema.relation_fields
        }
        return run_concurrently(tasks, fallback=lambda name, e: [])

    def table(self, rows, related=None):
        return build_table(rows, self.schema.fields, related)

    def build_form(self, mode, row=None, data=None, related=None):
        if related is None:
            related = self.related_options()
        return SchemaForm(self.schema, mode, related, data=data, row=row)

    def submit(self, form, row_id=None):
        """
        Validate and persist a bound form.

        Raises:
            RecordValidationError: contract failed, nothing was written
            PersistenceError: the store rejected the write
        """
        if form.mode is FormMode.VIEW:
            raise ValueError('A view form cannot be submitted')

        if not form.is_valid():
            logger.info(f"Validation failed for {self.table_name}: {sorted(form.errors)}")
            raise RecordValidationError(form.errors)

        if form.mode is FormMode.CREATE:
            return self.gateway.insert(self.table_name, form.cleaned_data)

        if row_id is None:
            raise ValueError('Editing requires a row id')
        return self.gateway.update(self.table_name, row_id, form.cleaned_data)

    def delete(self, row_id):
        self.gateway.delete(self.table_name, row_id)
