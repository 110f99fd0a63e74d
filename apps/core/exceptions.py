"""
Error types for the CRUD schema engine.

Taxonomy:
- SchemaNotFound: unknown table key (configuration error, inline message)
- RecordValidationError: per-field errors, the form stays open
- PersistenceError: remote read/write failure, shown as a banner
- RelationResolutionError: lookup table failure, dropdown degrades to empty
"""


class CrudError(Exception):
    """Base class for all CRUD engine errors"""

    def __init__(self, message=''):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class SchemaNotFound(CrudError):

    def __init__(self, table_key):
        self.table_key = table_key
        super().__init__(f'Tabel schema niet gevonden voor: {table_key}')


class RecordValidationError(CrudError):
    """
    Raised when a submitted value map fails the schema's validation contract.

    errors maps a field name (or '__all__') to a list of messages.
    """

    def __init__(self, errors):
        self.errors = {name: list(messages) for name, messages in errors.items()}
        fields = ', '.join(sorted(self.errors))
        super().__init__(f'Validatie mislukt voor: {fields}')

    @property
    def fields(self):
        return sorted(self.errors)


class PersistenceError(CrudError):
    """Remote store rejected or failed a read/write operation"""

    def __init__(self, table, operation, message):
        self.table = table
        self.operation = operation
        super().__init__(message)


class RelationResolutionError(CrudError):
    """
    A relation's lookup table could not be read.

    Never raised to callers: the gateway logs it and returns no options.
    """

    def __init__(self, table, reason):
        self.table = table
        self.reason = reason
        super().__init__(f'Gerelateerde data uit {table} niet beschikbaar: {reason}')
