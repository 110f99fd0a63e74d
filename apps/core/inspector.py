"""
Remote table inspection.

Reads column metadata from the data store and suggests a field kind per
column, so a new table can be added to the schema registry quickly.
"""

import logging
from dataclasses import dataclass
from typing import Any, List

from .schemas import SYSTEM_COLUMNS, FieldKind

logger = logging.getLogger(__name__)

DATE_TYPES = ('date', 'timestamp', 'timestamptz', 'timestamp with time zone', 'timestamp without time zone')
NUMBER_TYPES = ('integer', 'bigint', 'smallint', 'numeric', 'decimal', 'real', 'double precision')
TEXT_TYPES = ('text', 'varchar', 'char', 'character varying', 'character')


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    data_type: str
    is_nullable: bool = True
    default: Any = None

    @property
    def suggested_kind(self):
        return suggest_field_kind(self.data_type)


def suggest_field_kind(data_type):
    data_type = (data_type or '').lower()
    if data_type == 'boolean':
        return FieldKind.BOOLEAN
    if data_type in DATE_TYPES:
        return FieldKind.DATE
    if data_type in NUMBER_TYPES:
        return FieldKind.NUMBER
    if data_type in TEXT_TYPES:
        return FieldKind.TEXT
    return FieldKind.TEXT


def inspect_table(store, table) -> List[ColumnInfo]:
    """
    Column metadata of a remote table.

    Raises:
        DataStoreError: table unknown or store unreachable
    """
    columns = [
        ColumnInfo(
            name=column['name'],
            data_type=column['data_type'],
            is_nullable=column.get('is_nullable', True),
            default=column.get('default'),
        )
        for column in store.describe(table)
    ]
    logger.info(f"Inspected {table}: {len(columns)} columns")
    return columns


def label_for(name):
    return name.replace('_', ' ').capitalize()


def generate_schema_stub(table, columns) -> str:
    """Python source for a TableSchema entry, ready to paste and refine"""
    lines = [
        'register(TableSchema(',
        f"    key='{table}',",
        f"    table_name='{table}',",
        f"    display_name='{label_for(table)}',",
        f'    contract=contracts.{table.title().replace("_", "")}Contract,',
        '    fields=(',
    ]
    for column in columns:
        if column.name in SYSTEM_COLUMNS and column.name != 'id':
            continue
        kind = column.suggested_kind.name
        required = '' if column.is_nullable or column.name == 'id' else ', required=True'
        lines.append(
            f"        FieldDescriptor('{column.name}', '{label_for(column.name)}', FieldKind.{kind}{required}),"
        )
    lines.append('    ),')
    lines.append('))')
    return '\n'.join(lines)
