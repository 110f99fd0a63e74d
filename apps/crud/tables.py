"""
List rendering.

Pure functions from rows to a table view model; templates only iterate
over the result. Cell formatting is chosen per value variant.
"""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from django.utils import formats, timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.core.schemas import FieldKind, Variant

EMPTY = '-'
YES_LABEL = 'Ja'
NO_LABEL = 'Nee'


@dataclass(frozen=True)
class Cell:
    text: str
    style: str = 'plain'  # plain, empty, multiline, json
    detail: Optional[str] = None


@dataclass(frozen=True)
class Column:
    name: str
    label: str


@dataclass
class TableRow:
    id: Any
    cells: List[Cell] = field(default_factory=list)


@dataclass
class Table:
    columns: List[Column]
    rows: List[TableRow]

    @property
    def is_empty(self):
        return not self.rows


def parse_temporal(value, kind):
    """datetime/date from a stored value, or None when it cannot be parsed"""
    if isinstance(value, (date, datetime)):
        return value
    text = str(value)
    try:
        if kind is FieldKind.DATE:
            return parse_date(text) or parse_datetime(text)
        return parse_datetime(text) or parse_date(text)
    except ValueError:
        return None


def _json_cell(value):
    if isinstance(value, dict):
        summary = f'JSON Data ({len(value)} keys)'
    else:
        summary = f'JSON Data ({len(value)} items)'
    detail = json.dumps(value, indent=2, ensure_ascii=False, default=str)
    return Cell(summary, style='json', detail=detail)


def _text_cell(value, descriptor, options):
    if descriptor.kind is FieldKind.TEXTAREA:
        return Cell(str(value), style='multiline')
    return Cell(str(value))


def _number_cell(value, descriptor, options):
    return Cell(str(value))


def _boolean_cell(value, descriptor, options):
    return Cell(YES_LABEL if value else NO_LABEL)


def _enum_cell(value, descriptor, options):
    for option in descriptor.options:
        if str(option.value) == str(value):
            return Cell(option.label)
    return Cell(str(value))


def _relation_cell(value, descriptor, options):
    for option in options:
        if str(option.value) == str(value):
            return Cell(option.label)
    return Cell(str(value))


def _date_cell(value, descriptor, options):
    parsed = parse_temporal(value, descriptor.kind)
    if parsed is None:
        return Cell(str(value))

    if isinstance(parsed, datetime):
        if timezone.is_aware(parsed):
            parsed = timezone.localtime(parsed)
        if descriptor.kind is FieldKind.DATE:
            return Cell(formats.date_format(parsed.date(), 'SHORT_DATE_FORMAT'))
        return Cell(formats.date_format(parsed, 'SHORT_DATETIME_FORMAT'))

    return Cell(formats.date_format(parsed, 'SHORT_DATE_FORMAT'))


def _json_text_cell(value, descriptor, options):
    return Cell(str(value), style='multiline')


CELL_FORMATTERS = {
    Variant.TEXT: _text_cell,
    Variant.NUMBER: _number_cell,
    Variant.BOOLEAN: _boolean_cell,
    Variant.ENUM: _enum_cell,
    Variant.RELATION: _relation_cell,
    Variant.DATE: _date_cell,
    Variant.JSON: _json_text_cell,
}


def format_cell(value, descriptor, related_options=()) -> Cell:
    """
    Display form of one value.

    None is always "-" and structured values always render as a JSON
    summary with a pretty-printed detail, whatever the field's variant.
    """
    if value is None:
        return Cell(EMPTY, style='empty')
    if isinstance(value, (dict, list)):
        return _json_cell(value)
    return CELL_FORMATTERS[descriptor.variant](value, descriptor, related_options)


def build_table(rows, fields, related_by_field: Optional[Dict] = None) -> Table:
    related_by_field = related_by_field or {}
    columns = [Column(descriptor.name, descriptor.label) for descriptor in fields]
    table_rows = [
        TableRow(
            id=row.get('id'),
            cells=[
                format_cell(row.get(descriptor.name), descriptor, related_by_field.get(descriptor.name, ()))
                for descriptor in fields
            ],
        )
        for row in rows
    ]
    return Table(columns, table_rows)
