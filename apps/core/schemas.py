"""
Schema registry for the admin panel.

Every editable table is described once, at import time, by a TableSchema:
its remote table name, a display name, the ordered field descriptors that
drive the list and form UI, and the validation contract (a Django form)
that parses submitted values.

The registry is configuration, not state: nothing here is mutated after
import.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings

from . import contracts
from .choices import (
    ADMIN_ROLE_CHOICES,
    CAMPAGNE_STATUS_CHOICES,
    GESPREK_STATUS_CHOICES,
    KLANT_STATUS_CHOICES,
)
from .exceptions import SchemaNotFound


# Columns maintained by the data store; never shown in forms
SYSTEM_COLUMNS = ('id', 'aangemaakt_op', 'bijgewerkt_op', 'created_at')


class FieldKind(str, Enum):
    TEXT = 'text'
    EMAIL = 'email'
    NUMBER = 'number'
    TEXTAREA = 'textarea'
    SELECT = 'select'
    DATE = 'date'
    BOOLEAN = 'boolean'
    DATETIME = 'datetime'
    ENUM = 'enum'
    UUID = 'uuid'
    TIMESTAMP = 'timestamp'


class Variant(str, Enum):
    """
    Closed set of value variants.

    Form widgets and list cells are chosen by dispatching on the variant,
    never on the raw kind string.
    """
    TEXT = 'text'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    ENUM = 'enum'
    DATE = 'date'
    RELATION = 'relation'
    JSON = 'json'


SELECTABLE_KINDS = (FieldKind.SELECT, FieldKind.ENUM)

KIND_VARIANTS = {
    FieldKind.TEXT: Variant.TEXT,
    FieldKind.EMAIL: Variant.TEXT,
    FieldKind.TEXTAREA: Variant.TEXT,
    FieldKind.UUID: Variant.TEXT,
    FieldKind.NUMBER: Variant.NUMBER,
    FieldKind.BOOLEAN: Variant.BOOLEAN,
    FieldKind.SELECT: Variant.ENUM,
    FieldKind.ENUM: Variant.ENUM,
    FieldKind.DATE: Variant.DATE,
    FieldKind.DATETIME: Variant.DATE,
    FieldKind.TIMESTAMP: Variant.DATE,
}


@dataclass(frozen=True)
class Option:
    value: Any
    label: str


@dataclass(frozen=True)
class Relation:
    table: str
    value_field: str = 'id'
    label_field: str = 'naam'


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    options: Tuple[Option, ...] = ()
    relation: Optional[Relation] = None
    filterable: bool = False
    default: Any = None
    # Free-text field holding JSON (parsed leniently on submit)
    json: bool = False

    @property
    def variant(self):
        if self.relation is not None:
            return Variant.RELATION
        if self.json:
            return Variant.JSON
        return KIND_VARIANTS[self.kind]

    @property
    def is_system(self):
        return self.name in SYSTEM_COLUMNS

    @property
    def is_searchable(self):
        return self.variant is Variant.TEXT and self.kind is not FieldKind.UUID


@dataclass(frozen=True)
class TableSchema:
    key: str
    table_name: str
    display_name: str
    fields: Tuple[FieldDescriptor, ...]
    contract: type
    order_column: Optional[str] = None
    description: str = ''

    def get_field(self, name):
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    @property
    def field_names(self):
        return [descriptor.name for descriptor in self.fields]

    @property
    def relation_fields(self):
        return [descriptor for descriptor in self.fields if descriptor.relation is not None]

    @property
    def search_fields(self):
        return [descriptor.name for descriptor in self.fields if descriptor.is_searchable]

    @property
    def ordering(self):
        return self.order_column or settings.CRUD_DEFAULT_ORDER_COLUMN


def options(choices):
    return tuple(Option(value, label) for value, label in choices)


def timestamps(*names):
    labels = {
        'aangemaakt_op': 'Aangemaakt op',
        'bijgewerkt_op': 'Bijgewerkt op',
        'created_at': 'Aangemaakt op',
    }
    return tuple(FieldDescriptor(name, labels[name], FieldKind.DATETIME) for name in names)


ID = FieldDescriptor('id', 'ID', FieldKind.NUMBER)
REGIO = Relation('regio')


# REGISTRY

SCHEMAS: Dict[str, TableSchema] = {}


def register(schema):
    SCHEMAS[schema.key] = schema
    return schema


register(TableSchema(
    key='regio',
    table_name='regio',
    display_name='Regio',
    description="Beheer regio's en territoria",
    contract=contracts.RegioContract,
    fields=(
        ID,
        FieldDescriptor('naam', 'Naam', required=True, filterable=True),
        FieldDescriptor('code', 'Code', required=True, filterable=True),
        FieldDescriptor('beschrijving', 'Beschrijving', FieldKind.TEXTAREA),
        FieldDescriptor('actief', 'Actief', FieldKind.BOOLEAN, filterable=True, default=True),
    ) + timestamps('aangemaakt_op', 'bijgewerkt_op'),
))

register(TableSchema(
    key='campagnes',
    table_name='campagnes',
    display_name='Campagne',
    description='Beheer marketing campagnes',
    contract=contracts.CampagneContract,
    fields=(
        ID,
        FieldDescriptor('naam', 'Naam', required=True, filterable=True),
        FieldDescriptor('beschrijving', 'Beschrijving', FieldKind.TEXTAREA),
        FieldDescriptor('start_datum', 'Start Datum', FieldKind.DATE),
        FieldDescriptor('eind_datum', 'Eind Datum', FieldKind.DATE),
        FieldDescriptor('status', 'Status', FieldKind.SELECT,
                        options=options(CAMPAGNE_STATUS_CHOICES), filterable=True),
    ) + timestamps('aangemaakt_op', 'bijgewerkt_op'),
))

register(TableSchema(
    key='klanten',
    table_name='klanten',
    display_name='Klant',
    description='Beheer klantgegevens',
    contract=contracts.KlantContract,
    fields=(
        ID,
        FieldDescriptor('naam', 'Naam', required=True, filterable=True),
        FieldDescriptor('email', 'Email', FieldKind.EMAIL, required=True, filterable=True),
        FieldDescriptor('telefoon', 'Telefoon'),
        FieldDescriptor('adres', 'Adres', FieldKind.TEXTAREA),
        FieldDescriptor('regio_id', 'Regio', FieldKind.SELECT, relation=REGIO, filterable=True),
        FieldDescriptor('status', 'Status', FieldKind.SELECT,
                        options=options(KLANT_STATUS_CHOICES), filterable=True),
    ) + timestamps('aangemaakt_op', 'bijgewerkt_op'),
))

register(TableSchema(
    key='verkopers',
    table_name='verkopers',
    display_name='Verkoper',
    description='Beheer verkopers en hun gegevens',
    contract=contracts.VerkoperContract,
    fields=(
        ID,
        FieldDescriptor('naam', 'Naam', required=True, filterable=True),
        FieldDescriptor('email', 'Email', FieldKind.EMAIL, required=True),
        FieldDescriptor('telefoon', 'Telefoon'),
        FieldDescriptor('regio_id', 'Regio', FieldKind.SELECT, relation=REGIO, filterable=True),
        FieldDescriptor('commissie_percentage', 'Commissie %', FieldKind.NUMBER),
        FieldDescriptor('actief', 'Actief', FieldKind.BOOLEAN, filterable=True, default=True),
    ) + timestamps('aangemaakt_op', 'bijgewerkt_op'),
))

register(TableSchema(
    key='gesprekken',
    table_name='gesprekken',
    display_name='Gesprek',
    description='Beheer klantgesprekken',
    contract=contracts.GesprekContract,
    fields=(
        ID,
        FieldDescriptor('klant_id', 'Klant', FieldKind.SELECT, required=True,
                        relation=Relation('klanten'), filterable=True),
        FieldDescriptor('verkoper_id', 'Verkoper', FieldKind.SELECT, required=True,
                        relation=Relation('verkopers'), filterable=True),
        FieldDescriptor('campagne_id', 'Campagne', FieldKind.SELECT, relation=Relation('campagnes')),
        FieldDescriptor('regio_id', 'Regio', FieldKind.SELECT, relation=REGIO),
        FieldDescriptor('datum', 'Datum', FieldKind.DATE, required=True),
        FieldDescriptor('notities', 'Notities', FieldKind.TEXTAREA),
        FieldDescriptor('status', 'Status', FieldKind.SELECT,
                        options=options(GESPREK_STATUS_CHOICES), filterable=True),
    ) + timestamps('aangemaakt_op', 'bijgewerkt_op'),
))

register(TableSchema(
    key='belschema',
    table_name='belschema',
    display_name='Belschema',
    description='Beheer belplanningen',
    contract=contracts.BelschemaContract,
    fields=(
        ID,
        FieldDescriptor('naam', 'Naam', required=True, filterable=True),
        FieldDescriptor('beschrijving', 'Beschrijving', FieldKind.TEXTAREA),
        FieldDescriptor('actief', 'Actief', FieldKind.BOOLEAN, filterable=True),
    ) + timestamps('aangemaakt_op', 'bijgewerkt_op'),
))

register(TableSchema(
    key='call_scripts',
    table_name='call_scripts',
    display_name='Call Script',
    description='Beheer belscripts voor verkopers',
    contract=contracts.CallScriptContract,
    fields=(
        ID,
        FieldDescriptor('naam', 'Naam', required=True, filterable=True),
        FieldDescriptor('script', 'Script', FieldKind.TEXTAREA, required=True),
        FieldDescriptor('actief', 'Actief', FieldKind.BOOLEAN, filterable=True),
    ) + timestamps('aangemaakt_op', 'bijgewerkt_op'),
))

register(TableSchema(
    key='admin_users',
    table_name='admin_users',
    display_name='Admin Gebruiker',
    description='Beheer admin gebruikers en rechten',
    contract=contracts.AdminUserContract,
    fields=(
        ID,
        FieldDescriptor('email', 'Email', FieldKind.EMAIL, required=True, filterable=True),
        FieldDescriptor('naam', 'Naam', required=True, filterable=True),
        FieldDescriptor('rol', 'Rol', FieldKind.ENUM, required=True,
                        options=options(ADMIN_ROLE_CHOICES), filterable=True),
        FieldDescriptor('actief', 'Actief', FieldKind.BOOLEAN, filterable=True, default=True),
    ) + timestamps('aangemaakt_op', 'bijgewerkt_op'),
))

register(TableSchema(
    key='logs',
    table_name='logs',
    display_name='Log',
    description='Bekijk systeem logs',
    contract=contracts.LogContract,
    order_column='created_at',
    fields=(
        FieldDescriptor('id', 'ID', FieldKind.UUID),
        FieldDescriptor('type', 'Type', required=True, filterable=True),
        FieldDescriptor('status', 'Status', required=True, filterable=True),
        FieldDescriptor('message', 'Message', FieldKind.TEXTAREA, required=True),
        FieldDescriptor('data', 'Data', FieldKind.TEXTAREA, json=True),
        FieldDescriptor('created_at', 'Aangemaakt op', FieldKind.DATETIME),
        FieldDescriptor('user_id', 'User ID', FieldKind.UUID),
        FieldDescriptor('ip', 'IP'),
        FieldDescriptor('device', 'Device'),
        FieldDescriptor('region', 'Region'),
        FieldDescriptor('twilio_sid', 'Twilio SID'),
    ),
))

register(TableSchema(
    key='instellingen',
    table_name='instellingen',
    display_name='Instelling',
    description='Beheer systeem instellingen',
    contract=contracts.InstellingContract,
    fields=(
        ID,
        FieldDescriptor('key', 'Key', required=True, filterable=True),
        FieldDescriptor('value', 'Value', FieldKind.TEXTAREA, required=True),
        FieldDescriptor('beschrijving', 'Beschrijving', FieldKind.TEXTAREA),
    ) + timestamps('aangemaakt_op'),
))

register(TableSchema(
    key='rapporten',
    table_name='rapporten',
    display_name='Rapport',
    description='Bekijk en genereer rapporten',
    contract=contracts.RapportContract,
    fields=(
        ID,
        FieldDescriptor('naam', 'Naam', required=True, filterable=True),
        FieldDescriptor('gegenereerd_op', 'Gegenereerd op', FieldKind.TIMESTAMP, required=True),
        FieldDescriptor('bestand_url', 'Bestand URL'),
    ) + timestamps('aangemaakt_op'),
))


# LOOKUP

def lookup(table_key):
    """
    Return the schema registered under table_key.

    Raises:
        SchemaNotFound: unknown key; callers render it as an inline error
    """
    try:
        return SCHEMAS[table_key]
    except KeyError:
        raise SchemaNotFound(table_key) from None


def all_schemas():
    return list(SCHEMAS.values())


def schema_for_table(table_name):
    for schema in SCHEMAS.values():
        if schema.table_name == table_name:
            return schema
    return None


def order_column_for(table_name):
    """Created-at column a table is sorted on (logs differ from domain tables)"""
    schema = schema_for_table(table_name)
    if schema is not None:
        return schema.ordering
    return settings.CRUD_DEFAULT_ORDER_COLUMN


# CONSISTENCY

def validate_registry(schemas=None) -> List[str]:
    """
    Static consistency check over the registry.

    Returns a list of human readable problems (empty when consistent):
    - field names must be unique within a schema
    - a relation requires a selectable kind and a registered target table
    - every field the contract validates must be declared in fields
    """
    if schemas is None:
        schemas = SCHEMAS
    problems = []
    table_names = {schema.table_name for schema in schemas.values()}

    for key, schema in schemas.items():
        seen = set()
        for descriptor in schema.fields:
            if descriptor.name in seen:
                problems.append(f'{key}: duplicate field "{descriptor.name}"')
            seen.add(descriptor.name)

            if descriptor.relation is None:
                continue
            if descriptor.kind not in SELECTABLE_KINDS:
                problems.append(
                    f'{key}.{descriptor.name}: relation requires a select/enum field, '
                    f'not "{descriptor.kind.value}"'
                )
            if descriptor.relation.table not in table_names:
                problems.append(
                    f'{key}.{descriptor.name}: relation table "{descriptor.relation.table}" '
                    f'is not registered'
                )

        for name in schema.contract.base_fields:
            if name not in seen:
                problems.append(f'{key}: contract field "{name}" is not declared in fields')

    return problems
