"""
Schema Registry Tests
=====================

Test Coverage:
1. Registry consistency (and detection of broken schemas)
2. lookup / schema_for_table / order_column_for
3. Value variant derivation
4. System check wiring

Run tests:
    python manage.py test apps.core.tests.test_schemas
"""

from django import forms
from django.test import SimpleTestCase, override_settings

from apps.core.checks import check_schema_registry
from apps.core.exceptions import SchemaNotFound
from apps.core.schemas import (
    SCHEMAS,
    FieldDescriptor,
    FieldKind,
    Relation,
    TableSchema,
    Variant,
    all_schemas,
    lookup,
    order_column_for,
    schema_for_table,
    validate_registry,
)


class NaamContract(forms.Form):
    naam = forms.CharField()


def make_schema(key, fields, contract=NaamContract):
    return TableSchema(key=key, table_name=key, display_name=key.title(), fields=tuple(fields), contract=contract)


class RegistryConsistencyTest(SimpleTestCase):
    """Static consistency of the registered schemas"""

    def test_registered_schemas_are_consistent(self):
        """
        Test: Every registered schema passes validate_registry

        Expected: No problems reported
        """
        self.assertEqual(validate_registry(), [])

    def test_all_tables_registered(self):
        keys = [schema.key for schema in all_schemas()]
        for key in ['regio', 'campagnes', 'klanten', 'verkopers', 'gesprekken', 'belschema',
                    'call_scripts', 'admin_users', 'logs', 'instellingen', 'rapporten']:
            self.assertIn(key, keys)

    def test_duplicate_field_name_reported(self):
        schema = make_schema('dup', [
            FieldDescriptor('naam', 'Naam'),
            FieldDescriptor('naam', 'Naam 2'),
        ])
        problems = validate_registry({'dup': schema})
        self.assertEqual(len(problems), 1)
        self.assertIn('duplicate field "naam"', problems[0])

    def test_relation_to_unregistered_table_reported(self):
        schema = make_schema('kind', [
            FieldDescriptor('naam', 'Naam'),
            FieldDescriptor('ouder_id', 'Ouder', FieldKind.SELECT, relation=Relation('bestaat_niet')),
        ])
        problems = validate_registry({'kind': schema})
        self.assertEqual(len(problems), 1)
        self.assertIn('bestaat_niet', problems[0])

    def test_relation_on_text_field_reported(self):
        schema = make_schema('kind', [
            FieldDescriptor('naam', 'Naam'),
            FieldDescriptor('ouder_id', 'Ouder', FieldKind.TEXT, relation=Relation('kind')),
        ])
        problems = validate_registry({'kind': schema})
        self.assertEqual(len(problems), 1)
        self.assertIn('select/enum', problems[0])

    def test_contract_field_missing_from_fields_reported(self):
        schema = make_schema('leeg', [FieldDescriptor('code', 'Code')])
        problems = validate_registry({'leeg': schema})
        self.assertEqual(problems, ['leeg: contract field "naam" is not declared in fields'])

    def test_system_check_passes(self):
        """
        Test: The registry system check is clean for the shipped registry

        Expected: No errors (manage.py check succeeds)
        """
        self.assertEqual(check_schema_registry(None), [])


class LookupTest(SimpleTestCase):
    """Test lookup helpers"""

    def test_lookup_known_key(self):
        schema = lookup('klanten')
        self.assertEqual(schema.table_name, 'klanten')
        self.assertEqual(schema.display_name, 'Klant')

    def test_lookup_unknown_key_raises(self):
        """
        Test: Unknown table key

        Expected: SchemaNotFound with a readable Dutch message
        """
        with self.assertRaises(SchemaNotFound) as ctx:
            lookup('bestaat_niet')
        self.assertEqual(str(ctx.exception), 'Tabel schema niet gevonden voor: bestaat_niet')
        self.assertEqual(ctx.exception.table_key, 'bestaat_niet')

    def test_schema_for_table(self):
        self.assertIs(schema_for_table('logs'), SCHEMAS['logs'])
        self.assertIsNone(schema_for_table('onbekend'))

    def test_logs_ordered_by_created_at(self):
        self.assertEqual(order_column_for('logs'), 'created_at')

    def test_domain_tables_ordered_by_aangemaakt_op(self):
        self.assertEqual(order_column_for('klanten'), 'aangemaakt_op')
        self.assertEqual(order_column_for('regio'), 'aangemaakt_op')

    @override_settings(CRUD_DEFAULT_ORDER_COLUMN='inserted_at')
    def test_unregistered_table_uses_default_setting(self):
        self.assertEqual(order_column_for('onbekend'), 'inserted_at')


class VariantTest(SimpleTestCase):
    """Test variant derivation from field descriptors"""

    def test_relation_wins_over_kind(self):
        descriptor = lookup('klanten').get_field('regio_id')
        self.assertEqual(descriptor.variant, Variant.RELATION)

    def test_json_flag(self):
        self.assertEqual(lookup('logs').get_field('data').variant, Variant.JSON)

    def test_kinds(self):
        klanten = lookup('klanten')
        self.assertEqual(klanten.get_field('email').variant, Variant.TEXT)
        self.assertEqual(klanten.get_field('status').variant, Variant.ENUM)
        self.assertEqual(lookup('regio').get_field('actief').variant, Variant.BOOLEAN)
        self.assertEqual(lookup('gesprekken').get_field('datum').variant, Variant.DATE)
        self.assertEqual(lookup('rapporten').get_field('gegenereerd_op').variant, Variant.DATE)
        self.assertEqual(lookup('verkopers').get_field('commissie_percentage').variant, Variant.NUMBER)

    def test_search_fields_are_text_like(self):
        self.assertEqual(lookup('klanten').search_fields, ['naam', 'email', 'telefoon', 'adres'])
        self.assertNotIn('data', lookup('logs').search_fields)
        self.assertNotIn('user_id', lookup('logs').search_fields)

    def test_relation_fields(self):
        names = [descriptor.name for descriptor in lookup('gesprekken').relation_fields]
        self.assertEqual(names, ['klant_id', 'verkoper_id', 'campagne_id', 'regio_id'])
