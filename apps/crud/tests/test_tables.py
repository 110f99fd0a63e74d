"""
List Renderer Tests
===================

Test Coverage:
1. format_cell per value variant
2. build_table structure

Run tests:
    python manage.py test apps.crud.tests.test_tables
"""

from datetime import date, datetime, timezone as dt_timezone

from django.test import SimpleTestCase
from django.utils import formats, timezone, translation

from apps.core.schemas import FieldDescriptor, FieldKind, Option, lookup
from apps.crud.tables import Cell, build_table, format_cell


class FormatCellTest(SimpleTestCase):
    """Test format_cell"""

    def setUp(self):
        self.gesprekken = lookup('gesprekken')
        self.klanten = lookup('klanten')

    def test_relation_label(self):
        """
        Test: klant_id 42 with related options {42: "Jan"}

        Expected: the cell shows "Jan"
        """
        cell = format_cell(42, self.gesprekken.get_field('klant_id'), [Option(42, 'Jan')])
        self.assertEqual(cell.text, 'Jan')

    def test_relation_without_match_shows_raw_id(self):
        cell = format_cell(43, self.gesprekken.get_field('klant_id'), [Option(42, 'Jan')])
        self.assertEqual(cell.text, '43')

    def test_none_is_dash(self):
        self.assertEqual(format_cell(None, self.klanten.get_field('telefoon')), Cell('-', style='empty'))

    def test_boolean(self):
        actief = lookup('regio').get_field('actief')
        self.assertEqual(format_cell(True, actief).text, 'Ja')
        self.assertEqual(format_cell(False, actief).text, 'Nee')

    def test_static_option_label(self):
        status = self.klanten.get_field('status')
        self.assertEqual(format_cell('prospect', status).text, 'Prospect')
        self.assertEqual(format_cell('onbekend', status).text, 'onbekend')

    def test_json_value(self):
        """
        Test: dict value in the logs data column

        Expected: summary with key count and pretty-printed detail
        """
        cell = format_cell({'sid': 'SM1', 'count': 2}, lookup('logs').get_field('data'))

        self.assertEqual(cell.style, 'json')
        self.assertEqual(cell.text, 'JSON Data (2 keys)')
        self.assertIn('"sid": "SM1"', cell.detail)

    def test_textarea_is_multiline(self):
        cell = format_cell('regel 1\nregel 2', lookup('call_scripts').get_field('script'))
        self.assertEqual(cell.style, 'multiline')
        self.assertEqual(cell.text, 'regel 1\nregel 2')

    def test_date_uses_short_date_format(self):
        with translation.override('nl'):
            cell = format_cell('2024-03-01', self.gesprekken.get_field('datum'))
            expected = formats.date_format(date(2024, 3, 1), 'SHORT_DATE_FORMAT')
        self.assertEqual(cell.text, expected)

    def test_datetime_shown_in_local_time(self):
        descriptor = FieldDescriptor('aangemaakt_op', 'Aangemaakt op', FieldKind.DATETIME)
        with translation.override('nl'):
            cell = format_cell('2024-03-01T10:00:00+00:00', descriptor)
            local = timezone.localtime(datetime(2024, 3, 1, 10, 0, tzinfo=dt_timezone.utc))
            expected = formats.date_format(local, 'SHORT_DATETIME_FORMAT')
        self.assertEqual(cell.text, expected)

    def test_unparsable_date_shows_raw_value(self):
        cell = format_cell('binnenkort', self.gesprekken.get_field('datum'))
        self.assertEqual(cell.text, 'binnenkort')

    def test_number(self):
        cell = format_cell(12.5, lookup('verkopers').get_field('commissie_percentage'))
        self.assertEqual(cell.text, '12.5')


class BuildTableTest(SimpleTestCase):
    """Test build_table"""

    def test_columns_rows_and_ids(self):
        schema = lookup('gesprekken')
        fields = [schema.get_field('id'), schema.get_field('klant_id'), schema.get_field('notities')]
        rows = [
            {'id': 1, 'klant_id': 42, 'notities': None},
            {'id': 2, 'klant_id': 7, 'notities': 'Terugbellen'},
        ]

        table = build_table(rows, fields, {'klant_id': [Option(42, 'Jan'), Option(7, 'Piet')]})

        self.assertEqual([column.label for column in table.columns], ['ID', 'Klant', 'Notities'])
        self.assertEqual([row.id for row in table.rows], [1, 2])
        self.assertEqual([cell.text for cell in table.rows[0].cells], ['1', 'Jan', '-'])
        self.assertEqual(table.rows[1].cells[1].text, 'Piet')
        self.assertFalse(table.is_empty)

    def test_empty(self):
        table = build_table([], lookup('regio').fields)
        self.assertTrue(table.is_empty)
        self.assertEqual(len(table.columns), len(lookup('regio').fields))
