from django.core.management.base import BaseCommand, CommandError

from apps.core.datastore import DataStoreError, get_data_store
from apps.core.inspector import generate_schema_stub, inspect_table


class Command(BaseCommand):
    help = 'Show the columns of a remote table and print a schema stub for it'

    def add_arguments(self, parser):
        parser.add_argument('table', help='Remote table name')
        parser.add_argument(
            '--stub-only',
            action='store_true',
            help='Only print the generated TableSchema entry',
        )

    def handle(self, *args, **options):
        table = options['table']
        try:
            columns = inspect_table(get_data_store(), table)
        except DataStoreError as e:
            raise CommandError(f'Kan tabel {table} niet inspecteren: {e}')

        if not options['stub_only']:
            for column in columns:
                nullable = 'NULL' if column.is_nullable else 'NOT NULL'
                self.stdout.write(
                    f'{column.name:<24} {column.data_type:<28} {nullable:<9} -> {column.suggested_kind.value}'
                )
            self.stdout.write('')

        self.stdout.write(generate_schema_stub(table, columns))
        self.stdout.write(self.style.SUCCESS(f'{len(columns)} kolommen gevonden in {table}'))
