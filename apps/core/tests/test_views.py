"""
Core Views Tests
================

Test Coverage:
1. Dashboard (login required, one card per table)
2. Diagnostics (connection failure, per-table status)
3. Navigation context processor

Run tests:
    python manage.py test apps.core.tests.test_views
"""

from unittest.mock import MagicMock, patch

from django.contrib.auth import get_user_model
from django.test import Client, RequestFactory, TestCase

from apps.accounts.session import AdminSession
from apps.core.context_processors import navigation
from apps.core.datastore import DataStoreError
from apps.core.exceptions import PersistenceError
from apps.core.schemas import all_schemas

User = get_user_model()


class DashboardViewTest(TestCase):
    """Test dashboard view"""

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(
            email='beheer@auria.nl',
            password='testpass123',
            full_name='Beheer Account',
        )

    def test_dashboard_requires_login(self):
        """
        Test: Anonymous request to the dashboard

        Expected: Redirect to login with next parameter
        """
        response = self.client.get('/dashboard/')

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, '/accounts/login/?next=/dashboard/')

    def test_dashboard_lists_every_table(self):
        self.client.login(email='beheer@auria.nl', password='testpass123')

        response = self.client.get('/dashboard/')

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'core/dashboard.html')
        self.assertEqual(len(response.context['schemas']), len(all_schemas()))
        self.assertContains(response, 'Welkom terug, beheer@auria.nl')
        self.assertContains(response, 'Auria Admin')


class DiagnosticsViewTest(TestCase):
    """Test diagnostics view"""

    def setUp(self):
        self.client = Client()
        User.objects.create_user(email='beheer@auria.nl', password='testpass123')
        self.client.login(email='beheer@auria.nl', password='testpass123')

    @patch('apps.core.views.get_gateway')
    @patch('apps.core.views.get_data_store')
    def test_connection_failure_skips_table_probes(self, mock_store, mock_gateway):
        mock_store.return_value.ping.side_effect = DataStoreError('Connection error - could not reach data store')

        response = self.client.get('/dashboard/diagnose/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['connection_error'], 'Connection error - could not reach data store')
        self.assertEqual(response.context['statuses'], [])
        mock_gateway.assert_not_called()

    @patch('apps.core.views.get_gateway')
    @patch('apps.core.views.get_data_store')
    def test_per_table_status(self, mock_store, mock_gateway):
        """
        Test: One table fails, the others work

        Expected: Row counts for working tables, error only for the failing one
        """
        def fetch_all(table, **kwargs):
            if table == 'logs':
                raise PersistenceError(table, 'fetch', 'permission denied for table logs')
            return [{'id': 1}, {'id': 2}]

        gateway = MagicMock()
        gateway.fetch_all.side_effect = fetch_all
        mock_gateway.return_value = gateway

        response = self.client.get('/dashboard/diagnose/')

        statuses = {status.table: status for status in response.context['statuses']}
        self.assertEqual(len(statuses), len(all_schemas()))
        self.assertTrue(statuses['klanten'].ok)
        self.assertEqual(statuses['klanten'].row_count, 2)
        self.assertFalse(statuses['logs'].ok)
        self.assertEqual(statuses['logs'].error, 'permission denied for table logs')
        self.assertContains(response, 'Verbinding geslaagd')


class NavigationContextProcessorTest(TestCase):
    """Test sidebar navigation items"""

    def setUp(self):
        self.factory = RequestFactory()

    def test_items_and_active_marker(self):
        request = self.factory.get('/crud/klanten/')
        request.admin_session = AdminSession()

        context = navigation(request)

        keys = [item.key for item in context['nav_items']]
        self.assertEqual(keys[0], 'dashboard')
        self.assertEqual(keys[-1], 'diagnostics')
        self.assertIn('klanten', keys)
        active = [item.key for item in context['nav_items'] if item.active]
        self.assertEqual(active, ['klanten'])
        self.assertIs(context['admin_session'], request.admin_session)

    def test_diagnostics_beats_dashboard_prefix(self):
        request = self.factory.get('/dashboard/diagnose/')

        context = navigation(request)

        active = [item.key for item in context['nav_items'] if item.active]
        self.assertEqual(active, ['diagnostics'])
        self.assertIsNone(context['admin_session'])
