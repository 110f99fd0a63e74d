"""
CRUD Views Tests
================

Test Coverage:
1. Login requirement and unknown tables
2. List view (rows, load errors)
3. Create / edit flows (validation, persistence errors, single refresh)
4. Detail view
5. Delete confirmation flow

Run tests:
    python manage.py test apps.crud.tests.test_views
"""

from unittest.mock import MagicMock, patch

from django.contrib.auth import get_user_model
from django.test import Client, TestCase

from apps.core.exceptions import PersistenceError
from apps.core.schemas import Option

User = get_user_model()

KLANT = {
    'id': 7,
    'naam': 'Jan Jansen',
    'email': 'jan@example.nl',
    'telefoon': None,
    'adres': None,
    'regio_id': 3,
    'status': 'actief',
    'aangemaakt_op': '2024-01-01T10:00:00+00:00',
    'bijgewerkt_op': None,
}


class CrudViewTestCase(TestCase):
    """Logged in client with a mocked gateway"""

    def setUp(self):
        self.client = Client()
        User.objects.create_user(email='beheer@auria.nl', password='testpass123')
        self.client.login(email='beheer@auria.nl', password='testpass123')

        self.gateway = MagicMock()
        self.gateway.fetch_all.return_value = [KLANT]
        self.gateway.fetch_one.return_value = KLANT
        self.gateway.fetch_related.return_value = [Option(3, 'Noord')]

        patcher = patch('apps.crud.views.get_gateway', return_value=self.gateway)
        patcher.start()
        self.addCleanup(patcher.stop)

    def messages_of(self, response):
        return [str(message) for message in response.context['messages']]


class AccessTest(TestCase):

    def test_list_requires_login(self):
        response = Client().get('/crud/klanten/')

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, '/accounts/login/?next=/crud/klanten/')


class ListViewTest(CrudViewTestCase):
    """Test list view"""

    def test_unknown_table(self):
        response = self.client.get('/crud/bestaat_niet/')

        self.assertEqual(response.status_code, 404)
        self.assertTemplateUsed(response, 'crud/schema_missing.html')
        self.assertContains(response, 'Tabel schema niet gevonden voor: bestaat_niet', status_code=404)

    def test_rows_with_relation_labels(self):
        response = self.client.get('/crud/klanten/')

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'crud/list.html')
        self.assertEqual(response.context['total_rows'], 1)
        self.assertContains(response, 'Jan Jansen')
        self.assertContains(response, 'Noord')

    def test_filters_reach_gateway(self):
        self.client.get('/crud/klanten/', {'q': 'jan', 'status': 'actief'})

        kwargs = self.gateway.fetch_all.call_args.kwargs
        self.assertEqual(kwargs['filters'], {'status': 'actief'})
        self.assertEqual(kwargs['search'], 'jan')

    def test_empty_table(self):
        self.gateway.fetch_all.return_value = []

        response = self.client.get('/crud/klanten/')

        self.assertContains(response, 'Geen data beschikbaar')

    def test_load_error_banner(self):
        """
        Test: The store fails while loading rows

        Expected: Page still renders with the error banner and no rows
        """
        self.gateway.fetch_all.side_effect = PersistenceError('klanten', 'fetch', 'connection refused')

        response = self.client.get('/crud/klanten/')

        self.assertEqual(response.status_code, 200)
        self.assertIn('Fout bij laden van data: connection refused', self.messages_of(response))
        self.assertTrue(response.context['table'].is_empty)


class CreateViewTest(CrudViewTestCase):
    """Test create view"""

    def test_form_renders(self):
        response = self.client.get('/crud/klanten/nieuw/')

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'crud/form.html')
        self.assertContains(response, 'Klant toevoegen')
        self.assertContains(response, 'Selecteer Regio')

    def test_valid_post_inserts_and_refreshes_once(self):
        """
        Test: Valid klant submitted

        Expected: One insert, redirect to the list, exactly one list refresh
        """
        response = self.client.post(
            '/crud/klanten/nieuw/',
            {'naam': 'Piet', 'email': 'piet@example.nl', 'regio_id': '3', 'status': 'prospect'},
            follow=True,
        )

        self.assertRedirects(response, '/crud/klanten/')
        self.gateway.insert.assert_called_once()
        table, values = self.gateway.insert.call_args.args
        self.assertEqual(table, 'klanten')
        self.assertEqual(values['regio_id'], 3)
        self.assertEqual(self.gateway.fetch_all.call_count, 1)
        self.assertIn('Klant toegevoegd', self.messages_of(response))

    def test_invalid_post_keeps_form_open(self):
        response = self.client.post('/crud/klanten/nieuw/', {'naam': '', 'email': 'not-an-email'})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Naam is verplicht')
        self.assertContains(response, 'Ongeldig email adres')
        self.gateway.insert.assert_not_called()
        self.gateway.fetch_all.assert_not_called()

    def test_persistence_error_banner(self):
        self.gateway.insert.side_effect = PersistenceError('klanten', 'insert', 'duplicate key value')

        response = self.client.post('/crud/klanten/nieuw/', {'naam': 'Piet', 'email': 'piet@example.nl'})

        self.assertEqual(response.status_code, 200)
        self.assertIn('Fout bij opslaan van data: duplicate key value', self.messages_of(response))
        self.gateway.fetch_all.assert_not_called()


class EditViewTest(CrudViewTestCase):
    """Test edit view"""

    def test_form_prefilled(self):
        response = self.client.get('/crud/klanten/7/bewerken/')

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'value="Jan Jansen"')
        self.assertContains(response, 'Bijwerken')
        self.gateway.fetch_one.assert_called_once_with('klanten', '7')

    def test_valid_post_updates_and_refreshes_once(self):
        response = self.client.post(
            '/crud/klanten/7/bewerken/',
            {'naam': 'Jan de Vries', 'email': 'jan@example.nl', 'regio_id': '3', 'status': 'actief'},
            follow=True,
        )

        self.assertRedirects(response, '/crud/klanten/')
        table, row_id, values = self.gateway.update.call_args.args
        self.assertEqual((table, row_id), ('klanten', '7'))
        self.assertEqual(values['naam'], 'Jan de Vries')
        self.assertEqual(self.gateway.fetch_all.call_count, 1)
        self.assertIn('Klant bijgewerkt', self.messages_of(response))

    def test_missing_row(self):
        self.gateway.fetch_one.return_value = None

        response = self.client.get('/crud/klanten/99/bewerken/', follow=True)

        self.assertRedirects(response, '/crud/klanten/')
        self.assertIn('Klant met id 99 niet gevonden', self.messages_of(response))


class DetailViewTest(CrudViewTestCase):

    def test_read_only_form(self):
        response = self.client.get('/crud/klanten/7/')

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'crud/detail.html')
        self.assertTrue(all(field.disabled for field in response.context['form'].fields.values()))
        self.assertContains(response, 'href="/crud/klanten/7/bewerken/"')
        self.assertContains(response, 'href="/crud/klanten/7/verwijderen/"')


class DeleteViewTest(CrudViewTestCase):
    """Test delete confirmation flow"""

    def test_get_shows_confirmation(self):
        response = self.client.get('/crud/klanten/7/verwijderen/')

        self.assertContains(response, 'Weet je zeker dat je dit item wilt verwijderen?')
        self.gateway.delete.assert_not_called()

    def test_unconfirmed_post_does_not_delete(self):
        response = self.client.post('/crud/klanten/7/verwijderen/')

        self.assertRedirects(response, '/crud/klanten/7/verwijderen/', fetch_redirect_response=False)
        self.gateway.delete.assert_not_called()

    def test_confirmed_post_deletes(self):
        response = self.client.post('/crud/klanten/7/verwijderen/', {'confirmed': 'yes'}, follow=True)

        self.assertRedirects(response, '/crud/klanten/')
        self.gateway.delete.assert_called_once_with('klanten', '7')
        self.assertIn('Klant verwijderd', self.messages_of(response))

    def test_delete_error_banner(self):
        self.gateway.delete.side_effect = PersistenceError('klanten', 'delete', 'foreign key violation')

        response = self.client.post('/crud/klanten/7/verwijderen/', {'confirmed': 'yes'}, follow=True)

        self.assertIn('Fout bij verwijderen van data: foreign key violation', self.messages_of(response))
