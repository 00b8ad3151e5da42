from io import StringIO
from uuid import uuid4

from django.core.management import call_command
from django.test import TestCase, Client, SimpleTestCase

from apps.companies.models import Company, Membership
from apps.core.i18n import TRANSLATIONS, normalize_language, translate
from apps.forklifts.models import Forklift


class TranslationTest(SimpleTestCase):
    def test_tables_share_keys(self):
        self.assertEqual(set(TRANSLATIONS['en']), set(TRANSLATIONS['sv']))

    def test_translate(self):
        self.assertEqual(translate("forklift.customer", "sv"), "Kund")
        self.assertEqual(translate("forklift.customer", "de"), "Customer")
        self.assertEqual(translate("no.such.key", "sv"), "no.such.key")

    def test_normalize_language(self):
        self.assertEqual(normalize_language("sv-SE"), "sv")
        self.assertEqual(normalize_language(None), "en")
        self.assertEqual(normalize_language("fr"), "en")


class I18nAPITest(TestCase):
    def test_table(self):
        response = Client().get("/api/i18n/sv")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["forklift.brand"], "Märke")

    def test_unknown_language(self):
        self.assertEqual(Client().get("/api/i18n/xx").status_code, 404)


class RequestLogMiddlewareTest(TestCase):
    def test_api_requests_are_logged(self):
        with self.assertLogs('apps.core.middleware', level='INFO') as logs:
            Client().get("/api/i18n/en")
        self.assertEqual(len(logs.records), 1)
        self.assertRegex(logs.output[0], r"GET /api/i18n/en 200 in \d+ms")

    def test_long_paths_keep_status_and_duration(self):
        path = f"/api/forklifts/{uuid4()}/documents/1000/0"
        with self.assertLogs('apps.core.middleware', level='INFO') as logs:
            Client().get(path)
        message = logs.records[0].getMessage()
        self.assertTrue(message.startswith(f"GET {path} "))
        self.assertRegex(message, r" 401 in \d+ms$")


class SeedCommandTest(TestCase):
    def test_seed_is_repeatable(self):
        call_command('seed', stdout=StringIO())
        call_command('seed', stdout=StringIO())

        company = Company.objects.get(name="Demo Truck Service")
        self.assertEqual(Membership.objects.filter(company=company).count(), 2)
        self.assertEqual(Forklift.objects.filter(company=company).count(), 4)
        self.assertEqual(
            set(Forklift.objects.values_list('customer', flat=True)),
            {"Acme Logistics", "Nordic Foods"},
        )
