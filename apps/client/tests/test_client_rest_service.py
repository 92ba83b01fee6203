"""Tests for ClientRestService workflows against the database."""

import uuid
from unittest.mock import patch

from django.test import override_settings

from apps.client.exceptions import ClientCodeCapacityExceeded, NotFoundError
from apps.client.models import Client, ClientContactLink, Contact
from apps.client.services.client_code_service import (
    ClientCodeRegistry,
    format_client_code,
)
from apps.client.services.client_rest_service import ClientRestService
from apps.testing import BaseTestCase
from apps.workflow.exceptions import AlreadyLoggedException
from apps.workflow.models import AppError


class CreateClientTests(BaseTestCase):
    def test_first_client_gets_100(self):
        client = ClientRestService.create_client({"name": "First National Bank"})
        self.assertEqual(client.client_code, "FNB100")
        self.assertEqual(client.name, "First National Bank")

    def test_same_prefix_gets_next_number(self):
        first = ClientRestService.create_client({"name": "Acme Corporation"})
        second = ClientRestService.create_client({"name": "Acme Co"})
        self.assertEqual(first.client_code, "ACA100")
        self.assertEqual(second.client_code, "ACA101")

    def test_name_is_stripped(self):
        client = ClientRestService.create_client({"name": "  Protea  "})
        self.assertEqual(client.name, "Protea")
        self.assertEqual(client.client_code, "PRO100")

    def test_blank_name_is_rejected(self):
        with self.assertRaises(ValueError) as ctx:
            ClientRestService.create_client({"name": "   "})
        self.assertIn("Name is required", str(ctx.exception))
        self.assertFalse(Client.objects.exists())

    def test_missing_name_is_rejected(self):
        with self.assertRaises(ValueError):
            ClientRestService.create_client({})

    def test_letterless_name_uses_fallback_prefix(self):
        client = ClientRestService.create_client({"name": "1234"})
        self.assertEqual(client.client_code, "AAA100")

    def test_released_code_is_reused(self):
        ClientRestService.create_client({"name": "Acme"})
        middle = ClientRestService.create_client({"name": "Acmeco"})
        ClientRestService.create_client({"name": "Acmetal"})

        ClientRestService.delete_client(middle.id)
        replacement = ClientRestService.create_client({"name": "Acmex"})

        self.assertEqual(middle.client_code, "ACM101")
        self.assertEqual(replacement.client_code, "ACM101")

    def test_lost_race_recomputes_code(self):
        self.make_client(name="Acme Rival", client_code="ACA100")

        # First read misses the rival's code, as if it was inserted concurrently
        with patch.object(
            ClientCodeRegistry,
            "codes_with_prefix",
            side_effect=[[], ["ACA100"]],
        ) as codes_with_prefix:
            with self.assertLogs("apps.client", level="WARNING") as logs:
                client = ClientRestService.create_client({"name": "Acme Corporation"})

        self.assertEqual(client.client_code, "ACA101")
        self.assertEqual(codes_with_prefix.call_count, 2)
        self.assertTrue(any("ACA100" in line for line in logs.output))

    @override_settings(CLIENT_CODE_MAX_ATTEMPTS=2)
    def test_gives_up_after_max_attempts(self):
        self.make_client(name="Acme Rival", client_code="ACA100")

        with patch.object(ClientCodeRegistry, "codes_with_prefix", return_value=[]):
            with self.assertRaises(AlreadyLoggedException) as ctx:
                ClientRestService.create_client({"name": "Acme Corporation"})

        self.assertIsInstance(ctx.exception.original, RuntimeError)
        app_error = AppError.objects.get(id=ctx.exception.app_error_id)
        self.assertEqual(app_error.data["operation"], "create_client")
        self.assertEqual(Client.objects.count(), 1)

    def test_full_prefix_raises_capacity_error(self):
        Client.objects.bulk_create(
            [
                Client(name=f"Zed {n}", client_code=format_client_code("ZED", n))
                for n in range(100, 1000)
            ]
        )

        with self.assertRaises(ClientCodeCapacityExceeded) as ctx:
            ClientRestService.create_client({"name": "Zed"})

        self.assertEqual(ctx.exception.prefix, "ZED")
        self.assertEqual(Client.objects.count(), 900)
        self.assertFalse(AppError.objects.exists())


class UpdateClientTests(BaseTestCase):
    def test_rename_keeps_code(self):
        client = ClientRestService.create_client({"name": "Acme Corporation"})

        updated = ClientRestService.update_client(
            client.id, {"name": "Zebra Holdings", "client_code": "ZZZ999"}
        )

        updated.refresh_from_db()
        self.assertEqual(updated.name, "Zebra Holdings")
        self.assertEqual(updated.client_code, "ACA100")

    def test_missing_name_keeps_current_name(self):
        client = self.make_client(name="Acme", client_code="ACM100")
        updated = ClientRestService.update_client(client.id, {})
        self.assertEqual(updated.name, "Acme")

    def test_blank_name_is_rejected(self):
        client = self.make_client()
        with self.assertRaises(ValueError):
            ClientRestService.update_client(client.id, {"name": ""})

    def test_unknown_client(self):
        with self.assertRaises(NotFoundError):
            ClientRestService.update_client(uuid.uuid4(), {"name": "Anything"})


class DeleteClientTests(BaseTestCase):
    def test_delete_removes_links_but_keeps_contacts(self):
        client = self.make_client()
        contact = self.make_contact()
        self.link(client, contact)

        released = ClientRestService.delete_client(client.id)

        self.assertEqual(released, "ACA100")
        self.assertFalse(Client.objects.filter(id=client.id).exists())
        self.assertFalse(ClientContactLink.objects.exists())
        self.assertTrue(Contact.objects.filter(id=contact.id).exists())

    def test_unknown_client(self):
        with self.assertRaises(NotFoundError):
            ClientRestService.delete_client(uuid.uuid4())


class ReadClientTests(BaseTestCase):
    def setUp(self):
        self.acme = self.make_client(name="Acme Corporation", client_code="ACA100")
        self.bank = self.make_client(name="First National Bank", client_code="FNB100")
        self.jane = self.make_contact(name="Jane", surname="Doe", email="jane@example.com")
        self.john = self.make_contact(
            name="John", surname="Adams", email="john@example.com"
        )
        self.link(self.acme, self.jane)

    def test_get_all_clients_is_ordered_with_counts(self):
        clients = ClientRestService.get_all_clients()

        self.assertEqual(
            [(c["client_code"], c["linked_contacts_count"]) for c in clients],
            [("ACA100", 1), ("FNB100", 0)],
        )

    def test_get_client_by_id_lists_linked_and_available_contacts(self):
        detail = ClientRestService.get_client_by_id(self.acme.id)

        self.assertEqual(detail["client_code"], "ACA100")
        self.assertEqual(detail["linked_contacts_count"], 1)
        self.assertEqual([c["email"] for c in detail["contacts"]], ["jane@example.com"])
        self.assertEqual(
            [c["full_name"] for c in detail["available_contacts"]], ["Adams John"]
        )

    def test_get_client_by_id_unknown(self):
        with self.assertRaises(NotFoundError):
            ClientRestService.get_client_by_id(uuid.uuid4())

    def test_search_by_name_substring(self):
        results = ClientRestService.search_clients("national")
        self.assertEqual([r["client_code"] for r in results], ["FNB100"])

    def test_search_by_code_prefix_is_case_insensitive(self):
        results = ClientRestService.search_clients("aca")
        self.assertEqual([r["client_code"] for r in results], ["ACA100"])

    def test_search_needs_two_characters(self):
        self.assertEqual(ClientRestService.search_clients("a"), [])
        self.assertEqual(ClientRestService.search_clients("  "), [])

    def test_search_respects_limit(self):
        self.make_client(name="Acme Two", client_code="ATA100")
        results = ClientRestService.search_clients("acme", limit=1)
        self.assertEqual(len(results), 1)
