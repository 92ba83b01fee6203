"""API tests for the contact viewset and its link actions."""

import uuid
from unittest.mock import patch

from rest_framework import status

from apps.client.models import ClientContactLink, Contact
from apps.client.serializers import ContactSerializer
from apps.testing import BaseAPITestCase

CONTACTS_URL = "/clients/rest/contacts/"


class ContactCrudApiTests(BaseAPITestCase):
    def test_create(self):
        response = self.client.post(
            CONTACTS_URL,
            {"name": "Jane", "surname": "Doe", "email": "jane@example.com"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertEqual(body["full_name"], "Doe Jane")
        self.assertEqual(body["linked_clients_count"], 0)

    def test_create_requires_fields(self):
        response = self.client.post(
            CONTACTS_URL, {"name": "", "surname": "", "email": ""}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.json(),
            {
                "name": ["Name is required"],
                "surname": ["Surname is required"],
                "email": ["Email is required"],
            },
        )

    def test_create_rejects_invalid_email(self):
        response = self.client.post(
            CONTACTS_URL,
            {"name": "Jane", "surname": "Doe", "email": "not-an-email"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["email"], ["Invalid email format"])

    def test_email_is_unique_ignoring_case(self):
        self.make_contact(email="jane@example.com")

        response = self.client.post(
            CONTACTS_URL,
            {"name": "Janet", "surname": "Doe", "email": "JANE@Example.com"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["email"], ["Email already exists"])

    def test_concurrent_duplicate_email_is_a_validation_error(self):
        self.make_contact(email="jane@example.com")

        # Stands in for a request whose uniqueness check ran before the
        # other contact was committed
        with patch.object(
            ContactSerializer, "validate_email", lambda self, value: value
        ):
            response = self.client.post(
                CONTACTS_URL,
                {"name": "Janet", "surname": "Doe", "email": "JANE@example.com"},
                format="json",
            )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {"email": ["Email already exists"]})
        self.assertEqual(Contact.objects.count(), 1)

    def test_update_may_keep_own_email(self):
        contact = self.make_contact()

        response = self.client.put(
            f"{CONTACTS_URL}{contact.id}/",
            {"name": "Janet", "surname": "Doe", "email": "jane@example.com"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        contact.refresh_from_db()
        self.assertEqual(contact.name, "Janet")

    def test_list_is_ordered_with_counts(self):
        acme = self.make_client()
        jane = self.make_contact(name="Jane", surname="Doe", email="jane@example.com")
        self.make_contact(name="John", surname="Adams", email="john@example.com")
        self.link(acme, jane)

        response = self.client.get(CONTACTS_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [(c["full_name"], c["linked_clients_count"]) for c in response.json()],
            [("Adams John", 0), ("Doe Jane", 1)],
        )

    def test_list_filtered_by_client(self):
        acme = self.make_client()
        jane = self.make_contact()
        self.make_contact(name="John", surname="Adams", email="john@example.com")
        self.link(acme, jane)

        response = self.client.get(CONTACTS_URL, {"client_id": str(acme.id)})

        self.assertEqual([c["id"] for c in response.json()], [str(jane.id)])

    def test_retrieve_lists_linked_and_available_clients(self):
        acme = self.make_client(name="Acme Corporation", client_code="ACA100")
        bank = self.make_client(name="First National Bank", client_code="FNB100")
        jane = self.make_contact()
        self.link(acme, jane)

        response = self.client.get(f"{CONTACTS_URL}{jane.id}/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["linked_clients_count"], 1)
        self.assertEqual([c["client_code"] for c in body["clients"]], ["ACA100"])
        self.assertEqual(
            [c["id"] for c in body["available_clients"]], [str(bank.id)]
        )

    def test_delete_removes_links_but_keeps_clients(self):
        acme = self.make_client()
        jane = self.make_contact()
        self.link(acme, jane)

        response = self.client.delete(f"{CONTACTS_URL}{jane.id}/")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Contact.objects.exists())
        self.assertFalse(ClientContactLink.objects.exists())
        acme.refresh_from_db()


class ContactLinkActionApiTests(BaseAPITestCase):
    def setUp(self):
        self.acme = self.make_client()
        self.jane = self.make_contact()
        self.link_url = f"{CONTACTS_URL}{self.jane.id}/link-client/"
        self.unlink_url = f"{CONTACTS_URL}{self.jane.id}/unlink-client/"

    def test_link_client(self):
        response = self.client.post(
            self.link_url, {"client_id": str(self.acme.id)}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(
            response.json(),
            {
                "success": True,
                "message": "Client linked successfully",
                "client_id": str(self.acme.id),
                "contact_id": str(self.jane.id),
            },
        )

    def test_link_client_twice_conflicts(self):
        self.link(self.acme, self.jane)

        response = self.client.post(
            self.link_url, {"client_id": str(self.acme.id)}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(
            response.json(),
            {"success": False, "error": "This client is already linked to the contact"},
        )

    def test_link_unknown_client(self):
        response = self.client.post(
            self.link_url, {"client_id": str(uuid.uuid4())}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_link_unknown_contact(self):
        response = self.client.post(
            f"{CONTACTS_URL}{uuid.uuid4()}/link-client/",
            {"client_id": str(self.acme.id)},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_link_requires_client_id(self):
        response = self.client.post(self.link_url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unlink_client(self):
        self.link(self.acme, self.jane)

        response = self.client.post(
            self.unlink_url, {"client_id": str(self.acme.id)}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(ClientContactLink.objects.exists())

    def test_unlink_missing_link(self):
        response = self.client.post(
            self.unlink_url, {"client_id": str(self.acme.id)}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["error"], "Link not found")
