"""Tests for ClientContactLinkService."""

import uuid

from apps.client.exceptions import DuplicateLinkError, NotFoundError
from apps.client.models import ClientContactLink
from apps.client.services.client_contact_link_service import ClientContactLinkService
from apps.testing import BaseTestCase


class ClientContactLinkServiceTests(BaseTestCase):
    def setUp(self):
        self.client_record = self.make_client()
        self.contact = self.make_contact()

    def test_link(self):
        link = ClientContactLinkService.link(self.client_record.id, self.contact.id)

        self.assertEqual(link.client, self.client_record)
        self.assertEqual(link.contact, self.contact)
        self.assertEqual(list(self.client_record.contacts.all()), [self.contact])
        self.assertEqual(list(self.contact.clients.all()), [self.client_record])

    def test_duplicate_link_from_client_side(self):
        self.link(self.client_record, self.contact)

        with self.assertRaisesMessage(
            DuplicateLinkError, "This contact is already linked to the client"
        ):
            ClientContactLinkService.link(self.client_record.id, self.contact.id)

    def test_duplicate_link_from_contact_side(self):
        self.link(self.client_record, self.contact)

        with self.assertRaisesMessage(
            DuplicateLinkError, "This client is already linked to the contact"
        ):
            ClientContactLinkService.link(
                self.client_record.id, self.contact.id, from_contact=True
            )

    def test_link_unknown_client(self):
        missing = uuid.uuid4()
        with self.assertRaisesMessage(
            NotFoundError, f"Client with id {missing} not found"
        ):
            ClientContactLinkService.link(missing, self.contact.id)

    def test_link_unknown_contact(self):
        with self.assertRaises(NotFoundError):
            ClientContactLinkService.link(self.client_record.id, uuid.uuid4())

    def test_unlink(self):
        self.link(self.client_record, self.contact)

        ClientContactLinkService.unlink(self.client_record.id, self.contact.id)

        self.assertFalse(ClientContactLink.objects.exists())

    def test_unlink_missing_link(self):
        with self.assertRaisesMessage(NotFoundError, "Link not found"):
            ClientContactLinkService.unlink(self.client_record.id, self.contact.id)
