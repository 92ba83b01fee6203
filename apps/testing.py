"""
Shared test utilities and base classes for the contact_manager project.

Test classes that need database models should inherit from BaseTestCase or
BaseAPITestCase so they can use the record factories below.
"""

from django.test import TestCase
from rest_framework.test import APITestCase

from apps.client.models import Client, ClientContactLink, Contact


class ClientContactFactoryMixin:
    """
    Factories for the records most tests need.

    Clients are created with an explicit code so tests control exactly which
    codes are taken; use ClientRestService.create_client to exercise code
    generation itself.
    """

    def make_client(self, name="Acme Corporation", client_code="ACA100"):
        return Client.objects.create(name=name, client_code=client_code)

    def make_contact(self, name="Jane", surname="Doe", email="jane@example.com"):
        return Contact.objects.create(name=name, surname=surname, email=email)

    def link(self, client, contact):
        return ClientContactLink.objects.create(client=client, contact=contact)


class BaseTestCase(ClientContactFactoryMixin, TestCase):
    """Base test case for service and model tests."""


class BaseAPITestCase(ClientContactFactoryMixin, APITestCase):
    """
    Base API test case.

    Use this for DRF API tests that need database access.
    """
