"""
Client REST Service Layer

Following SRP (Single Responsibility Principle) and clean code guidelines.
All business logic for Client REST operations should be implemented here.
"""

import logging
from typing import Any, Dict, List
from uuid import UUID

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from apps.client.exceptions import ClientCodeCapacityExceeded, NotFoundError
from apps.client.forms import ClientForm
from apps.client.models import Client, Contact
from apps.client.services.client_code_service import (
    ClientCodeRegistry,
    generate_client_code,
)
from apps.workflow.exceptions import AlreadyLoggedException
from apps.workflow.services.error_persistence import persist_and_raise

logger = logging.getLogger(__name__)

# Business failures surfaced to the caller as-is; never persisted as AppError.
PASS_THROUGH_ERRORS = (AlreadyLoggedException, ValueError, ClientCodeCapacityExceeded)


class ClientRestService:
    """
    Service layer for Client REST operations.
    Implements all business rules related to Client manipulation via REST API.
    """

    @staticmethod
    def get_all_clients() -> List[Dict[str, Any]]:
        """
        Retrieves all clients ordered by name with their linked contact counts.

        Returns:
            List of client summary dictionaries
        """
        try:
            clients = Client.objects.annotate(
                linked_contacts=Count("contact_links")
            ).order_by("name")
            return [ClientRestService._format_client_summary(c) for c in clients]
        except PASS_THROUGH_ERRORS:
            raise
        except Exception as exc:
            persist_and_raise(exc)

    @staticmethod
    def search_clients(query: str, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Searches clients by name substring or client code prefix.

        Args:
            query: Search query (minimum 2 characters)
            limit: Maximum results to return (capped at 50)

        Returns:
            List of client summary dictionaries
        """
        try:
            # Guard clause - validate query length
            if not query or len(query.strip()) < 2:
                return []

            query = query.strip()
            limit = max(1, min(limit, 50))

            clients = (
                Client.objects.filter(
                    Q(name__icontains=query)
                    | Q(client_code__startswith=query.upper())
                )
                .annotate(linked_contacts=Count("contact_links"))
                .order_by("name")[:limit]
            )
            return [ClientRestService._format_client_summary(c) for c in clients]

        except PASS_THROUGH_ERRORS:
            raise
        except Exception as exc:
            persist_and_raise(exc, additional_context={"query": query, "limit": limit})

    @staticmethod
    def get_client_by_id(client_id: UUID) -> Dict[str, Any]:
        """
        Retrieves a specific client by ID with linked and linkable contacts.

        Raises:
            NotFoundError: If client not found
        """
        try:
            client = ClientRestService._get_client(client_id)
            return ClientRestService._format_client_detail(client)
        except PASS_THROUGH_ERRORS:
            raise
        except Exception as exc:
            persist_and_raise(
                exc,
                client_id=client_id,
                additional_context={"operation": "get_client_by_id"},
            )

    @staticmethod
    def create_client(data: Dict[str, Any]) -> Client:
        """
        Creates a new client with a freshly generated client code.

        Args:
            data: Client creation data

        Returns:
            Created Client instance

        Raises:
            ValueError: If validation fails
            ClientCodeCapacityExceeded: If the name's prefix has no free code
        """
        try:
            form = ClientForm(data)
            if not form.is_valid():
                raise ValueError(ClientRestService._form_error_message(form))

            return ClientRestService.save_with_generated_code(
                Client(name=form.cleaned_data["name"])
            )

        except PASS_THROUGH_ERRORS:
            raise
        except Exception as exc:
            persist_and_raise(
                exc,
                additional_context={
                    "operation": "create_client",
                    "payload_keys": list(data.keys()),
                },
            )

    @staticmethod
    def save_with_generated_code(client: Client) -> Client:
        """
        Assigns a client code to an unsaved client and inserts it.

        The code is computed from the current registry and then inserted. If
        the insert loses a race on the client_code unique constraint, the code
        is recomputed against the updated registry and the insert retried, up
        to ``CLIENT_CODE_MAX_ATTEMPTS`` times. Used by the REST create
        workflow and by the admin.

        Raises:
            ClientCodeCapacityExceeded: If the name's prefix has no free code
            RuntimeError: If every attempt lost the race
        """
        registry = ClientCodeRegistry()
        max_attempts = settings.CLIENT_CODE_MAX_ATTEMPTS

        for attempt in range(1, max_attempts + 1):
            client.client_code = generate_client_code(client.name, registry)
            try:
                with transaction.atomic():
                    client.save(force_insert=True)
            except IntegrityError:
                # Only a collision on the code is recoverable
                if not Client.objects.filter(client_code=client.client_code).exists():
                    raise
                logger.warning(
                    "Client code %s was taken by a concurrent request "
                    "(attempt %d of %d), recomputing",
                    client.client_code,
                    attempt,
                    max_attempts,
                )
                continue

            logger.info(
                f"Client {client.id} created with code {client.client_code}",
                extra={
                    "client_id": str(client.id),
                    "client_name": client.name,
                    "client_code": client.client_code,
                    "attempt": attempt,
                    "operation": "create_client",
                },
            )
            return client

        raise RuntimeError(
            f"Could not assign a unique client code to '{client.name}' "
            f"after {max_attempts} attempts"
        )

    @staticmethod
    def update_client(client_id: UUID, data: Dict[str, Any]) -> Client:
        """
        Renames an existing client. The client code never changes.

        Args:
            client_id: Client UUID
            data: Updated client data; only ``name`` is honoured

        Returns:
            Updated Client instance

        Raises:
            NotFoundError: If client not found
            ValueError: If validation fails
        """
        try:
            client = ClientRestService._get_client(client_id)
            original_code = client.client_code

            form = ClientForm({"name": data.get("name", client.name)}, instance=client)
            if not form.is_valid():
                raise ValueError(ClientRestService._form_error_message(form))

            with transaction.atomic():
                client = form.save()

            logger.info(
                f"Client {client.id} renamed",
                extra={
                    "client_id": str(client.id),
                    "client_name": client.name,
                    "client_code": original_code,
                    "operation": "update_client",
                },
            )
            return client

        except PASS_THROUGH_ERRORS:
            raise
        except Exception as exc:
            persist_and_raise(
                exc,
                client_id=client_id,
                additional_context={
                    "operation": "update_client",
                    "payload_keys": list(data.keys()),
                },
            )

    @staticmethod
    def delete_client(client_id: UUID) -> str:
        """
        Deletes a client and its contact links. Contacts are kept.

        Returns:
            The client code that was released

        Raises:
            NotFoundError: If client not found
        """
        try:
            client = ClientRestService._get_client(client_id)
            client_code = client.client_code
            with transaction.atomic():
                client.delete()

            logger.info(
                f"Client {client_id} deleted, code {client_code} released",
                extra={
                    "client_id": str(client_id),
                    "client_code": client_code,
                    "operation": "delete_client",
                },
            )
            return client_code

        except PASS_THROUGH_ERRORS:
            raise
        except Exception as exc:
            persist_and_raise(
                exc,
                client_id=client_id,
                additional_context={"operation": "delete_client"},
            )

    @staticmethod
    def _get_client(client_id: UUID) -> Client:
        try:
            return Client.objects.get(id=client_id)
        except Client.DoesNotExist:
            raise NotFoundError(f"Client with id {client_id} not found")

    @staticmethod
    def _form_error_message(form) -> str:
        error_messages = []
        for field, errors in form.errors.items():
            error_messages.extend([f"{field}: {error}" for error in errors])
        return "; ".join(error_messages)

    @staticmethod
    def _format_client_summary(client: Client) -> Dict[str, Any]:
        """
        Formats a single client summary for list/search responses.
        """
        return {
            "id": str(client.id),
            "name": client.name,
            "client_code": client.client_code,
            "linked_contacts_count": client.linked_contacts_count,
        }

    @staticmethod
    def _format_contact(contact: Contact) -> Dict[str, Any]:
        return {
            "id": str(contact.id),
            "name": contact.name,
            "surname": contact.surname,
            "full_name": contact.full_name,
            "email": contact.email,
        }

    @staticmethod
    def _format_client_detail(client: Client) -> Dict[str, Any]:
        """
        Formats complete client details for API response.
        """
        linked = Contact.objects.filter(client_links__client=client).order_by(
            "surname", "name"
        )
        available = Contact.objects.exclude(client_links__client=client).order_by(
            "surname", "name"
        )
        contacts = [ClientRestService._format_contact(c) for c in linked]

        return {
            "id": str(client.id),
            "name": client.name,
            "client_code": client.client_code,
            "linked_contacts_count": len(contacts),
            "contacts": contacts,
            "available_contacts": [
                ClientRestService._format_contact(c) for c in available
            ],
            "created_at": client.created_at,
            "updated_at": client.updated_at,
        }
