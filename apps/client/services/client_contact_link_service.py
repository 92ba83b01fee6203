"""
Links between clients and contacts.

Both the client and the contact endpoints link and unlink through this
service, so duplicate and missing-link handling is the same from either side.
"""

import logging
from uuid import UUID

from django.db import IntegrityError, transaction

from apps.client.exceptions import DuplicateLinkError, NotFoundError
from apps.client.models import Client, ClientContactLink, Contact
from apps.client.services.client_rest_service import PASS_THROUGH_ERRORS
from apps.workflow.services.error_persistence import persist_and_raise

logger = logging.getLogger(__name__)


class ClientContactLinkService:
    """Creates and removes ClientContactLink rows."""

    @staticmethod
    def link(
        client_id: UUID, contact_id: UUID, *, from_contact: bool = False
    ) -> ClientContactLink:
        """
        Links a contact to a client.

        Args:
            client_id: Client UUID
            contact_id: Contact UUID
            from_contact: Word the duplicate error from the contact's side

        Raises:
            NotFoundError: If the client or the contact does not exist
            DuplicateLinkError: If they are already linked
        """
        duplicate_message = (
            "This client is already linked to the contact"
            if from_contact
            else "This contact is already linked to the client"
        )
        try:
            client = ClientContactLinkService._get(Client, client_id, "Client")
            contact = ClientContactLinkService._get(Contact, contact_id, "Contact")

            if ClientContactLink.objects.filter(client=client, contact=contact).exists():
                raise DuplicateLinkError(duplicate_message)

            try:
                with transaction.atomic():
                    link = ClientContactLink.objects.create(
                        client=client, contact=contact
                    )
            except IntegrityError:
                # A concurrent request created the same link first
                raise DuplicateLinkError(duplicate_message)

            logger.info(
                f"Contact {contact.id} linked to client {client.client_code}",
                extra={
                    "client_id": str(client.id),
                    "contact_id": str(contact.id),
                    "operation": "link_contact",
                },
            )
            return link

        except PASS_THROUGH_ERRORS:
            raise
        except Exception as exc:
            persist_and_raise(
                exc,
                client_id=client_id,
                contact_id=contact_id,
                additional_context={"operation": "link_contact"},
            )

    @staticmethod
    def unlink(client_id: UUID, contact_id: UUID) -> None:
        """
        Removes the link between a client and a contact.

        Raises:
            NotFoundError: If no such link exists
        """
        try:
            deleted, _ = ClientContactLink.objects.filter(
                client_id=client_id, contact_id=contact_id
            ).delete()
            if not deleted:
                raise NotFoundError("Link not found")

            logger.info(
                f"Contact {contact_id} unlinked from client {client_id}",
                extra={
                    "client_id": str(client_id),
                    "contact_id": str(contact_id),
                    "operation": "unlink_contact",
                },
            )

        except PASS_THROUGH_ERRORS:
            raise
        except Exception as exc:
            persist_and_raise(
                exc,
                client_id=client_id,
                contact_id=contact_id,
                additional_context={"operation": "unlink_contact"},
            )

    @staticmethod
    def _get(model, obj_id: UUID, label: str):
        try:
            return model.objects.get(id=obj_id)
        except model.DoesNotExist:
            raise NotFoundError(f"{label} with id {obj_id} not found")
