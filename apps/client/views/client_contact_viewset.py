"""
Contact ViewSet

ViewSet for Contact CRUD operations using DRF's ModelViewSet.
Provides list, create, retrieve, update, partial_update, and destroy actions,
plus link/unlink actions for attaching the contact to clients.
"""

from django.db import IntegrityError, transaction
from django.db.models import Count
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.client.models import Contact
from apps.client.serializers import (
    ClientContactLinkResponseSerializer,
    ClientErrorResponseSerializer,
    ContactClientLinkRequestSerializer,
    ContactDetailSerializer,
    ContactSerializer,
)
from apps.client.services.client_contact_link_service import ClientContactLinkService


class ContactViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Contact CRUD operations.

    Endpoints:
    - GET    /clients/rest/contacts/                      - list all contacts
    - POST   /clients/rest/contacts/                      - create contact
    - GET    /clients/rest/contacts/<id>/                 - retrieve contact with linked clients
    - PUT    /clients/rest/contacts/<id>/                 - full update
    - PATCH  /clients/rest/contacts/<id>/                 - partial update
    - DELETE /clients/rest/contacts/<id>/                 - delete contact and its links
    - POST   /clients/rest/contacts/<id>/link-client/     - link a client
    - POST   /clients/rest/contacts/<id>/unlink-client/   - unlink a client

    Query Parameters:
    - client_id: Filter contacts linked to a client UUID
    """

    queryset = Contact.objects.all()
    serializer_class = ContactSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="client_id",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                description="Filter contacts linked to a client UUID",
                required=False,
            ),
        ]
    )
    def list(self, request, *args, **kwargs):
        """List all contacts, optionally filtered by client_id."""
        return super().list(request, *args, **kwargs)

    def get_queryset(self):
        queryset = Contact.objects.annotate(linked_clients=Count("client_links"))
        client_id = self.request.query_params.get("client_id")
        if client_id:
            queryset = queryset.filter(client_links__client_id=client_id)
        return queryset.order_by("surname", "name")

    def get_serializer_class(self):
        if self.action == "retrieve":
            return ContactDetailSerializer
        if self.action in ("link_client", "unlink_client"):
            return ContactClientLinkRequestSerializer
        return ContactSerializer

    def perform_create(self, serializer):
        self._save_contact(serializer)

    def perform_update(self, serializer):
        self._save_contact(serializer)

    def _save_contact(self, serializer):
        # validate_email cannot see a concurrent insert of the same address;
        # the case-insensitive unique constraint rejects the loser here.
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError:
            raise serializers.ValidationError({"email": ["Email already exists"]})

    @extend_schema(
        request=ContactClientLinkRequestSerializer,
        responses={
            201: ClientContactLinkResponseSerializer,
            400: ClientErrorResponseSerializer,
            404: ClientErrorResponseSerializer,
            409: ClientErrorResponseSerializer,
        },
    )
    @action(detail=True, methods=["post"], url_path="link-client")
    def link_client(self, request, pk=None):
        """Link a client to this contact."""
        contact = self.get_object()
        input_serializer = ContactClientLinkRequestSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        client_id = input_serializer.validated_data["client_id"]

        # NotFoundError and DuplicateLinkError are mapped by the exception handler
        ClientContactLinkService.link(client_id, contact.id, from_contact=True)

        return self._link_response(
            "Client linked successfully", client_id, contact, status.HTTP_201_CREATED
        )

    @extend_schema(
        request=ContactClientLinkRequestSerializer,
        responses={
            200: ClientContactLinkResponseSerializer,
            400: ClientErrorResponseSerializer,
            404: ClientErrorResponseSerializer,
        },
    )
    @action(detail=True, methods=["post"], url_path="unlink-client")
    def unlink_client(self, request, pk=None):
        """Remove the link between a client and this contact."""
        contact = self.get_object()
        input_serializer = ContactClientLinkRequestSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        client_id = input_serializer.validated_data["client_id"]

        ClientContactLinkService.unlink(client_id, contact.id)

        return self._link_response(
            "Client unlinked successfully", client_id, contact, status.HTTP_200_OK
        )

    def _link_response(self, message, client_id, contact, status_code):
        serializer = ClientContactLinkResponseSerializer(
            data={
                "success": True,
                "message": message,
                "client_id": str(client_id),
                "contact_id": str(contact.id),
            }
        )
        serializer.is_valid(raise_exception=True)
        return Response(serializer.data, status=status_code)
