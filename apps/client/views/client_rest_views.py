"""
Client REST Views

REST views for the Client module following clean code principles:
- SRP (Single Responsibility Principle)
- Early return and guard clauses
- Delegation to service layer
- Views as orchestrators only
"""

import logging
from typing import Any, Dict

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiTypes,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.client.exceptions import (
    ClientCodeCapacityExceeded,
    DuplicateLinkError,
    NotFoundError,
)
from apps.client.serializers import (
    ClientCodeCapacityErrorResponseSerializer,
    ClientContactLinkRequestSerializer,
    ClientContactLinkResponseSerializer,
    ClientCreateRequestSerializer,
    ClientCreateResponseSerializer,
    ClientDeleteResponseSerializer,
    ClientDetailResponseSerializer,
    ClientErrorResponseSerializer,
    ClientSearchResponseSerializer,
    ClientSummarySerializer,
    ClientUpdateRequestSerializer,
    ClientUpdateResponseSerializer,
)
from apps.client.services.client_contact_link_service import ClientContactLinkService
from apps.client.services.client_rest_service import ClientRestService
from apps.workflow.exceptions import AlreadyLoggedException
from apps.workflow.services.error_persistence import persist_app_error

logger = logging.getLogger(__name__)

CLIENT_ID_PARAMETER = OpenApiParameter(
    name="client_id",
    location=OpenApiParameter.PATH,
    description="UUID of the client",
    required=True,
    type=OpenApiTypes.UUID,
)

CONTACT_ID_PARAMETER = OpenApiParameter(
    name="contact_id",
    location=OpenApiParameter.PATH,
    description="UUID of the contact",
    required=True,
    type=OpenApiTypes.UUID,
)


def _build_error_response(message: str, status_code: int) -> Response:
    serializer = ClientErrorResponseSerializer(data={"error": message})
    serializer.is_valid(raise_exception=True)
    return Response(serializer.data, status=status_code)


def _build_server_error_response(
    *,
    message: str,
    exc: Exception,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> Response:
    """Serialize an error response while ensuring exceptions persist only once."""
    if isinstance(exc, AlreadyLoggedException):
        root_exc = exc.original
        error_id = exc.app_error_id
    else:
        root_exc = exc
        app_error = persist_app_error(exc)
        error_id = getattr(app_error, "id", None)

    logger.error("%s: %s", message, root_exc)

    payload: Dict[str, Any] = {"error": message, "details": str(root_exc)}
    if error_id:
        payload["error_id"] = str(error_id)

    serializer = ClientErrorResponseSerializer(data=payload)
    serializer.is_valid(raise_exception=True)
    return Response(serializer.data, status=status_code)


def _build_capacity_error_response(exc: ClientCodeCapacityExceeded) -> Response:
    serializer = ClientCodeCapacityErrorResponseSerializer(
        data={"error": str(exc), "prefix": exc.prefix}
    )
    serializer.is_valid(raise_exception=True)
    return Response(serializer.data, status=status.HTTP_409_CONFLICT)


@extend_schema_view(
    get=extend_schema(
        summary="List all clients",
        description="Returns all clients ordered by name with their client codes and linked contact counts.",
        responses={
            200: ClientSummarySerializer(many=True),
            500: ClientErrorResponseSerializer,
        },
        tags=["Clients"],
    )
)
class ClientListAllRestView(APIView):
    """
    REST view for listing all clients.
    """

    serializer_class = ClientSummarySerializer

    def get(self, request: Request) -> Response:
        try:
            clients_data = ClientRestService.get_all_clients()
            serializer = ClientSummarySerializer(data=clients_data, many=True)
            serializer.is_valid(raise_exception=True)
            return Response(serializer.data)
        except Exception as exc:
            return _build_server_error_response(
                message="Error fetching all clients", exc=exc
            )


@extend_schema_view(
    get=extend_schema(
        summary="Search clients",
        parameters=[
            OpenApiParameter(
                name="q",
                location=OpenApiParameter.QUERY,
                required=False,
                description="Search query (min 2 chars): name substring or client code prefix",
                type=OpenApiTypes.STR,
            ),
            OpenApiParameter(
                name="limit",
                location=OpenApiParameter.QUERY,
                required=False,
                description="Max results (default 10, max 50)",
                type=OpenApiTypes.INT,
            ),
        ],
        responses={
            200: ClientSearchResponseSerializer,
            500: ClientErrorResponseSerializer,
        },
        tags=["Clients"],
    )
)
class ClientSearchRestView(APIView):
    """
    REST view for client search by name or code.
    """

    serializer_class = ClientSearchResponseSerializer

    def get(self, request: Request) -> Response:
        """
        Searches clients following early return pattern.
        """
        try:
            query = (request.GET.get("q") or "").strip()

            if not query or len(query) < 2:
                empty = {"results": []}
                serializer = ClientSearchResponseSerializer(data=empty)
                serializer.is_valid(raise_exception=True)
                return Response(serializer.data)

            # limit from query, with a sensible cap
            try:
                limit = int(request.GET.get("limit", 10))
            except ValueError:
                limit = 10
            limit = max(1, min(limit, 50))

            results = ClientRestService.search_clients(query, limit)
            serializer = ClientSearchResponseSerializer(data={"results": results})
            serializer.is_valid(raise_exception=True)
            return Response(serializer.data)

        except Exception as exc:
            return _build_server_error_response(
                message="Error searching clients", exc=exc
            )


@extend_schema_view(
    post=extend_schema(
        summary="Create a new client",
        description=(
            "Creates a client and assigns it a unique code built from the name: "
            "a three-letter prefix and the smallest free number from 100 to 999."
        ),
        request=ClientCreateRequestSerializer,
        responses={
            201: ClientCreateResponseSerializer,
            400: ClientErrorResponseSerializer,
            409: ClientCodeCapacityErrorResponseSerializer,
            500: ClientErrorResponseSerializer,
        },
        tags=["Clients"],
    )
)
class ClientCreateRestView(APIView):
    """
    REST view for creating new clients.
    Delegates code generation and persistence to the service layer.
    """

    serializer_class = ClientCreateResponseSerializer

    def get_serializer_class(self):
        """Return the appropriate serializer class based on the request method"""
        if self.request.method == "POST":
            return ClientCreateRequestSerializer
        return ClientCreateResponseSerializer

    def post(self, request: Request) -> Response:
        try:
            input_serializer = ClientCreateRequestSerializer(data=request.data)
            if not input_serializer.is_valid():
                return _build_error_response(
                    f"Invalid input data: {input_serializer.errors}",
                    status.HTTP_400_BAD_REQUEST,
                )

            created_client = ClientRestService.create_client(
                input_serializer.validated_data
            )

            response_data = {
                "success": True,
                "client": ClientRestService._format_client_summary(created_client),
                "message": (
                    "Client created successfully with code: "
                    f"{created_client.client_code}"
                ),
            }

            response_serializer = ClientCreateResponseSerializer(data=response_data)
            response_serializer.is_valid(raise_exception=True)
            return Response(response_serializer.data, status=status.HTTP_201_CREATED)

        except ClientCodeCapacityExceeded as exc:
            logger.error(f"Client creation refused: {exc} | Request data: {request.data}")
            return _build_capacity_error_response(exc)
        except ValueError as e:
            logger.warning(
                f"Invalid client creation request: {e} | Request data: {request.data}"
            )
            return _build_error_response(str(e), status.HTTP_400_BAD_REQUEST)
        except Exception as exc:
            return _build_server_error_response(
                message="Error creating client", exc=exc
            )


@extend_schema_view(
    get=extend_schema(
        summary="Get client details",
        description="Retrieve a client with its linked contacts and the contacts still available to link.",
        parameters=[CLIENT_ID_PARAMETER],
        responses={
            200: ClientDetailResponseSerializer,
            404: ClientErrorResponseSerializer,
            500: ClientErrorResponseSerializer,
        },
        tags=["Clients"],
    )
)
class ClientRetrieveRestView(APIView):
    """
    REST view for retrieving a specific client by ID.
    """

    serializer_class = ClientDetailResponseSerializer

    def get(self, request: Request, client_id: str) -> Response:
        try:
            client_data = ClientRestService.get_client_by_id(client_id)
            serializer = ClientDetailResponseSerializer(data=client_data)
            serializer.is_valid(raise_exception=True)
            return Response(serializer.data)
        except NotFoundError as e:
            return _build_error_response(str(e), status.HTTP_404_NOT_FOUND)
        except Exception as exc:
            return _build_server_error_response(
                message="Error retrieving client", exc=exc
            )


@extend_schema_view(
    put=extend_schema(
        summary="Update client",
        description="Rename a client. The client code is assigned at creation and never changes.",
        parameters=[CLIENT_ID_PARAMETER],
        request=ClientUpdateRequestSerializer,
        responses={
            200: ClientUpdateResponseSerializer,
            400: ClientErrorResponseSerializer,
            404: ClientErrorResponseSerializer,
            500: ClientErrorResponseSerializer,
        },
        tags=["Clients"],
    ),
    patch=extend_schema(
        summary="Partially update client",
        description="Rename a client. The client code is assigned at creation and never changes.",
        parameters=[CLIENT_ID_PARAMETER],
        request=ClientUpdateRequestSerializer,
        responses={
            200: ClientUpdateResponseSerializer,
            400: ClientErrorResponseSerializer,
            404: ClientErrorResponseSerializer,
            500: ClientErrorResponseSerializer,
        },
        tags=["Clients"],
    ),
)
class ClientUpdateRestView(APIView):
    """
    REST view for updating client information.
    Supports both PUT (full update) and PATCH (partial update).
    """

    serializer_class = ClientUpdateResponseSerializer

    def get_serializer_class(self):
        """Return the appropriate serializer class based on the request method"""
        if self.request.method in ["PUT", "PATCH"]:
            return ClientUpdateRequestSerializer
        return ClientUpdateResponseSerializer

    def put(self, request: Request, client_id: str) -> Response:
        return self._update_client(request, client_id, partial=False)

    def patch(self, request: Request, client_id: str) -> Response:
        return self._update_client(request, client_id, partial=True)

    def _update_client(
        self, request: Request, client_id: str, partial: bool = True
    ) -> Response:
        """
        Common method for handling client updates.
        """
        try:
            input_serializer = ClientUpdateRequestSerializer(
                data=request.data, partial=partial
            )
            if not input_serializer.is_valid():
                return _build_error_response(
                    f"Invalid input data: {input_serializer.errors}",
                    status.HTTP_400_BAD_REQUEST,
                )
            if not partial and "name" not in input_serializer.validated_data:
                return _build_error_response(
                    "Client name is required", status.HTTP_400_BAD_REQUEST
                )

            updated_client = ClientRestService.update_client(
                client_id, input_serializer.validated_data
            )

            response_data = {
                "success": True,
                "client": ClientRestService._format_client_detail(updated_client),
                "message": "Client updated successfully",
            }

            response_serializer = ClientUpdateResponseSerializer(data=response_data)
            response_serializer.is_valid(raise_exception=True)
            return Response(response_serializer.data)

        except NotFoundError as e:
            return _build_error_response(str(e), status.HTTP_404_NOT_FOUND)
        except ValueError as e:
            return _build_error_response(str(e), status.HTTP_400_BAD_REQUEST)
        except Exception as exc:
            return _build_server_error_response(
                message="Error updating client", exc=exc
            )


@extend_schema_view(
    delete=extend_schema(
        summary="Delete client",
        description="Delete a client and its contact links. Linked contacts are kept.",
        parameters=[CLIENT_ID_PARAMETER],
        responses={
            200: ClientDeleteResponseSerializer,
            404: ClientErrorResponseSerializer,
            500: ClientErrorResponseSerializer,
        },
        tags=["Clients"],
    )
)
class ClientDeleteRestView(APIView):
    """
    REST view for deleting a client.
    """

    serializer_class = ClientDeleteResponseSerializer

    def delete(self, request: Request, client_id: str) -> Response:
        try:
            client_code = ClientRestService.delete_client(client_id)
            serializer = ClientDeleteResponseSerializer(
                data={
                    "success": True,
                    "message": f"Client {client_code} deleted successfully",
                }
            )
            serializer.is_valid(raise_exception=True)
            return Response(serializer.data)
        except NotFoundError as e:
            return _build_error_response(str(e), status.HTTP_404_NOT_FOUND)
        except Exception as exc:
            return _build_server_error_response(
                message="Error deleting client", exc=exc
            )


@extend_schema_view(
    post=extend_schema(
        summary="Link a contact to a client",
        parameters=[CLIENT_ID_PARAMETER],
        request=ClientContactLinkRequestSerializer,
        responses={
            201: ClientContactLinkResponseSerializer,
            400: ClientErrorResponseSerializer,
            404: ClientErrorResponseSerializer,
            409: ClientErrorResponseSerializer,
            500: ClientErrorResponseSerializer,
        },
        tags=["Clients"],
    )
)
class ClientContactLinkRestView(APIView):
    """
    REST view for linking an existing contact to a client.
    """

    serializer_class = ClientContactLinkResponseSerializer

    def get_serializer_class(self):
        """Return the appropriate serializer class based on the request method"""
        if self.request.method == "POST":
            return ClientContactLinkRequestSerializer
        return ClientContactLinkResponseSerializer

    def post(self, request: Request, client_id: str) -> Response:
        try:
            input_serializer = ClientContactLinkRequestSerializer(data=request.data)
            if not input_serializer.is_valid():
                return _build_error_response(
                    f"Invalid input data: {input_serializer.errors}",
                    status.HTTP_400_BAD_REQUEST,
                )

            contact_id = input_serializer.validated_data["contact_id"]
            ClientContactLinkService.link(client_id, contact_id)

            serializer = ClientContactLinkResponseSerializer(
                data={
                    "success": True,
                    "message": "Contact linked successfully",
                    "client_id": str(client_id),
                    "contact_id": str(contact_id),
                }
            )
            serializer.is_valid(raise_exception=True)
            return Response(serializer.data, status=status.HTTP_201_CREATED)

        except NotFoundError as e:
            return _build_error_response(str(e), status.HTTP_404_NOT_FOUND)
        except DuplicateLinkError as e:
            return _build_error_response(str(e), status.HTTP_409_CONFLICT)
        except Exception as exc:
            return _build_server_error_response(
                message="Error linking contact", exc=exc
            )


@extend_schema_view(
    delete=extend_schema(
        summary="Unlink a contact from a client",
        parameters=[CLIENT_ID_PARAMETER, CONTACT_ID_PARAMETER],
        responses={
            200: ClientContactLinkResponseSerializer,
            404: ClientErrorResponseSerializer,
            500: ClientErrorResponseSerializer,
        },
        tags=["Clients"],
    )
)
class ClientContactUnlinkRestView(APIView):
    """
    REST view for removing the link between a client and a contact.
    """

    serializer_class = ClientContactLinkResponseSerializer

    def delete(self, request: Request, client_id: str, contact_id: str) -> Response:
        try:
            ClientContactLinkService.unlink(client_id, contact_id)
            serializer = ClientContactLinkResponseSerializer(
                data={
                    "success": True,
                    "message": "Contact unlinked successfully",
                    "client_id": str(client_id),
                    "contact_id": str(contact_id),
                }
            )
            serializer.is_valid(raise_exception=True)
            return Response(serializer.data)
        except NotFoundError as e:
            return _build_error_response(str(e), status.HTTP_404_NOT_FOUND)
        except Exception as exc:
            return _build_server_error_response(
                message="Error unlinking contact", exc=exc
            )
