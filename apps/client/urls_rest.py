"""
Client REST URLs

REST URLs for Client module following RESTful patterns:
- Clearly defined endpoints
- Appropriate HTTP verbs
- Consistent structure with other REST modules
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from apps.client.views.client_contact_viewset import ContactViewSet
from apps.client.views.client_rest_views import (
    ClientContactLinkRestView,
    ClientContactUnlinkRestView,
    ClientCreateRestView,
    ClientDeleteRestView,
    ClientListAllRestView,
    ClientRetrieveRestView,
    ClientSearchRestView,
    ClientUpdateRestView,
)

app_name = "clients_rest"

# Router for ViewSet-based endpoints
router = SimpleRouter()
router.register("contacts", ContactViewSet, basename="contact")

urlpatterns = [
    # Client list all REST endpoint
    path(
        "all/",
        ClientListAllRestView.as_view(),
        name="client_list_all_rest",
    ),
    # Client creation REST endpoint
    path(
        "create/",
        ClientCreateRestView.as_view(),
        name="client_create_rest",
    ),
    # Client search REST endpoint
    path(
        "search/",
        ClientSearchRestView.as_view(),
        name="client_search_rest",
    ),
    # Client retrieve REST endpoint
    path(
        "<uuid:client_id>/",
        ClientRetrieveRestView.as_view(),
        name="client_retrieve_rest",
    ),
    # Client update REST endpoint
    path(
        "<uuid:client_id>/update/",
        ClientUpdateRestView.as_view(),
        name="client_update_rest",
    ),
    # Client delete REST endpoint
    path(
        "<uuid:client_id>/delete/",
        ClientDeleteRestView.as_view(),
        name="client_delete_rest",
    ),
    # Link a contact to the client
    path(
        "<uuid:client_id>/contacts/link/",
        ClientContactLinkRestView.as_view(),
        name="client_contact_link_rest",
    ),
    # Unlink a contact from the client
    path(
        "<uuid:client_id>/contacts/<uuid:contact_id>/unlink/",
        ClientContactUnlinkRestView.as_view(),
        name="client_contact_unlink_rest",
    ),
    # ViewSet routes (contacts CRUD)
    path("", include(router.urls)),
]
