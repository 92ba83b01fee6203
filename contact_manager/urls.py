from django.contrib import admin
from django.urls import include, path
from django.views.generic.base import RedirectView
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

urlpatterns = [
    path(
        "",
        RedirectView.as_view(pattern_name="redoc", permanent=False),
        name="home-redirect",
    ),
    path("admin/", admin.site.urls),
    path("clients/", include("apps.client.urls", namespace="clients")),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
