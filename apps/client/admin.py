from django.contrib import admin

from apps.client.forms import ClientAdminForm
from apps.client.models import Client, ClientContactLink, Contact
from apps.client.services.client_rest_service import ClientRestService


class ClientContactLinkInline(admin.TabularInline):
    model = ClientContactLink
    extra = 0
    autocomplete_fields = ("contact",)


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    form = ClientAdminForm
    list_display = ("client_code", "name", "created_at")
    search_fields = ("name", "client_code")
    readonly_fields = ("client_code", "created_at", "updated_at")
    inlines = [ClientContactLinkInline]

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return
        # A full prefix is reported by ClientAdminForm before we get here
        ClientRestService.save_with_generated_code(obj)


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ("surname", "name", "email")
    search_fields = ("name", "surname", "email")


@admin.register(ClientContactLink)
class ClientContactLinkAdmin(admin.ModelAdmin):
    list_display = ("client", "contact", "created_at")
    list_select_related = ("client", "contact")
