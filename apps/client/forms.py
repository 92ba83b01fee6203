from django import forms

from apps.client.exceptions import ClientCodeCapacityExceeded
from apps.client.models import Client
from apps.client.services.client_code_service import generate_client_code


class ClientForm(forms.ModelForm):
    """Validates client input. Only the name is editable; the code is generated."""

    class Meta:
        model = Client
        fields = ["name"]
        error_messages = {
            "name": {"required": "Name is required"},
        }

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("Name is required")
        return name


class ClientAdminForm(ClientForm):
    """Client form for the admin; refuses new names whose code prefix is full."""

    def clean_name(self):
        name = super().clean_name()
        if self.instance._state.adding:
            try:
                generate_client_code(name)
            except ClientCodeCapacityExceeded as exc:
                raise forms.ValidationError(str(exc))
        return name
