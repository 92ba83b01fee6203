from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from apps.client.models import Client, Contact


class ContactSerializer(serializers.ModelSerializer):
    """Serializer for Contact model."""

    full_name = serializers.CharField(read_only=True)
    linked_clients_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Contact
        fields = Contact.CONTACT_API_FIELDS + ["full_name", "linked_clients_count"]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {
            "name": {"error_messages": {"blank": "Name is required"}},
            "surname": {"error_messages": {"blank": "Surname is required"}},
            "email": {
                "error_messages": {
                    "blank": "Email is required",
                    "invalid": "Invalid email format",
                }
            },
        }

    def validate_email(self, value):
        value = value.strip()
        duplicates = Contact.objects.filter(email__iexact=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("Email already exists")
        return value


class LinkedClientSerializer(serializers.ModelSerializer):
    """Client as shown on the contact side of a link."""

    class Meta:
        model = Client
        fields = ["id", "name", "client_code"]
        read_only_fields = fields


class ContactDetailSerializer(ContactSerializer):
    """Contact with its linked clients and the clients still available to link."""

    clients = serializers.SerializerMethodField()
    available_clients = serializers.SerializerMethodField()

    class Meta(ContactSerializer.Meta):
        fields = ContactSerializer.Meta.fields + ["clients", "available_clients"]

    @extend_schema_field(LinkedClientSerializer(many=True))
    def get_clients(self, obj):
        clients = Client.objects.filter(contact_links__contact=obj).order_by("name")
        return LinkedClientSerializer(clients, many=True).data

    @extend_schema_field(LinkedClientSerializer(many=True))
    def get_available_clients(self, obj):
        clients = Client.objects.exclude(contact_links__contact=obj).order_by("name")
        return LinkedClientSerializer(clients, many=True).data


class ClientSummarySerializer(serializers.Serializer):
    """Serializer for client list and search rows"""

    id = serializers.CharField()
    name = serializers.CharField()
    client_code = serializers.CharField()
    linked_contacts_count = serializers.IntegerField()


class ClientSearchResponseSerializer(serializers.Serializer):
    """Serializer for client search response"""

    results = ClientSummarySerializer(many=True)


class LinkedContactSerializer(serializers.Serializer):
    """Contact as shown on the client side of a link"""

    id = serializers.CharField()
    name = serializers.CharField()
    surname = serializers.CharField()
    full_name = serializers.CharField()
    email = serializers.CharField()


class ClientDetailResponseSerializer(serializers.Serializer):
    """Serializer for client detail response"""

    id = serializers.CharField()
    name = serializers.CharField()
    client_code = serializers.CharField()
    linked_contacts_count = serializers.IntegerField()
    contacts = LinkedContactSerializer(many=True)
    available_contacts = LinkedContactSerializer(many=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class ClientCreateRequestSerializer(serializers.Serializer):
    """Serializer for client creation request"""

    name = serializers.CharField(max_length=255)


class ClientCreateResponseSerializer(serializers.Serializer):
    """Serializer for client creation response"""

    success = serializers.BooleanField()
    client = ClientSummarySerializer()
    message = serializers.CharField()


class ClientUpdateRequestSerializer(serializers.Serializer):
    """Serializer for client update request. The client code cannot be changed."""

    name = serializers.CharField(max_length=255, required=False)


class ClientUpdateResponseSerializer(serializers.Serializer):
    """Serializer for client update response"""

    success = serializers.BooleanField()
    client = ClientDetailResponseSerializer()
    message = serializers.CharField()


class ClientDeleteResponseSerializer(serializers.Serializer):
    """Serializer for client deletion response"""

    success = serializers.BooleanField()
    message = serializers.CharField()


class ClientErrorResponseSerializer(serializers.Serializer):
    """Serializer for client error responses"""

    success = serializers.BooleanField(default=False)
    error = serializers.CharField()
    details = serializers.CharField(required=False)
    error_id = serializers.CharField(required=False)


class ClientCodeCapacityErrorResponseSerializer(serializers.Serializer):
    """Serializer for the error returned when a code prefix is full"""

    success = serializers.BooleanField(default=False)
    error = serializers.CharField()
    prefix = serializers.CharField()


class ClientContactLinkRequestSerializer(serializers.Serializer):
    """Serializer for linking a contact to a client"""

    contact_id = serializers.UUIDField()


class ContactClientLinkRequestSerializer(serializers.Serializer):
    """Serializer for linking a client to a contact"""

    client_id = serializers.UUIDField()


class ClientContactLinkResponseSerializer(serializers.Serializer):
    """Serializer for link and unlink responses"""

    success = serializers.BooleanField()
    message = serializers.CharField()
    client_id = serializers.CharField()
    contact_id = serializers.CharField()
