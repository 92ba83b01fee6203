import uuid

from django.core.validators import RegexValidator
from django.db import models
from django.db.models.functions import Lower

CLIENT_CODE_REGEX = r"^[A-Z]{3}[0-9]{3}$"


class Client(models.Model):
    """An organisation identified by a generated, immutable client code."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    # Assigned once at creation by apps.client.services.client_code_service.
    # editable=False keeps it out of ModelForms so renames never touch it.
    client_code = models.CharField(
        max_length=6,
        unique=True,
        editable=False,
        validators=[
            RegexValidator(
                CLIENT_CODE_REGEX,
                message="Client code must be three uppercase letters and three digits",
            )
        ],
    )
    contacts = models.ManyToManyField(
        "client.Contact",
        through="client.ClientContactLink",
        related_name="clients",
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Client"
        verbose_name_plural = "Clients"

    def __str__(self):
        return f"{self.name} ({self.client_code})"

    @property
    def linked_contacts_count(self) -> int:
        annotated = getattr(self, "linked_contacts", None)
        if annotated is not None:
            return annotated
        return self.contact_links.count()


class Contact(models.Model):
    """A person who can be linked to any number of clients."""

    CONTACT_API_FIELDS = [
        "id",
        "name",
        "surname",
        "email",
        "created_at",
        "updated_at",
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    surname = models.CharField(max_length=100)
    email = models.EmailField(max_length=254)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["surname", "name"]
        verbose_name = "Contact"
        verbose_name_plural = "Contacts"
        constraints = [
            models.UniqueConstraint(
                Lower("email"), name="client_contact_email_ci_unique"
            ),
        ]

    def __str__(self):
        return f"{self.full_name} <{self.email}>"

    @property
    def full_name(self) -> str:
        """Display name in "Surname Name" order."""
        return f"{self.surname} {self.name}"

    @property
    def linked_clients_count(self) -> int:
        annotated = getattr(self, "linked_clients", None)
        if annotated is not None:
            return annotated
        return self.client_links.count()


class ClientContactLink(models.Model):
    """Many-to-many link between a client and a contact."""

    client = models.ForeignKey(
        Client, on_delete=models.CASCADE, related_name="contact_links"
    )
    contact = models.ForeignKey(
        Contact, on_delete=models.CASCADE, related_name="client_links"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Client contact link"
        verbose_name_plural = "Client contact links"
        constraints = [
            models.UniqueConstraint(
                fields=["client", "contact"], name="client_contact_link_unique"
            ),
        ]

    def __str__(self):
        return f"{self.client.client_code} <-> {self.contact.full_name}"
