import logging
import uuid

from django.db import models
from django.utils import timezone


class AppError(models.Model):
    """Persistent record of an application error."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    timestamp = models.DateTimeField(auto_now_add=True)
    message = models.TextField()
    data = models.JSONField(blank=True, null=True)

    # Code location fields for filtering
    app = models.CharField(max_length=50, blank=True, null=True)
    file = models.CharField(max_length=200, blank=True, null=True)
    function = models.CharField(max_length=100, blank=True, null=True)
    severity = models.IntegerField(default=logging.ERROR)

    # Commonly filtered business context
    client_id = models.UUIDField(blank=True, null=True)
    contact_id = models.UUIDField(blank=True, null=True)

    # Error resolution tracking
    resolved = models.BooleanField(default=False)
    resolved_timestamp = models.DateTimeField(blank=True, null=True)

    def mark_resolved(self):
        """Mark this error as resolved."""
        self.resolved = True
        self.resolved_timestamp = timezone.now()
        self.save()

    def mark_unresolved(self):
        """Remove the resolved flag."""
        self.resolved = False
        self.resolved_timestamp = None
        self.save()

    def __str__(self):
        return f"[{self.timestamp:%Y-%m-%d %H:%M}] {self.app or '-'}: {self.message[:80]}"

    class Meta:
        db_table = "workflow_app_error"
        ordering = ["-timestamp"]
        verbose_name = "Application Error"
        verbose_name_plural = "Application Errors"
        indexes = [
            models.Index(
                fields=["timestamp", "severity"], name="workflow_ap_timesta_4f1c2e_idx"
            ),  # Common: recent errors by severity
            models.Index(
                fields=["resolved", "timestamp"], name="workflow_ap_resolve_8d3a61_idx"
            ),  # Common: unresolved errors chronologically
            models.Index(
                fields=["app", "severity"], name="workflow_ap_app_2b9e70_idx"
            ),  # Common: errors by app section
        ]
