"""Management command to audit client code usage per prefix."""

from collections import defaultdict

from django.core.management.base import BaseCommand, CommandError

from apps.client.models import Client
from apps.client.services.client_code_service import (
    MAX_CODE_NUMBER,
    MIN_CODE_NUMBER,
    PREFIX_LENGTH,
    _code_number,
)

PREFIX_CAPACITY = MAX_CODE_NUMBER - MIN_CODE_NUMBER + 1


class Command(BaseCommand):
    help = "Report client code usage per prefix and list malformed client codes"

    def add_arguments(self, parser):
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show usage for every prefix, not only those over the threshold",
        )
        parser.add_argument(
            "--threshold",
            type=int,
            default=800,
            help="Flag prefixes with at least this many codes in use (default: 800)",
        )

    def handle(self, *args, **options):
        verbose = options.get("verbose", False)
        threshold = options["threshold"]
        if threshold < 1 or threshold > PREFIX_CAPACITY:
            raise CommandError(f"--threshold must be between 1 and {PREFIX_CAPACITY}")

        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("Client Code Audit"))
        self.stdout.write(self.style.SUCCESS("=" * 80))

        usage, malformed = self._collect(
            Client.objects.values_list("client_code", flat=True)
        )

        self._report_usage(usage, threshold, verbose)
        self.stdout.write("")
        self._report_malformed(malformed)

    def _collect(self, codes):
        """Group well-formed codes by prefix and set aside the rest."""
        usage = defaultdict(int)
        malformed = []
        for code in codes:
            prefix = code[:PREFIX_LENGTH]
            if prefix.isascii() and prefix.isalpha() and prefix.isupper():
                if _code_number(code, prefix) is not None:
                    usage[prefix] += 1
                    continue
            malformed.append(code)
        return usage, sorted(malformed)

    def _report_usage(self, usage, threshold, verbose):
        self.stdout.write(self.style.WARNING("\n1. PREFIX USAGE"))
        self.stdout.write("-" * 80)
        self.stdout.write(
            f"Prefixes in use: {len(usage)} | Codes in use: {sum(usage.values())}"
        )

        crowded = {prefix: used for prefix, used in usage.items() if used >= threshold}
        for prefix in sorted(usage):
            used = usage[prefix]
            if prefix in crowded:
                self.stdout.write(
                    self.style.ERROR(
                        f"  {prefix}: {used}/{PREFIX_CAPACITY} (at or over {threshold})"
                    )
                )
            elif verbose:
                self.stdout.write(f"  {prefix}: {used}/{PREFIX_CAPACITY}")

        if not crowded:
            self.stdout.write(
                self.style.SUCCESS(f"No prefix has reached {threshold} codes")
            )

    def _report_malformed(self, malformed):
        self.stdout.write(self.style.WARNING("\n2. MALFORMED CODES"))
        self.stdout.write("-" * 80)
        if not malformed:
            self.stdout.write(self.style.SUCCESS("No malformed client codes found"))
            return

        self.stdout.write(
            f"Codes ignored by the generator: {len(malformed)}"
        )
        for code in malformed:
            self.stdout.write(f"  - {code!r}")
