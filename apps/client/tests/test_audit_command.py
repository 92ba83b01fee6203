"""Tests for the audit_client_codes management command."""

from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError

from apps.testing import BaseTestCase


class AuditClientCodesCommandTests(BaseTestCase):
    def _run(self, *args):
        out = StringIO()
        call_command("audit_client_codes", *args, stdout=out)
        return out.getvalue()

    def test_empty_database(self):
        output = self._run()

        self.assertIn("Prefixes in use: 0 | Codes in use: 0", output)
        self.assertIn("No prefix has reached 800 codes", output)
        self.assertIn("No malformed client codes found", output)

    def test_flags_prefixes_over_threshold(self):
        for number in (100, 101, 102):
            self.make_client(name="Acme", client_code=f"ACM{number}")
        self.make_client(name="Bank", client_code="BAN100")

        output = self._run("--threshold", "3")

        self.assertIn("ACM: 3/900 (at or over 3)", output)
        self.assertNotIn("BAN: 1/900", output)

    def test_verbose_lists_every_prefix(self):
        self.make_client(name="Bank", client_code="BAN100")

        output = self._run("--verbose")

        self.assertIn("BAN: 1/900", output)

    def test_lists_malformed_codes(self):
        self.make_client(name="Good", client_code="GOO100")
        self.make_client(name="Legacy", client_code="LEG099")
        self.make_client(name="Lower", client_code="low100")
        self.make_client(name="Short", client_code="SH1")

        output = self._run()

        self.assertIn("Prefixes in use: 1 | Codes in use: 1", output)
        self.assertIn("Codes ignored by the generator: 3", output)
        for code in ("LEG099", "low100", "SH1"):
            self.assertIn(f"'{code}'", output)

    def test_rejects_out_of_range_threshold(self):
        with self.assertRaises(CommandError):
            self._run("--threshold", "0")
