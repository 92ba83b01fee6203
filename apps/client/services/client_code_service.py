"""
Client code generation.

A client code is a three-letter prefix derived from the client name followed
by a three-digit number, e.g. ``FNB101``. Numbers run from 100 to 999 and the
smallest free number for the prefix is always chosen, so codes released by
deleted clients are reused before new ones are minted.

The functions here only compute the code. Persisting it, and recovering when
a concurrent request takes the same code first, is the caller's job (see
``ClientRestService.create_client``).
"""

import logging
import re
from typing import Iterable, List, Optional, Protocol

from apps.client.exceptions import ClientCodeCapacityExceeded
from apps.client.models import Client

logger = logging.getLogger(__name__)

PREFIX_LENGTH = 3
PREFIX_PAD_CHAR = "A"
FALLBACK_PREFIX = "AAA"
NUMBER_WIDTH = 3
MIN_CODE_NUMBER = 100
MAX_CODE_NUMBER = 999
CODE_LENGTH = PREFIX_LENGTH + NUMBER_WIDTH

_WORD_RE = re.compile(r"[A-Z]+")
_NUMBER_RE = re.compile(r"[0-9]{3}")


class CodeRegistry(Protocol):
    """Anything that can list the client codes already assigned for a prefix."""

    def codes_with_prefix(self, prefix: str) -> Iterable[str]: ...


class ClientCodeRegistry:
    """Code registry backed by the ``Client`` table."""

    def codes_with_prefix(self, prefix: str) -> List[str]:
        # SQLite's LIKE ignores ASCII case, so callers must re-check the
        # prefix with an exact comparison.
        return list(
            Client.objects.filter(client_code__startswith=prefix).values_list(
                "client_code", flat=True
            )
        )


def extract_prefix(name: str) -> str:
    """
    Derive the three-letter code prefix from a client name.

    Runs of ASCII letters are words; everything else separates them.
    Multi-word names use the initials of the first three words, single-word
    names use the first three letters. Short results are padded with ``A``
    and names without letters fall back to ``AAA``.

    Examples:
        >>> extract_prefix("First National Bank")
        'FNB'
        >>> extract_prefix("Acme Co")
        'ACA'
        >>> extract_prefix("Go")
        'GOA'
        >>> extract_prefix("123")
        'AAA'
    """
    words = _WORD_RE.findall((name or "").upper())

    if not words:
        return FALLBACK_PREFIX

    if len(words) >= 2:
        letters = "".join(word[0] for word in words[:PREFIX_LENGTH])
    else:
        letters = words[0][:PREFIX_LENGTH]

    return letters.ljust(PREFIX_LENGTH, PREFIX_PAD_CHAR)


def _code_number(code: str, prefix: str) -> Optional[int]:
    """Number part of ``code`` if it is a well-formed code for ``prefix``."""
    if len(code) != CODE_LENGTH or not code.startswith(prefix):
        return None
    suffix = code[PREFIX_LENGTH:]
    if not _NUMBER_RE.fullmatch(suffix):
        return None
    number = int(suffix)
    if number < MIN_CODE_NUMBER or number > MAX_CODE_NUMBER:
        return None
    return number


def find_next_available_number(existing_codes: Iterable[str], prefix: str) -> int:
    """
    Return the smallest number in 100..999 not used by a code with ``prefix``.

    Codes of the wrong length, with a different prefix, or with a suffix that
    is not a number in range are ignored.

    Raises:
        ClientCodeCapacityExceeded: If all 900 numbers are taken.
    """
    used_numbers = sorted(
        {
            number
            for number in (_code_number(code, prefix) for code in existing_codes)
            if number is not None
        }
    )

    next_number = MIN_CODE_NUMBER
    for number in used_numbers:
        if number == next_number:
            next_number += 1
        elif number > next_number:
            break

    if next_number > MAX_CODE_NUMBER:
        raise ClientCodeCapacityExceeded(prefix)

    return next_number


def format_client_code(prefix: str, number: int) -> str:
    return f"{prefix}{number:0{NUMBER_WIDTH}d}"


def generate_client_code(name: str, registry: Optional[CodeRegistry] = None) -> str:
    """
    Compute a client code for ``name`` that is free in ``registry``.

    Read-only: the code is not reserved, so two concurrent calls can return
    the same value. The ``client_code`` unique constraint decides the winner.

    Args:
        name: Free-text client name.
        registry: Source of assigned codes. Defaults to the ``Client`` table.

    Raises:
        ClientCodeCapacityExceeded: If the prefix has no free number left.
    """
    if registry is None:
        registry = ClientCodeRegistry()

    prefix = extract_prefix(name)
    existing_codes = registry.codes_with_prefix(prefix)

    try:
        number = find_next_available_number(existing_codes, prefix)
    except ClientCodeCapacityExceeded:
        logger.error(
            "No client codes left for prefix %s (client name %r)", prefix, name
        )
        raise

    code = format_client_code(prefix, number)
    logger.debug("Computed client code %s for %r", code, name)
    return code
