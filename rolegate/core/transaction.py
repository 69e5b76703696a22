"""
Request-scoped transaction (correlation) ID.

One value per in-flight request, held in a ContextVar so it is isolated per
thread and per asyncio task. The HTTP middleware sets it from the request
headers (or generates one) and clears it when the response is sent. Code that
runs outside a request gets a freshly generated ID on first read.

Generated IDs look like ``TXN-20250219143005-00042``: prefix, local timestamp
to the second, and a process-wide sequence number modulo 100000.
"""

import itertools
import re
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime

from rolegate.core.config import settings

TRANSACTION_ID_PATTERN = re.compile(r"^[A-Z]+-\d{14}-\d{5}$")
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
SEQUENCE_MODULUS = 100_000

# Width of the transaction_id columns; longer client-supplied IDs are not accepted.
MAX_TRANSACTION_ID_LENGTH = 64

_transaction_id_var: ContextVar[str | None] = ContextVar("transaction_id", default=None)

_sequence = itertools.count(1)
_sequence_lock = threading.Lock()


def _next_sequence() -> int:
    with _sequence_lock:
        return next(_sequence) % SEQUENCE_MODULUS


def generate_transaction_id(prefix: str | None = None) -> str:
    """Return a new ID in the form PREFIX-YYYYMMDDHHMMSS-NNNNN."""
    prefix = prefix or settings.TRANSACTION_ID_PREFIX
    timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
    return f"{prefix}-{timestamp}-{_next_sequence():05d}"


def is_valid_transaction_id(value: str | None) -> bool:
    """True when value matches PREFIX-YYYYMMDDHHMMSS-NNNNN."""
    if value is None or not value.strip():
        return False
    return TRANSACTION_ID_PATTERN.match(value) is not None


def set_transaction_id(value: str) -> None:
    _transaction_id_var.set(value)


def get_transaction_id() -> str:
    """Return the current transaction ID, generating and storing one if unset."""
    value = _transaction_id_var.get()
    if value is None:
        value = generate_transaction_id()
        _transaction_id_var.set(value)
    return value


def current_transaction_id() -> str | None:
    """Return the current transaction ID without generating one."""
    return _transaction_id_var.get()


def has_transaction_id() -> bool:
    return _transaction_id_var.get() is not None


def clear_transaction_id() -> None:
    _transaction_id_var.set(None)


@contextmanager
def transaction_scope(value: str | None = None) -> Iterator[str]:
    """
    Run a block under a transaction ID (given or generated).

    The previous value is restored on exit, so scopes nest.
    """
    token = _transaction_id_var.set(value or generate_transaction_id())
    try:
        yield _transaction_id_var.get()
    finally:
        _transaction_id_var.reset(token)
