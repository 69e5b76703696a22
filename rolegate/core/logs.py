"""Logging setup: every record carries the current transaction ID."""

import logging
import sys

from rolegate.core.transaction import current_transaction_id

LOG_FORMAT = "%(asctime)s %(levelname)s [%(transaction_id)s] %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Placeholder when a record is emitted outside any request.
NO_TRANSACTION = "-"


class TransactionIdFilter(logging.Filter):
    """Attach ``transaction_id`` to each record; never generates a new ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "transaction_id", None):
            record.transaction_id = current_transaction_id() or NO_TRANSACTION
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install a stdout handler with the transaction-aware format on the root logger."""
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if any(isinstance(f, TransactionIdFilter) for f in handler.filters):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    handler.addFilter(TransactionIdFilter())
    root.addHandler(handler)
