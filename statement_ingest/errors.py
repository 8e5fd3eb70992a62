"""Error taxonomy for ``statement_ingest``.

Malformed statement rows are never errors: extractors skip them. The only hard
failures are document access problems, which callers catch to prompt for a
passphrase or a different file and retry.
"""

from __future__ import annotations


class StatementIngestError(Exception):
    """Base class for errors raised by this package."""


class DocumentAccessError(StatementIngestError):
    """The source document could not be opened or decoded.

    The message carries the underlying library error verbatim so the caller
    can surface it unchanged.
    """


class PasswordRequiredError(DocumentAccessError):
    """The document is encrypted and no (or a wrong) passphrase was supplied."""

    def __init__(self, message: str = "document is password protected", *, retry: bool = False):
        super().__init__(message)
        # True when a passphrase was supplied but rejected.
        self.retry = retry


__all__ = ["StatementIngestError", "DocumentAccessError", "PasswordRequiredError"]
