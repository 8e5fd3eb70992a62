"""Public interface for the ``statement_ingest`` package.

Re-exports the API functions, models and errors as the stable import surface.
There is no runtime logic here, only symbol re-exports.
"""

from .api import (
    extract_from_fragments,
    extract_from_pdf,
    extract_transactions,
    import_statement,
)
from .errors import DocumentAccessError, PasswordRequiredError, StatementIngestError
from .extractors import Extractor, available_sources, select_extractor
from .models import (
    MatchStatus,
    ParsedTransaction,
    PersistedTransaction,
    ReconciledTransaction,
    TextFragment,
    TransactionType,
)
from .reconcile import reconcile, summarize

__all__ = [
    # API
    "extract_transactions",
    "extract_from_fragments",
    "extract_from_pdf",
    "import_statement",
    "reconcile",
    "summarize",
    "select_extractor",
    "available_sources",
    # Models / types
    "Extractor",
    "MatchStatus",
    "ParsedTransaction",
    "PersistedTransaction",
    "ReconciledTransaction",
    "TextFragment",
    "TransactionType",
    # Errors
    "StatementIngestError",
    "DocumentAccessError",
    "PasswordRequiredError",
]
