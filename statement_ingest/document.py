"""PDF text layer adapter built on pdfplumber.

Turns a statement PDF into positioned :class:`~statement_ingest.models.TextFragment`
runs, one list per page, ready for the line reconstructor. pdfplumber reports
word boxes with a top-left origin; ``y`` is flipped to bottom-origin page
coordinates so that larger values sit nearer the top of the page.

Encrypted documents surface as :class:`PasswordRequiredError` so the caller
can prompt for a passphrase and retry; anything else that prevents reading
the file becomes :class:`DocumentAccessError` with the underlying message.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pdfplumber
from pdfminer.pdfdocument import PDFPasswordIncorrect

from .errors import DocumentAccessError, PasswordRequiredError
from .logging_setup import get_logger
from .models import TextFragment

logger = get_logger(__name__)


def _causes(exc: BaseException) -> Iterator[BaseException]:
    # pdfplumber wraps pdfminer errors; the pdfminer exception may sit in args or __cause__.
    seen: set[int] = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(a for a in current.args if isinstance(a, BaseException))
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                stack.append(linked)


def _is_password_error(exc: BaseException) -> bool:
    return any(isinstance(e, PDFPasswordIncorrect) for e in _causes(exc))


def _page_fragments(page) -> list[TextFragment]:
    height = float(page.height)
    return [
        TextFragment(text=w["text"], x=float(w["x0"]), y=height - float(w["bottom"]))
        for w in page.extract_words()
    ]


def read_pdf_fragments(
    path: str | os.PathLike[str], password: str | None = None
) -> list[list[TextFragment]]:
    """Return the text fragments of every page of the PDF at ``path``.

    Raises
    ------
    PasswordRequiredError
        The PDF is encrypted and ``password`` is missing or wrong.
    DocumentAccessError
        The file is missing, unreadable or not a PDF pdfplumber can parse.
    """

    try:
        with pdfplumber.open(path, password=password or "") as pdf:
            pages = [_page_fragments(page) for page in pdf.pages]
    except OSError as e:
        raise DocumentAccessError(str(e)) from e
    except Exception as e:
        if _is_password_error(e):
            if password:
                raise PasswordRequiredError("incorrect password for document", retry=True) from e
            raise PasswordRequiredError() from e
        raise DocumentAccessError(str(e) or e.__class__.__name__) from e

    logger.debug("Read %d pages from %s", len(pages), path)
    return pages


__all__ = ["read_pdf_fragments"]
