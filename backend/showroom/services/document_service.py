# Overview: Document numbering for every record the ledger creates.

from __future__ import annotations

from ..ledger import UnitOfWork


class DocumentSequenceError(Exception):
    """Raised when document sequence operations fail."""
    pass


def format_document_number(prefix: str, number: int, pad: int) -> str:
    return f"{prefix}-{number:0{pad}d}"


def next_document_number(uow: UnitOfWork, sequence: tuple[str, str, int]) -> str:
    """
    Allocate the next number for a document type inside the current operation.

    sequence is (document_type, prefix, pad), e.g. ("INVOICE", "INV", 4)
    -> "INV-0001". Numbers are monotonic and survive deletes; an operation
    that fails never consumes one.
    """
    document_type, prefix, pad = sequence
    if not document_type:
        raise DocumentSequenceError("document_type is required")
    return format_document_number(prefix, uow.next_number(document_type), pad)
