"""
Document number formatting and parsing.

Numbers look like ``INV-03/26/0012``: type prefix, two-digit month,
two-digit year, then a zero-padded serial that restarts every month.
"""

import re
from dataclasses import dataclass
from datetime import date

from erp.core.entities.document import DOCUMENT_PREFIXES, DocumentType
from erp.core.exceptions import InvalidIdentifierError

NUMBER_PATTERN = re.compile(r"^(?P<prefix>[A-Z]+)-(?P<month>\d{2})/(?P<year>\d{2})/(?P<serial>\d+)$")

_TYPES_BY_PREFIX = {prefix: kind for kind, prefix in DOCUMENT_PREFIXES.items()}


@dataclass(frozen=True)
class ParsedDocumentNumber:
    """Components of a document number."""

    document_type: DocumentType
    prefix: str
    month: int
    year: int  # four-digit
    serial: int


def bucket_prefix(document_type: DocumentType, on_date: date) -> str:
    """Shared prefix of every number in a sequence bucket, e.g. 'DN-03/26/'."""
    prefix = DOCUMENT_PREFIXES[document_type]
    return f"{prefix}-{on_date.month:02d}/{on_date.year % 100:02d}/"


def format_document_number(
    document_type: DocumentType,
    on_date: date,
    serial: int,
    width: int = 4,
) -> str:
    """Build a document number for a serial within its bucket."""
    if serial < 1:
        raise ValueError(f"serial must be positive, got {serial}")
    return f"{bucket_prefix(document_type, on_date)}{serial:0{width}d}"


def parse_document_number(number: str) -> ParsedDocumentNumber:
    """
    Split a document number into its parts.

    Raises:
        InvalidIdentifierError: If the string is not a document number
    """
    match = NUMBER_PATTERN.match(number or "")
    if not match:
        raise InvalidIdentifierError("document_number", number, "PREFIX-MM/YY/NNNN")

    prefix = match.group("prefix")
    month = int(match.group("month"))
    if prefix not in _TYPES_BY_PREFIX or not 1 <= month <= 12:
        raise InvalidIdentifierError("document_number", number, "PREFIX-MM/YY/NNNN")

    return ParsedDocumentNumber(
        document_type=_TYPES_BY_PREFIX[prefix],
        prefix=prefix,
        month=month,
        year=2000 + int(match.group("year")),
        serial=int(match.group("serial")),
    )


def is_valid_document_number(number: str, width: int = 4) -> bool:
    """True if the string is a well-formed number with at least `width` serial digits."""
    try:
        parse_document_number(number)
    except InvalidIdentifierError:
        return False
    return len(number.rsplit("/", 1)[-1]) >= width


def max_serial(numbers: list[str]) -> int:
    """Highest serial among numbers, ignoring malformed ones."""
    best = 0
    for number in numbers:
        try:
            best = max(best, parse_document_number(number).serial)
        except InvalidIdentifierError:
            continue
    return best
