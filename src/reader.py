import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional

from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


def read_transactions(filepath: str, diagnostics: Optional[logging.Logger] = None) -> Iterator[Transaction]:
    """
    Open a CSV file of transactions and return a lazy iterator over the valid rows.

    The file is opened immediately so that a missing or unreadable file raises OSError
    here, before any transaction is produced. Rows are parsed as they are consumed.
    A leading UTF-8 byte order mark is skipped. Bytes that are not valid UTF-8 are kept
    as surrogates so that only the row containing them is dropped.
    """
    handle = open(filepath, "r", newline="", encoding="utf-8-sig", errors="surrogateescape")
    return _iter_file(handle, diagnostics or logger)


def _iter_file(handle, diagnostics: logging.Logger) -> Iterator[Transaction]:
    with handle:
        yield from parse_rows(handle, diagnostics)


def parse_rows(lines: Iterable[str], diagnostics: Optional[logging.Logger] = None) -> Iterator[Transaction]:
    """Parse header + rows, dropping (and reporting) every row that is not a well-formed transaction."""
    diagnostics = diagnostics or logger
    reader = csv.DictReader(lines)

    # An unparsable header means there is no table to read; that csv.Error propagates.
    if reader.fieldnames is None:
        diagnostics.warning("csv error: table is empty, all rows had errors or columns don't match")
        return
    reader.fieldnames = [name.replace("\ufeff", "").strip().lower() for name in reader.fieldnames]

    parsed = 0
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            diagnostics.warning(f"csv error: row on line {reader.line_num} could not be read: {e}")
            continue

        transaction = parse_row(row, reader.line_num, diagnostics)
        if transaction is not None:
            parsed += 1
            yield transaction

    if parsed == 0:
        diagnostics.warning("csv error: table is empty, all rows had errors or columns don't match")


def parse_row(row: Dict[Optional[str], object], line_num: int = 0, diagnostics: Optional[logging.Logger] = None) -> Optional[Transaction]:
    """Parse CSV row into Transaction."""
    diagnostics = diagnostics or logger

    # DictReader files surplus fields under the None key
    if None in row:
        diagnostics.warning(f"csv error: row on line {line_num} has too many columns")
        return None

    if any(isinstance(value, str) and _has_undecodable_bytes(value) for value in row.values()):
        diagnostics.warning(f"csv error: row on line {line_num} is not valid UTF-8")
        return None

    try:
        normalized = {k: v.strip() for k, v in row.items() if v is not None}

        tx_type_str = normalized["type"].lower()
        client_id = _parse_id(normalized["client"], MAX_CLIENT_ID)
        transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID)

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str:
            amount = Decimal(amount_str)
            if not amount.is_finite():
                raise ValueError(f"amount {amount_str!r} is not a finite number")

        transaction = Transaction(
            transaction_type=TransactionType(tx_type_str),
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except KeyError as e:
        diagnostics.warning(f"csv error: row on line {line_num} is missing column {e}")
        return None
    except (ValueError, InvalidOperation) as e:
        diagnostics.warning(f"csv error: deserialize of row on line {line_num} failed: {e}")
        return None

    if not transaction.format_valid():
        diagnostics.warning(f"csv error: row on line {line_num} has an amount that does not match its type: {transaction}")
        return None

    return transaction


def _parse_id(value: str, upper_bound: int) -> int:
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"{value!r} is not an unsigned integer")
    parsed = int(value)
    if parsed > upper_bound:
        raise ValueError(f"{value!r} is out of range (max {upper_bound})")
    return parsed


def _has_undecodable_bytes(value: str) -> bool:
    # surrogateescape decodes each invalid byte to a lone surrogate, which cannot be re-encoded
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return True
    return False
