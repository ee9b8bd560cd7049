import csv
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, TextIO, Tuple

from models import ClientAccount

OUTPUT_COLUMNS = ("client", "available", "held", "total", "locked")
FOUR_PLACES = Decimal("0.0001")


def format_amount(value: Decimal) -> str:
    """Round to 4 decimal places (half away from zero) and drop trailing zeros."""
    rounded = value.quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)
    normalized = rounded.normalize()
    if normalized.is_zero():
        # normalize() keeps the sign of -0.0000
        normalized = abs(normalized)
    return f"{normalized:f}"


def account_row(account: ClientAccount) -> Tuple[str, ...]:
    return (
        str(account.client_id),
        format_amount(account.available),
        format_amount(account.held),
        format_amount(account.total),
        str(account.locked).lower(),
    )


def write_accounts(accounts: Iterable[Tuple[int, ClientAccount]], stream: TextIO) -> None:
    """Write the account snapshot as CSV, one row per client in ascending client order."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_COLUMNS)
    for _, account in sorted(accounts, key=lambda item: item[0]):
        writer.writerow(account_row(account))
