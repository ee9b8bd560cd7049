import csv
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from config import load_settings
from engine import PaymentsEngine
from writer import write_accounts

logger = logging.getLogger(__name__)

DIAGNOSTICS_LOGGER = "payments.diagnostics"


def usage(program: str) -> None:
    print(f"usage: {program} [input.csv]")
    print("       Calculates account balances from a list of transactions.")


def configure_logging(log_level: str, print_errors: bool) -> logging.Logger:
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    diagnostics = logging.getLogger(DIAGNOSTICS_LOGGER)
    diagnostics.disabled = not print_errors
    return diagnostics


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    program = argv[0] if argv else "payments-engine"

    if len(argv) != 2 or argv[1] in ("--help", "-h"):
        usage(program)
        return 0

    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 1
    diagnostics = configure_logging(settings.log_level, settings.print_errors)

    filepath = argv[1]
    engine = PaymentsEngine(diagnostics=diagnostics)
    try:
        engine.process_file(filepath)
    except (OSError, csv.Error) as e:
        logger.error(f"failed to read input file {filepath}: {e}")
        return 1

    write_accounts(engine.accounts_snapshot(), sys.stdout)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
